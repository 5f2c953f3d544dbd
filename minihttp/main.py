import sys
import logging
from typing import List, Optional, Tuple

from .config import ServerConfig
from .constants import DEFAULT_ADDRESS, DEFAULT_DIRECTORY, DEFAULT_PORT
from .server import HTTPServer

USAGE = "usage: serve [DIRECTORY | --directory DIRECTORY] [--host HOST] [--port PORT] [--keep-alive] [--verbose]"

LOG_FORMAT = "%(asctime)s - %(threadName)s - %(levelname)s - %(message)s"

def parse_args(argv: List[str]) -> Tuple[ServerConfig, bool]:
    """Parses command line arguments into a ServerConfig and the verbose flag.

    Raises:
        ValueError: On unknown options, missing option values or a bad port.
    """
    directory: Optional[str] = None
    host = DEFAULT_ADDRESS
    port = DEFAULT_PORT
    keep_alive = False
    verbose = False

    args = list(argv)
    while args:
        arg = args.pop(0)
        if arg in ("--directory", "--host", "--port"):
            if not args:
                raise ValueError(f"{arg} requires a value")
            value = args.pop(0)
            if arg == "--directory":
                directory = value
            elif arg == "--host":
                host = value
            else:
                try:
                    port = int(value)
                except ValueError:
                    raise ValueError(f"Invalid port: {value!r}")
                if not 0 <= port <= 65535:
                    raise ValueError(f"Port out of range: {port}")
        elif arg == "--keep-alive":
            keep_alive = True
        elif arg in ("-v", "--verbose"):
            verbose = True
        elif arg.startswith("-"):
            raise ValueError(f"Unknown option: {arg}")
        elif directory is None:
            directory = arg
        else:
            raise ValueError(f"Unexpected argument: {arg}")

    config = ServerConfig(
        base_directory=directory if directory is not None else DEFAULT_DIRECTORY,
        host=host,
        port=port,
        keep_alive=keep_alive,
    )
    return config, verbose

def main(argv: Optional[List[str]] = None) -> int:
    try:
        config, verbose = parse_args(sys.argv[1:] if argv is None else argv)
    except ValueError as e:
        print(f"serve: {e}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        return 2

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format=LOG_FORMAT)

    server = HTTPServer(config=config)
    try:
        server.start()
    except OSError:
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
