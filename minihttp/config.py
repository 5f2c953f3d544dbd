import os
from dataclasses import dataclass

from .constants import DEFAULT_ADDRESS, DEFAULT_DIRECTORY, DEFAULT_PORT, SOCKET_TIMEOUT

@dataclass(frozen=True)
class ServerConfig:
    """Read-only settings shared by every connection.

    Attributes:
        base_directory: Directory that /files/ requests read from and write to.
        host: Address the listening socket binds to.
        port: Port the listening socket binds to (0 picks a free one).
        socket_timeout: Seconds a worker waits on a client read.
        keep_alive: Serve several requests per connection instead of one.
    """
    base_directory: str = DEFAULT_DIRECTORY
    host: str = DEFAULT_ADDRESS
    port: int = DEFAULT_PORT
    socket_timeout: float = SOCKET_TIMEOUT
    keep_alive: bool = False

    def resolve_file(self, filename: str) -> str | None:
        """Joins filename onto base_directory.

        Returns None when the canonical result, symlinks followed, would
        leave base_directory.
        """
        root = os.path.realpath(self.base_directory)
        full_path = os.path.realpath(os.path.join(root, filename))
        if os.path.commonpath([root, full_path]) != root:
            return None
        return full_path
