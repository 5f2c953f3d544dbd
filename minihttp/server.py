import socket
import threading
import logging
from typing import Optional, Tuple

from .config import ServerConfig
from .constants import RECV_BUFFER_SIZE
from .http_request import HTTPRequest
from .http_response import HTTPResponse
from .router import Router, default_router
from .exceptions import IncompleteBodyError, MalformedRequestError

logger = logging.getLogger(__name__)

class HTTPServer:
    """A basic HTTP/1.1 server, one thread per connection."""

    def __init__(self, config: Optional[ServerConfig] = None, router: Optional[Router] = None):
        """Initializes the HTTP server.

        Args:
            config: Listening address, serving directory and connection policy.
            router: A Router instance. If None, the fixed route table is used.
        """
        self.config = config if config is not None else ServerConfig()
        self.router = router if router is not None else default_router()
        self._server_socket: Optional[socket.socket] = None
        self._is_running = False

        logger.info(f"Serving files from directory: {self.config.base_directory}")

    @property
    def server_address(self) -> Tuple[str, int]:
        """The (host, port) actually bound; useful when configured with port 0."""
        if self._server_socket is None:
            raise RuntimeError("Server socket is not bound")
        host, port = self._server_socket.getsockname()[:2]
        return host, port

    def bind(self):
        """Creates the listening socket without accepting yet."""
        # SO_REUSEPORT allows multiple instances on the same port (useful for testing/dev)
        self._server_socket = socket.create_server((self.config.host, self.config.port), reuse_port=True)
        self._is_running = True
        host, port = self.server_address
        logger.info(f"Server started on {host}:{port}")

    def _handle_client_connection(self, client_socket: socket.socket, address: tuple):
        """Handles a single client connection.

        Serves one exchange, or several when keep-alive is configured and the
        client does not ask to close.
        """
        client_socket.settimeout(self.config.socket_timeout)
        peername = f"{address[0]}:{address[1]}"
        logger.info(f"Connection established with {peername}")
        reader = client_socket.makefile("rb", buffering=RECV_BUFFER_SIZE)

        try:
            while True:
                response: Optional[HTTPResponse] = None
                close_connection = not self.config.keep_alive

                try:
                    request = HTTPRequest.from_stream(reader)
                    if request is None:
                        logger.info(f"Client {peername} closed connection.")
                        break
                    logger.info(f"Received request from {peername}: {request.method.value} {request.path}")

                    close_connection = close_connection or request.should_close_connection
                    response = self.router.dispatch(request, self.config)
                    # Server errors always end the connection
                    close_connection = close_connection or response.status_code >= 500

                except IncompleteBodyError as e:
                    logger.warning(f"Incomplete request from {peername}: {e}")
                    break
                except MalformedRequestError as e:
                    # Best-effort 400; the stream position is unknown so the connection ends
                    logger.warning(f"Malformed request from {peername}: {e}")
                    response = HTTPResponse.from_exception(e)
                    close_connection = True
                except socket.timeout:
                    logger.warning(f"Connection to {peername} timed out.")
                    break
                except ConnectionResetError:
                    logger.warning(f"Connection to {peername} reset by peer.")
                    break
                except OSError as e:
                    logger.error(f"Socket error reading from {peername}: {e}")
                    break

                try:
                    client_socket.sendall(response.to_bytes(close_connection=close_connection))
                except (BrokenPipeError, ConnectionResetError):
                    logger.warning(f"Client {peername} went away before the response was sent.")
                    break
                except OSError as e:
                    logger.error(f"Socket error sending to {peername}: {e}")
                    break
                logger.info(f"Sent response to {peername}: {response.status_code.value} {response.status_text}")

                if close_connection:
                    logger.info(f"Closing connection to {peername}.")
                    break

        finally:
            reader.close()
            try:
                client_socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass # Peer already gone
            client_socket.close()
            logger.debug(f"Socket for {peername} closed.")

    def serve_forever(self):
        """Accepts connections until stop() is called, one thread each.

        Returns immediately unless bind() has been called.
        """
        server_socket = self._server_socket

        while self._is_running and server_socket is not None:
            try:
                client_socket, address = server_socket.accept()
            except OSError as e:
                # accept() fails once stop() has closed the socket
                if self._is_running:
                    logger.error(f"Error accepting connection: {e}")
                    continue
                logger.info("Server socket closed, stopping accept loop.")
                break

            # Use daemon=True so threads don't block program exit
            thread = threading.Thread(
                target=self._handle_client_connection,
                args=(client_socket, address),
                daemon=True,
                name=f"Client-{address[0]}:{address[1]}"
            )
            thread.start()

    def start(self):
        """Starts the server and blocks until it is stopped."""
        try:
            if self._server_socket is None:
                self.bind()
            self.serve_forever()
        except OSError as e:
            logger.error(f"Failed to start server on {self.config.host}:{self.config.port}: {e}")
            raise
        except KeyboardInterrupt:
            logger.info("Server shutting down due to KeyboardInterrupt...")
        finally:
            self.stop()

    def stop(self):
        """Stops the server and closes the server socket."""
        self._is_running = False
        if self._server_socket:
            logger.info("Closing server socket...")
            try:
                # Wakes a thread blocked in accept()
                self._server_socket.shutdown(socket.SHUT_RDWR)
            except OSError:
                pass # Not connected on some platforms
            try:
                self._server_socket.close()
            except OSError as e:
                logger.warning(f"Error closing server socket: {e}")
            self._server_socket = None
        logger.info("Server stopped.")
