"""
Development server built on wsgiref. Not for production use; point gunicorn or
any other WSGI server at the WSGIHandler instead.

    with WSGIHandler(index, port=0) as app:
        urlopen(f"http://{app.addr}:{app.port}/")
"""
import threading
from logging import Logger
from typing import Optional
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from juniper.constants import __version__


class JuniperRequestHandler(WSGIRequestHandler):
    server_version = "juniper/" + __version__

    def log_message(self, format, *args):
        self.server.log.info(f"{self.address_string()} - {format % args}")


class LocalServerMixin:
    """Cannot be called on its own. Requires context of WSGIHandler."""

    addr: str
    port: int
    log: Logger
    _server: Optional[WSGIServer]
    _thread: Optional[threading.Thread]

    def create_server(self) -> WSGIServer:
        server = make_server(
            self.addr, self.port, self, handler_class=JuniperRequestHandler
        )
        server.log = self.log
        # port 0 lets the OS pick; remember the port we actually got
        self.port = server.server_address[1]
        return server

    def start(self, blocking=False) -> Optional[threading.Thread]:
        if self._server is not None:
            raise RuntimeError("Server is already running.")
        self._server = self.create_server()
        self.log.info(f"Starting server on {self.addr}:{self.port}")

        if blocking:
            self.log.info("Press CTRL+C to stop the server.")
            try:
                self._server.serve_forever()
            except KeyboardInterrupt:
                self.log.warning("Shutting down!")
            finally:
                self._server.server_close()
                self._server = None
            return None

        self._thread = threading.Thread(target=self._server.serve_forever, daemon=True)
        self._thread.start()
        return self._thread

    def stop(self) -> None:
        if self._server is None:
            return
        self.log.info("Stopping server.")
        self._server.shutdown()
        self._server.server_close()
        self._thread.join()
        self._server = None
        self._thread = None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, tb):
        self.stop()
