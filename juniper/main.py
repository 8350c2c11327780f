import logging
import traceback
from functools import reduce
from logging import Logger
from threading import Thread
from typing import Optional, Sequence
from wsgiref.simple_server import WSGIServer

from juniper.exceptions import ConfigError
from juniper.httperr import handle_error
from juniper.local_server import LocalServerMixin
from juniper.request import Request
from juniper.response import ResponseWriter
from juniper.utils import (
    Handler,
    Headers,
    Middleware,
    get_http_status_by_code,
    import_by_string,
)

console_logger = logging.getLogger(__name__)
logging.basicConfig(level=logging.INFO)


def chain(*middleware: Middleware) -> Middleware:
    """
    Compose middleware into one. The first middleware given is the outermost,
    so it sees the request first and the response last.
    """

    def outer(handler: Handler) -> Handler:
        return reduce(lambda h, m: m(h), reversed(middleware), handler)

    return outer


class WSGIHandler(LocalServerMixin):
    """Serve a handler, wrapped in middleware, as a WSGI application."""

    def __init__(
        self,
        handler: Handler,
        *,
        middleware: Sequence[str | Middleware] = None,
        addr: str = None,
        port: int = None,
        log: Logger = None,
    ):
        self.addr = addr if addr else "localhost"
        self.port = port if port is not None else 8000
        self._middleware: list[str | Middleware] = list(middleware or [])
        self.middleware: list[Middleware] = []
        self.log: Logger = log if log else console_logger

        # for using .start() and .stop()
        self._thread: Optional[Thread] = None
        self._server: Optional[WSGIServer] = None

        self.init_middleware()
        self.handler = chain(*self.middleware)(handler)

    def init_middleware(self):
        for m in self._middleware:
            if isinstance(m, str):
                try:
                    self.middleware.append(import_by_string(m))
                except ImportError:
                    raise ConfigError(f"Middleware '{m}' not found.")
            else:
                self.middleware.append(m)

    def get_request(self, environ) -> Request:
        return Request(environ=environ)

    def fire_response(
        self, start_response, request: Request, w: ResponseWriter
    ) -> list[bytes]:
        status_code, headers, body = w.result()
        w.close()
        header_list = []
        for k, v in headers.items():
            k = Headers.canonical(k)
            # several headers of the same name, e.g. set-cookie
            if isinstance(v, (list, tuple)):
                header_list.extend((k, str(i)) for i in v)
            else:
                header_list.append((k, str(v)))
        try:
            start_response(get_http_status_by_code(status_code), header_list)
        except ConnectionAbortedError as e:
            self.log.error(f"{request.method} {request.path} : {e}")
            return []
        return [body]

    def __call__(self, environ, start_response, *args, **kwargs):
        """Entry point for WSGI apps."""
        request = self.get_request(environ)
        w = ResponseWriter(log=self.log)
        try:
            self.handler(w, request)
        except Exception as e:
            self.log.error(f"{request.method} {request.path} : {e}")
            self.log.error(traceback.format_exc())
            # if the handler already started a response there's nothing
            # sensible left to do but send what it wrote
            if not w.wrote_header:
                handle_error(w, e)
        return self.fire_response(start_response, request, w)
