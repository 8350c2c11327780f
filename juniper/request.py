import copy
import json
from typing import Any
from urllib.parse import parse_qs

from juniper.constants import DEFAULT_ENCODING
from juniper.utils import get_client_address, Headers


class Request:
    def __init__(
        self,
        environ=None,
        content=None,
        headers=None,
        path=None,
        context=None,
    ):
        self.environ = environ
        self.content: str = content
        self.method: str = environ["REQUEST_METHOD"]
        self.headers: Headers = Headers(headers if headers else {})
        self.path: str = path if path else environ.get("PATH_INFO", "/")
        self.query_string: str = environ.get("QUERY_STRING", "")
        self.GET = {}
        self.META = {}
        # request-scoped values; see `with_context`
        self.context: dict[Any, Any] = dict(context) if context else {}

        self.populate_headers()
        self.populate_meta()
        self.populate_query()

        content_length = int(self.headers.get("content-length") or 0)
        if content_length and self.content is None:
            self.content = (
                self.environ["wsgi.input"].read(content_length).decode(DEFAULT_ENCODING)
            )

    def __repr__(self):
        return f"<Request {self.method} {self.path}>"

    def populate_headers(self) -> None:
        if content_type := self.environ.get("CONTENT_TYPE"):
            self.headers["content-type"] = content_type
        if content_length := self.environ.get("CONTENT_LENGTH"):
            self.headers["content-length"] = content_length
        for k, v in self.environ.items():
            if k.startswith("HTTP_"):
                self.headers[k[5:]] = v

    def populate_meta(self) -> None:
        # all caps fields are from WSGI, lowercase names
        # are custom
        fields = [
            "SERVER_PROTOCOL",
            "SERVER_SOFTWARE",
            "REQUEST_METHOD",
            "PATH_INFO",
            "QUERY_STRING",
            "REMOTE_HOST",
            "REMOTE_ADDR",
            "REMOTE_PORT",
            "SERVER_NAME",
            "SERVER_PORT",
            "CONTENT_LENGTH",
            "SCRIPT_NAME",
        ]
        for f in fields:
            self.META[f] = self.environ.get(f)
        self.META["client_address"] = get_client_address(self.environ)

    def populate_query(self) -> None:
        for key, value in parse_qs(self.query_string).items():
            self.GET[key] = value[0] if len(value) == 1 else value

    @property
    def remote_addr(self) -> str:
        """The peer address as `host:port`, or just `host` if the port is unknown."""
        addr = self.META.get("REMOTE_ADDR") or "unknown"
        if port := self.META.get("REMOTE_PORT"):
            return f"{addr}:{port}"
        return addr

    def json(self):
        return json.loads(self.content)

    def value(self, key) -> Any:
        return self.context.get(key)

    def with_context(self, key, value) -> "Request":
        """
        Return a copy of this request with `key` set to `value` in its context.

        The copy is shallow; only the context mapping is new, so the original
        request never sees values added further down the handler chain.
        """
        clone = copy.copy(self)
        clone.context = {**self.context, key: value}
        return clone
