import pathlib
from wsgiref.util import setup_testing_defaults

from juniper import WSGIHandler
from juniper.request import Request
from juniper.stash import Stash, _stash_context_key

TEMPLATE_DIR = pathlib.Path(__file__).parent / "templates"
INCLUDE_DIR = TEMPLATE_DIR / "includes"


class StartResponse:
    def __init__(self):
        self.status = None
        self.headers = None

    def __call__(self, status, headers):
        self.status = status
        self.headers = headers

    @property
    def status_code(self) -> int:
        return int(self.status.split(" ")[0])

    def get_headers(self):
        return {h[0]: h[1] for h in self.headers} if self.headers else {}


def noop(w, request):
    # Do nothing
    pass


def setup(handler=noop, **kwargs):
    environ = {}
    setup_testing_defaults(environ)
    return (
        WSGIHandler(handler, **kwargs),
        environ,
        StartResponse(),
    )


class RequestFactory:
    @staticmethod
    def create_request(
        method="GET",
        path="/",
        environ=None,
        content=None,
        headers=None,
        context=None,
    ):
        if not environ:
            environ = {}
        environ["REQUEST_METHOD"] = method
        environ["PATH_INFO"] = path
        setup_testing_defaults(environ)
        environ["HTTP_USER_AGENT"] = "Mozilla/5.0 (testrequest)"
        environ["REMOTE_ADDR"] = "192.0.2.1"
        environ["REMOTE_PORT"] = "1234"
        return Request(
            environ=environ,
            content=content,
            headers=headers,
            context=context,
        )

    @classmethod
    def stash_request(cls, stash: dict = None, **kwargs) -> Request:
        request = cls.create_request(**kwargs)
        return request.with_context(_stash_context_key, Stash(stash or {}))
