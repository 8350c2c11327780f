import importlib
from collections.abc import Mapping
from http import HTTPStatus
from os import PathLike
from pathlib import PurePath
from typing import Callable


def import_by_string(name):
    # "package.module.attribute" -> attribute
    module_name, _, attr = name.rpartition(".")
    if not module_name:
        raise ImportError(f"'{name}' is not a dotted path.")
    mod = importlib.import_module(module_name)
    try:
        return getattr(mod, attr)
    except AttributeError:
        raise ImportError(f"'{module_name}' has no attribute '{attr}'.")


def get_http_status_by_code(code: int) -> str:
    """
    Get the full HTTP status line required by WSGI by code.

    Codes that the stdlib doesn't know about are still passed through, since
    handlers are allowed to send whatever status they like.

    Example:
        >>> get_http_status_by_code(200)
        '200 OK'
        >>> get_http_status_by_code(600)
        '600 Unknown Status'
    """
    try:
        resp = HTTPStatus(code)
    except ValueError:
        return f"{code} Unknown Status"
    return f"{resp.value} {resp.phrase}"


# https://stackoverflow.com/a/7839576
def is_safe_path(path: str | PathLike) -> bool:
    # relative, and never climbing out of the directory it is joined onto
    path = PurePath(path)
    return not path.is_absolute() and ".." not in path.parts


def get_client_address(environ: dict) -> str:
    try:
        return environ["HTTP_X_FORWARDED_FOR"].split(",")[-1].strip()
    except KeyError:
        return environ.get("REMOTE_ADDR", "unknown")


def is_func_map(value) -> bool:
    """True if `value` is a mapping of string names to callables."""
    if not isinstance(value, Mapping):
        return False
    return all(isinstance(k, str) and callable(v) for k, v in value.items())


def format_message(fmt: str, args: tuple) -> str:
    return fmt % args if args else fmt


class Headers(dict):
    # special dict that forces lowercase, dash-separated keys so that
    # `Content-Type`, `content_type` and `CONTENT-TYPE` all name the same header
    def __init__(self, *args, **kwargs):
        super().__init__()
        self.update(*args, **kwargs)

    @staticmethod
    def normalize(key: str) -> str:
        return key.lower().replace("_", "-")

    @staticmethod
    def canonical(key: str) -> str:
        # the form headers are sent in: "content-type" -> "Content-Type"
        return "-".join(part.capitalize() for part in key.split("-"))

    def __getitem__(self, key):
        return super().__getitem__(self.normalize(key))

    def __setitem__(self, key, value):
        return super().__setitem__(self.normalize(key), value)

    def __delitem__(self, key):
        return super().__delitem__(self.normalize(key))

    def __contains__(self, item):
        return isinstance(item, str) and super().__contains__(self.normalize(item))

    def get(self, key, default=None):
        return super().get(self.normalize(key), default)

    def setdefault(self, key, default=None):
        return super().setdefault(self.normalize(key), default)

    def pop(self, key, *args):
        return super().pop(self.normalize(key), *args)

    def update(self, *args, **kwargs):
        for k, v in dict(*args, **kwargs).items():
            self[k] = v

    def copy(self) -> "Headers":
        return Headers(self)


Handler = Callable[..., None]
Middleware = Callable[[Handler], Handler]
