"""
Errors which know which HTTP status they should be served with.

    raise httperr.wrapf(404, e, "user %s", user_id)

Anything with a `status_code()` method returning an int is understood by
`status_code` and `handle_error`, not only the StatusError defined here, so
other libraries can plug their own error types in.
"""
from typing import Optional

from juniper.utils import format_message


class StatusError(Exception):
    def __init__(self, status: int, err: BaseException):
        super().__init__(status, err)
        self.status = status
        self.cause = err
        self.__cause__ = err

    def __str__(self):
        return str(self.cause)

    def __repr__(self):
        return f"{self.__class__.__name__}({self.status}, {self.cause!r})"

    def status_code(self) -> int:
        return self.status

    def unwrap(self) -> BaseException:
        return self.cause


class MessageError(Exception):
    # A message layered on top of another error; renders as "<msg>: <cause>".
    def __init__(self, msg: str, err: Optional[BaseException] = None):
        super().__init__(msg)
        self.msg = msg
        self.cause = err
        self.__cause__ = err

    def __str__(self):
        if self.cause is None:
            return self.msg
        return f"{self.msg}: {self.cause}"

    def unwrap(self) -> Optional[BaseException]:
        return self.cause


def wrap(status: int, err: BaseException) -> StatusError:
    """Bundle an existing error with a status code."""
    return StatusError(status, err)


def wrapf(status: int, err: BaseException, fmt: str, *args) -> StatusError:
    """Bundle an existing error with a status code and add a message."""
    return wrap(status, MessageError(format_message(fmt, args), err))


def new(status: int, msg: str) -> StatusError:
    return wrap(status, MessageError(msg))


def errorf(status: int, fmt: str, *args) -> StatusError:
    return wrap(status, MessageError(format_message(fmt, args)))


def cause(err: BaseException) -> BaseException:
    """Follow `unwrap()` down to the innermost error."""
    while True:
        unwrap = getattr(err, "unwrap", None)
        if not callable(unwrap):
            return err
        inner = unwrap()
        if inner is None:
            return err
        err = inner


def status_code(err: Optional[BaseException]) -> int:
    """
    Return the HTTP status code carried by `err`.

    0 if there is no error at all, whatever `err.status_code()` says if it has
    such a method, and 500 (internal server error) for everything else.
    """
    if err is None:
        return 0
    coder = getattr(err, "status_code", None)
    if callable(coder):
        status = coder()
        if isinstance(status, int) and not isinstance(status, bool):
            return status
    return 500


def handle_error(w, err: Optional[BaseException]) -> None:
    """
    Serve an error response for `err`, or do nothing if `err` is None.

    The body is `Error <status>: <message>`. If the response can't be written,
    for instance because the writer is closed, the writer's error propagates.
    """
    if err is None:
        return
    status = status_code(err)
    w.write_header(status)
    w.write(f"Error {status}: {err}")
