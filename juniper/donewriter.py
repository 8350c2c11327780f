"""
A thin wrapper around a ResponseWriter which tracks whether a response has
been sent. Put `wrap_writer` early in the middleware stack, then check the
state in later middleware or handlers:

    app = WSGIHandler(index, middleware=[wrap_writer])

    def index(w, request):
        if writer_is_done(w):
            # Nothing to do, a response was already sent
            return
        # Normal operation here...
"""
from juniper.exceptions import NotADoneWriter
from juniper.utils import Handler


class DoneWriter:
    # Anything that isn't a write is handed straight to the wrapped writer, so
    # handlers can keep poking at `headers` and friends as usual.

    def __init__(self, writer):
        self.writer = writer
        self._done = False

    def __getattr__(self, name):
        return getattr(self.writer, name)

    @property
    def done(self) -> bool:
        return self._done

    def write_header(self, status: int) -> None:
        self._done = True
        return self.writer.write_header(status)

    def write(self, data: bytes | str) -> int:
        self._done = True
        return self.writer.write(data)


def writer_is_done(writer) -> bool:
    """
    Return True if a response has been written through `writer`.

    Raises NotADoneWriter if `writer` isn't a DoneWriter.
    """
    if isinstance(writer, DoneWriter):
        return writer.done
    raise NotADoneWriter(f"{writer!r} is not a DoneWriter.")


def wrap_writer(next_handler: Handler) -> Handler:
    def handler(w, request):
        next_handler(DoneWriter(w), request)

    return handler
