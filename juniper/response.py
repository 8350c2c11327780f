import logging
from logging import Logger

from juniper.constants import DEFAULT_ENCODING
from juniper.exceptions import WriterClosed
from juniper.utils import Headers

console_logger = logging.getLogger(__name__)


class ResponseWriter:
    """
    The response sink handed to every handler.

    Handlers may change `headers` freely until the status is written, either
    explicitly through `write_header` or implicitly by the first `write`. At
    that point the headers are frozen into `written_headers`; later changes to
    `headers` are not part of the response.

    Everything written is buffered so the WSGI layer can send it once the
    handler chain returns. The same class doubles as a recorder in tests.
    """

    def __init__(self, log: Logger = None):
        self.headers: Headers = Headers()
        self.status_code: int | None = None
        self.written_headers: Headers | None = None
        self.chunks: list[bytes] = []
        self.closed = False
        self.log = log if log else console_logger

    def write_header(self, status: int) -> None:
        if self.status_code is not None:
            self.log.warning(
                f"Superfluous write_header({status}); status {self.status_code}"
                f" was already sent."
            )
            return
        self.status_code = status
        self.written_headers = self.headers.copy()

    def write(self, data: bytes | str) -> int:
        if self.closed:
            raise WriterClosed("Cannot write to a closed response.")
        if isinstance(data, str):
            data = data.encode(DEFAULT_ENCODING)
        if self.status_code is None:
            self.write_header(200)
        self.chunks.append(data)
        return len(data)

    def close(self) -> None:
        self.closed = True

    @property
    def wrote_header(self) -> bool:
        return self.status_code is not None

    @property
    def body(self) -> bytes:
        return b"".join(self.chunks)

    def result(self) -> tuple[int, Headers, bytes]:
        # a handler which never wrote anything still produced a 200
        if self.status_code is None:
            return 200, self.headers.copy(), b""
        return self.status_code, self.written_headers, self.body
