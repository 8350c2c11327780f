from juniper.constants import (  # noqa: F401
    __version__,
    DEFAULT_CONTENT_TYPE,
    STASH_KEY_REQUEST,
    STASH_KEY_FUNC_MAP,
    STASH_KEY_TEMPLATE,
    STASH_KEY_STATUS,
    STASH_KEY_ENTRY_POINT,
)
from juniper.donewriter import DoneWriter, writer_is_done, wrap_writer  # noqa: F401
from juniper.exceptions import (  # noqa: F401
    JuniperException,
    ConfigError,
    TemplateNameError,
    TemplateLoadError,
    NotADoneWriter,
    WriterClosed,
)
from juniper.httperr import StatusError, handle_error, status_code  # noqa: F401
from juniper.main import WSGIHandler, chain  # noqa: F401
from juniper.request import Request  # noqa: F401
from juniper.response import ResponseWriter  # noqa: F401
from juniper.stash import Stash, get_stash, set_stash  # noqa: F401
from juniper.view import FuncMap, View, ViewConfig  # noqa: F401
