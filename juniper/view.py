"""
MVC-style view support.

The View middleware gives every request a stash. Handlers fill the stash and
return without writing anything; the view then renders a template with the
stash as its context:

    view = View(template_dir="templates", default_template="index.html")

    def hello(w, request):
        get_stash(request)["Name"] = "Gregory"

    app = WSGIHandler(hello, middleware=[view])

A handler that writes its own response (a redirect, some JSON) is left alone.

Template functions and stash data share one namespace in Jinja, and data
wins: a stash key named like a function hides that function for the render.
The view logs a warning when that happens.

Template names come from handlers and are joined onto the template dir, so
absolute names and names containing `..` are refused.
"""
import logging
import os
import pathlib
import traceback
from logging import Logger
from typing import Any, Callable, Optional

from jinja2 import TemplateError
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from juniper import httperr
from juniper.constants import (
    DEFAULT_CONTENT_TYPE,
    STASH_KEY_ENTRY_POINT,
    STASH_KEY_FUNC_MAP,
    STASH_KEY_REQUEST,
    STASH_KEY_STATUS,
    STASH_KEY_TEMPLATE,
)
from juniper.donewriter import DoneWriter
from juniper.exceptions import ConfigError, TemplateLoadError, TemplateNameError
from juniper.jinja_core import JuniperEnvironment, TemplateSetLoader
from juniper.request import Request
from juniper.stash import Stash, get_stash, set_stash
from juniper.utils import Handler, is_func_map, is_safe_path

console_logger = logging.getLogger(__name__)


class FuncMap(dict):
    """Template functions, keyed by the name templates call them by."""


class ViewConfig(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    template_dir: str = ""
    default_template: str = ""
    funcs: dict[str, Callable[..., Any]] = Field(default_factory=dict)
    includes: tuple[str, ...] = ()
    default_entry_point: str = ""

    @field_validator("template_dir", mode="before")
    @classmethod
    def fspath(cls, value):
        if value is None:
            return ""
        if isinstance(value, os.PathLike):
            return os.fspath(value)
        return value

    @field_validator("includes", mode="before")
    @classmethod
    def fspaths(cls, value):
        if value is None:
            return ()
        if isinstance(value, (str, os.PathLike)):
            value = [value]
        return tuple(os.fspath(v) if isinstance(v, os.PathLike) else v for v in value)

    @field_validator("funcs", mode="before")
    @classmethod
    def no_funcs(cls, value):
        return {} if value is None else value


class View:
    def __init__(
        self,
        template_dir: str | os.PathLike = "",
        default_template: str = "",
        funcs: dict[str, Callable] = None,
        includes: list[str | os.PathLike] = None,
        default_entry_point: str = "",
        log: Logger = None,
    ):
        try:
            self.config = ViewConfig(
                template_dir=template_dir,
                default_template=default_template,
                funcs=funcs,
                includes=includes,
                default_entry_point=default_entry_point,
            )
        except ValidationError as e:
            raise ConfigError(f"Invalid view configuration: {e}") from e
        self.log: Logger = log if log else console_logger
        self.check_dirs()

    def check_dirs(self) -> None:
        # warnings only; a missing directory fails at render time
        dirs = [self.config.template_dir, *self.config.includes]
        for directory in filter(None, dirs):
            if not pathlib.Path(directory).is_dir():
                self.log.warning(f"Template directory '{directory}' does not exist.")

    def __call__(self, next_handler: Handler) -> Handler:
        def handler(rw, request: Request):
            w = DoneWriter(rw)
            request = set_stash(request)
            stash = get_stash(request)
            stash[STASH_KEY_REQUEST] = request
            next_handler(w, request)
            if w.done:
                return
            self.render(w, request, stash)

        return handler

    def template_name(self, stash: Stash) -> str:
        name = stash.get(STASH_KEY_TEMPLATE)
        if isinstance(name, str) and name:
            return name
        if self.config.default_template:
            return self.config.default_template
        raise TemplateNameError("no template name provided")

    def entry_point(self, name: str, stash: Stash) -> str:
        entry = stash.get(STASH_KEY_ENTRY_POINT)
        if isinstance(entry, str) and entry:
            return entry
        return self.config.default_entry_point or name

    def funcs(self, stash: Stash) -> dict[str, Callable]:
        # Always a fresh dict: the configured table is shared by every request.
        funcs = dict(self.config.funcs)
        override = stash.get(STASH_KEY_FUNC_MAP)
        if isinstance(override, FuncMap) or is_func_map(override):
            funcs.update(override)
        return funcs

    def parse(self, env: JuniperEnvironment, name: str, path: pathlib.Path) -> None:
        try:
            env.get_template(name)
        except (TemplateError, OSError, UnicodeDecodeError) as e:
            raise httperr.wrapf(httperr.status_code(e), e, "%s", path)

    def get_environment(self, name: str, stash: Stash) -> JuniperEnvironment:
        if not self.config.template_dir:
            raise ConfigError("template dir not defined")
        if not is_safe_path(name):
            raise TemplateLoadError(f'template name "{name}" is outside the template dir')

        loader = TemplateSetLoader()
        path = pathlib.Path(self.config.template_dir) / name
        loader.add(name, path)

        included = []
        for include in self.config.includes:
            files = sorted(p for p in pathlib.Path(include).glob("*") if p.is_file())
            if not files:
                err = TemplateLoadError("pattern matches no files")
                raise httperr.wrapf(httperr.status_code(err), err, "%s", include)
            for f in files:
                if loader.add(f.name, f):
                    included.append(f)
                else:
                    self.log.warning(f"Ignoring '{f}'; '{f.name}' is already defined.")

        env = JuniperEnvironment(view=self, loader=loader, funcs=self.funcs(stash))
        # Everything is parsed up front, so a broken include fails every
        # render and not only the ones which happen to use it.
        self.parse(env, name, path)
        for f in included:
            self.parse(env, f.name, f)
        return env

    def render(self, w, request: Request, stash: Optional[Stash] = None) -> None:
        """Render the template for `request` to `w`, or an error response."""
        if stash is None:
            stash = get_stash(request)
        if stash is None:
            stash = Stash({STASH_KEY_REQUEST: request})
        try:
            self.render_stash(w, stash)
        except Exception as e:
            self.log.error(f"{request.method} {request.path} : {e}")
            self.log.error(traceback.format_exc())
            httperr.handle_error(w, e)

    def render_stash(self, w, stash: Stash) -> None:
        name = self.template_name(stash)
        env = self.get_environment(name, stash)
        if shadowed := sorted(k for k in stash if k in env.globals):
            self.log.warning(
                f"Stash keys {', '.join(shadowed)} hide the template functions"
                f" of the same name."
            )

        if "content-type" not in w.headers:
            w.headers["Content-Type"] = DEFAULT_CONTENT_TYPE

        # Once this is sent it stays sent, even if the template blows up below.
        status = stash.get(STASH_KEY_STATUS)
        if isinstance(status, int) and not isinstance(status, bool):
            w.write_header(status)

        entry = self.entry_point(name, stash)
        if entry not in env.loader.paths:
            raise TemplateLoadError(f'template "{entry}" is not defined')
        w.write(env.get_template(entry).render(stash))
