import pathlib
from typing import TYPE_CHECKING, Callable

from jinja2 import BaseLoader, Environment, StrictUndefined, TemplateNotFound

from juniper.constants import DEFAULT_ENCODING

if TYPE_CHECKING:
    from juniper.view import View


class TemplateSetLoader(BaseLoader):
    # Serves a fixed set of files, each under the name it was registered with.
    # The first file registered under a name keeps it.

    def __init__(self, encoding: str = DEFAULT_ENCODING):
        self.paths: dict[str, pathlib.Path] = {}
        self.encoding = encoding

    def add(self, name: str, path: pathlib.Path | str) -> bool:
        if name in self.paths:
            return False
        self.paths[name] = pathlib.Path(path)
        return True

    def get_source(self, environment, template):
        path = self.paths.get(template)
        if path is None:
            raise TemplateNotFound(template)
        source = path.read_text(encoding=self.encoding)
        mtime = path.stat().st_mtime

        def uptodate():
            try:
                return path.stat().st_mtime == mtime
            except OSError:
                return False

        return source, str(path), uptodate

    def list_templates(self):
        return sorted(self.paths)


class JuniperEnvironment(Environment):
    # Contains all the normal abilities of the Jinja environment, but with a link
    # back to the view for easy access to its settings.
    def __init__(
        self, view: "View" = None, funcs: dict[str, Callable] = None, *args, **kwargs
    ):
        kwargs.setdefault("autoescape", True)
        kwargs.setdefault("undefined", StrictUndefined)
        super().__init__(*args, **kwargs)
        self.view = view
        if funcs:
            self.globals.update(funcs)
