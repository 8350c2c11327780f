import json
from datetime import datetime

from juniper import (
    STASH_KEY_FUNC_MAP,
    STASH_KEY_STATUS,
    STASH_KEY_TEMPLATE,
    View,
    WSGIHandler,
    get_stash,
)
from juniper import httperr
from juniper.view import FuncMap


view = View(
    template_dir="templates",
    default_template="index.html",
    funcs={"now": lambda: datetime.now().strftime("%H:%M:%S")},
    includes=["templates/includes"],
)


def index(w, request):
    if request.path == "/json":
        # writing anything skips the template entirely
        w.headers["Content-Type"] = "application/json"
        w.write(json.dumps({"key": "value"}))
        return

    if request.path == "/error":
        raise httperr.new(418, "I'm a teapot")

    stash = get_stash(request)
    if request.path == "/missing":
        stash[STASH_KEY_TEMPLATE] = "error.html"
        stash[STASH_KEY_STATUS] = 404
        stash["Message"] = "Nothing here."
        return

    stash["Name"] = request.GET.get("name", "world")
    if "late" in request.GET:
        stash[STASH_KEY_FUNC_MAP] = FuncMap(now=lambda: "way too late")


app = WSGIHandler(index, middleware=["juniper.donewriter.wrap_writer", view])


if __name__ == "__main__":
    # If gunicorn is installed, you can run this file directly through gunicorn with
    # `gunicorn --workers=2 "example:app"`.
    app.start(blocking=True)
