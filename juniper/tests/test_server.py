import logging
import urllib.request

import pytest

from juniper import httperr
from juniper.constants import DEFAULT_CONTENT_TYPE, DEFAULT_ENCODING, STASH_KEY_STATUS
from juniper.donewriter import wrap_writer, writer_is_done
from juniper.exceptions import ConfigError
from juniper.main import WSGIHandler, chain
from juniper.stash import get_stash
from juniper.tests.helpers import TEMPLATE_DIR, setup
from juniper.view import View


def hello(w, request):
    get_stash(request)["Name"] = "Gregory"


def test_view_through_wsgi():
    view = View(template_dir=TEMPLATE_DIR, default_template="hello.tmpl")
    app, environ, start_response = setup(hello, middleware=[view])

    assert app(environ, start_response) == [bytes("Hello, Gregory!", DEFAULT_ENCODING)]
    assert start_response.status == "200 OK"
    assert start_response.get_headers()["Content-Type"] == DEFAULT_CONTENT_TYPE


def test_unknown_status_through_wsgi():
    def handler(w, request):
        get_stash(request)[STASH_KEY_STATUS] = 600

    view = View(template_dir=TEMPLATE_DIR, default_template="test.tmpl")
    app, environ, start_response = setup(handler, middleware=[view])

    assert app(environ, start_response) == [b"Test template"]
    assert start_response.status == "600 Unknown Status"
    assert start_response.status_code == 600


def test_handler_writes_directly():
    def handler(w, request):
        w.headers["Location"] = "/elsewhere"
        w.write_header(302)

    view = View(template_dir=TEMPLATE_DIR, default_template="test.tmpl")
    app, environ, start_response = setup(handler, middleware=[view])

    assert app(environ, start_response) == [b""]
    assert start_response.status == "302 Found"
    assert start_response.get_headers() == {"Location": "/elsewhere"}


def test_handler_exception():
    def handler(w, request):
        raise httperr.new(404, "no such page")

    app, environ, start_response = setup(handler)
    assert app(environ, start_response) == [b"Error 404: no such page"]
    assert start_response.status == "404 Not Found"


def test_handler_exception_after_write(caplog):
    def handler(w, request):
        w.write("partial")
        raise ValueError("oops")

    app, environ, start_response = setup(handler)
    with caplog.at_level(logging.ERROR, logger="juniper.main"):
        assert app(environ, start_response) == [b"partial"]
    assert start_response.status == "200 OK"
    assert "GET / : oops" in caplog.text


def test_multiple_header_values():
    def handler(w, request):
        w.headers["Set-Cookie"] = ["a=1", "b=2"]
        w.write("cookies")

    app, environ, start_response = setup(handler)
    app(environ, start_response)
    assert start_response.headers == [("Set-Cookie", "a=1"), ("Set-Cookie", "b=2")]


def test_chain_order():
    order = []

    def tag(name):
        def middleware(next_handler):
            def handler(w, request):
                order.append(f"{name} in")
                next_handler(w, request)
                order.append(f"{name} out")

            return handler

        return middleware

    def handler(w, request):
        order.append("handler")

    chain(tag("a"), tag("b"))(handler)(None, None)
    assert order == ["a in", "b in", "handler", "b out", "a out"]


def test_chain_with_nothing():
    def handler(w, request):
        pass

    assert chain()(handler) is handler


def test_middleware_by_string():
    def handler(w, request):
        w.write(str(writer_is_done(w)))

    app, environ, start_response = setup(
        handler, middleware=["juniper.donewriter.wrap_writer"]
    )
    assert app.middleware == [wrap_writer]
    assert app(environ, start_response) == [b"False"]


def test_invalid_middleware():
    with pytest.raises(ConfigError) as e:
        WSGIHandler(lambda w, r: None, middleware=["nonexistent.middleware"])

    assert e.value.args[0] == "Middleware 'nonexistent.middleware' not found."


def test_header_names_are_sent_in_canonical_form():
    def handler(w, request):
        w.headers["x-request-id"] = "abc"
        w.headers["CACHE_CONTROL"] = "no-store"
        w.write("ok")

    app, environ, start_response = setup(handler)
    app(environ, start_response)
    assert start_response.headers == [
        ("X-Request-Id", "abc"),
        ("Cache-Control", "no-store"),
    ]


def test_local_server():
    view = View(template_dir=TEMPLATE_DIR, default_template="hello.tmpl")
    with WSGIHandler(hello, middleware=[view], addr="127.0.0.1", port=0) as app:
        assert app.port != 0
        with urllib.request.urlopen(f"http://127.0.0.1:{app.port}/") as resp:
            assert resp.status == 200
            assert resp.read() == b"Hello, Gregory!"
            assert resp.headers["Content-Type"] == DEFAULT_CONTENT_TYPE
            assert resp.headers["Server"].startswith("juniper/")
    assert app._server is None


def test_local_server_cannot_start_twice():
    app = WSGIHandler(hello, addr="127.0.0.1", port=0)
    with app:
        with pytest.raises(RuntimeError):
            app.start()


def test_stop_without_start():
    app = WSGIHandler(hello, port=0)
    app.stop()
    assert app._server is None
