from pytest import fixture

from juniper.response import ResponseWriter


@fixture
def writer():
    return ResponseWriter()
