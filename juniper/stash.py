from typing import Optional

from juniper.request import Request


class Stash(dict):
    """
    Per-request values which are passed to the template at the end of request
    processing.
    """


class _ContextKey:
    def __init__(self, name):
        self.name = name

    def __repr__(self):
        return f"<context key {self.name}>"


_stash_context_key = _ContextKey("stash")


def set_stash(request: Request) -> Request:
    """Return a copy of `request` carrying a new, empty stash."""
    return request.with_context(_stash_context_key, Stash())


def get_stash(request: Optional[Request]) -> Optional[Stash]:
    """Return the stash stored in the request, or None if no stash was found."""
    if request is None:
        return None
    stash = request.value(_stash_context_key)
    if not isinstance(stash, Stash):
        return None
    return stash
