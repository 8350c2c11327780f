DEFAULT_ENCODING = "UTF-8"
__version__ = "1.0.0"

# Content-Type for every rendered response that doesn't already have one set
# by view rendering time.
DEFAULT_CONTENT_TYPE = "text/html; charset=utf-8"

# Reserved stash keys. Handlers set these to steer the view middleware; the
# view itself fills in the request.
STASH_KEY_REQUEST = "_req"
# a FuncMap (or any mapping of names to callables) which overrides or augments
# the default template functions
STASH_KEY_FUNC_MAP = "_funcs"
# name of the template file to render for this request
STASH_KEY_TEMPLATE = "_template"
# an int; the status code sent with the rendered template
STASH_KEY_STATUS = "_status"
# name of the template within the template set to start rendering from
STASH_KEY_ENTRY_POINT = "_entry"
