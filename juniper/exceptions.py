class JuniperException(Exception):
    # parent error class; all child exceptions should inherit from this
    pass


class ConfigError(JuniperException):
    """The view (or server) was set up with unusable settings."""


class TemplateNameError(JuniperException):
    """No template name could be resolved for the request."""


class TemplateLoadError(JuniperException):
    pass


class NotADoneWriter(JuniperException):
    """Raised when asking for the done state of a writer that doesn't track it."""


class WriterClosed(JuniperException):
    pass
