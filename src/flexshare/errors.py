"""Exception definitions for Flexshare"""


class FlexShareException(Exception):
    """Base exception for all Flexshare errors.

    All custom exceptions in Flexshare inherit from this class.
    Use this as a catch-all for Flexshare-specific errors when you don't need
    to handle specific exception types.
    """

    pass


class ConfigException(FlexShareException):
    """Raised when configuration validation or loading fails.

    Use this exception when:
    - The configuration file cannot be found
    - The TOML syntax is invalid
    - Configuration validation fails (missing required fields, invalid values)
    """

    pass


class TemplateException(FlexShareException):
    """Raised when a template record or its form schema is malformed.

    Use this exception when:
    - A template record does not match the Template model
    - A section breaks the plain/repeatable invariant
    - A field constraint (such as ``pattern``) cannot be compiled
    """

    pass


class TemplateNotFound(TemplateException):
    pass


class RenderException(FlexShareException):
    """Raised inside the renderer; always converted to a validation error
    before it leaves a compile call."""

    pass


class PatchDepthExceeded(RenderException):
    pass


class PublishException(FlexShareException):
    """Raised when a document cannot be published because its compile
    produced errors or no message.

    The blocking errors are available on ``errors``.
    """

    def __init__(self, message: str, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])
