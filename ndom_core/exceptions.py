"""
Exceptions
==========

Error hierarchy for query, transformation and inclusion operations.
Every error raised by ndom_core derives from NDOMError; the underlying
lxml exception, when there is one, is chained as ``__cause__``.
"""


class NDOMError(Exception):
    """Base class for all ndom_core errors."""
    pass


class QueryError(NDOMError, ValueError):
    """Malformed XPath expression, unbound namespace prefix or non node-set result."""

    def __init__(self, message: str, expression: str = ""):
        super().__init__(message)
        self.expression = expression


class BindingError(NDOMError, LookupError):
    """A stylesheet variable binding has no matching global declaration."""

    def __init__(self, message: str, name: str = ""):
        super().__init__(message)
        self.name = name


class TransformError(NDOMError):
    """Stylesheet could not be loaded or the XSLT run failed."""

    def __init__(self, message: str, error_log: str = ""):
        super().__init__(message)
        self.error_log = error_log


class ParseError(NDOMError, ValueError):
    """Markup (input or transform output) is not well-formed XML."""
    pass


class StructureError(NDOMError, LookupError):
    """A root element or inclusion target is missing."""
    pass
