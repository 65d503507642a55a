"""
Exceptions raised by the link model and service layer.

Everything a client can get wrong about a link surfaces as
LinkValidationError, which the app maps to HTTP 400.
"""


class HashlinkError(Exception):
    """Base class for hashlink errors"""


class LinkValidationError(HashlinkError, ValueError):
    """Client input rejected while processing a link (HTTP 400)"""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class URLNormalizationError(ValueError):
    """The URL could not be parsed into a canonical http(s) URL"""
