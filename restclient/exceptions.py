"""
Errors raised while configuring a request.
Execution-time failures never cross Request.send(), see Request.execute().
"""


class RestClientError(Exception):
    """Base exception for configuration errors."""
    pass


class InvalidInput(RestClientError, ValueError):
    """Raised when a URL is empty or malformed."""
    pass


class UnsupportedMethod(RestClientError, ValueError):
    """Raised when an HTTP method is not in the supported set."""
    pass
