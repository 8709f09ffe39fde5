"""restclient - a small request builder and response wrapper over httpx."""

from .exceptions import RestClientError, InvalidInput, UnsupportedMethod
from .request import Request, HTTPMethod, AuthMethod, Outcome, SendResult
from .response import Response

__version__ = "0.1.0"
