"""
Request builder: collects URL, method, headers, form fields and credentials
through chained calls, then performs one blocking call per send().
"""

import ipaddress
import weakref
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional
from urllib.parse import urlparse

import httpx
import structlog

from .config import Config, get_config
from .exceptions import InvalidInput, UnsupportedMethod
from .response import Response
from .transport import BearerAuth, HTTPSession, TransportOptions

logger = structlog.get_logger(__name__)


class HTTPMethod(Enum):
    HEAD = "HEAD"
    GET = "GET"
    POST = "POST"


class AuthMethod(Enum):
    BASIC = "basic"
    BEARER = "bearer"


class Outcome(Enum):
    OK = "ok"
    TRANSPORT_ERROR = "transport_error"
    NO_BODY = "no_body"
    FAILED = "failed"


@dataclass
class SendResult:
    """Tagged result of Request.execute()."""
    outcome: Outcome
    response: Optional[Response] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.outcome is Outcome.OK


def validate_url(url: str) -> str:
    """Return the trimmed URL, or raise InvalidInput if it is not absolute."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidInput("Empty or invalid URL")

    url = url.strip()
    if any(ch.isspace() for ch in url):
        raise InvalidInput(f"Empty or invalid URL: {url!r}")

    # urlparse, hostname and port all raise ValueError on malformed netlocs
    try:
        parsed = urlparse(url)
        valid = bool(parsed.scheme and parsed.netloc and parsed.hostname)
        parsed.port
        if valid and "[" in parsed.netloc:
            ipaddress.ip_address(parsed.hostname)
    except ValueError:
        valid = False

    if not valid:
        raise InvalidInput(f"Empty or invalid URL: {url!r}")

    return url


class Request:
    def __init__(self, url: str, transport: httpx.BaseTransport = None, config: Config = None):
        """Create a GET request with basic auth mode for url.

        Args:
            url: Absolute target URL, surrounding whitespace is ignored.
            transport: Optional httpx transport, e.g. httpx.MockTransport in tests.
            config: Configuration to read client defaults from. Defaults to
                    the process-wide configuration.
        """
        self._session: Optional[HTTPSession] = None
        self._finalizer = None
        self._transport = transport
        self._config = config

        self.set_url(url)
        self.method = HTTPMethod.GET
        self.auth_method = AuthMethod.BASIC
        self.user = ""
        self.password = ""
        self.headers: Dict[str, str] = {}
        self.fields: Dict[str, str] = {}

    def set_url(self, url: str) -> "Request":
        self.url = validate_url(url)
        return self

    def auth_basic(self, user: str, password: str) -> "Request":
        self.user = user
        self.password = password
        self.auth_method = AuthMethod.BASIC
        return self

    def auth_by_token(self, token: str) -> "Request":
        self.user = token
        self.password = ""
        self.auth_method = AuthMethod.BEARER
        return self

    def set_header(self, name: str, value: str) -> "Request":
        self.headers[name] = value
        return self

    def remove_header(self, name: str) -> "Request":
        self.headers.pop(name, None)
        return self

    def set_field(self, name: str, value: str) -> "Request":
        """Add a form field, sent as the body of POST requests."""
        self.fields[name] = value
        return self

    def remove_field(self, name: str) -> "Request":
        self.fields.pop(name, None)
        return self

    def set_method(self, method: str) -> "Request":
        try:
            self.method = HTTPMethod(str(method).upper())
        except ValueError:
            raise UnsupportedMethod(f"Method not supported: {method}")
        return self

    def send(self) -> Optional[Response]:
        """Perform the request.

        Transport errors come back as a Response with status 0 and the error
        text as body. Returns None when no body was produced or anything
        else went wrong; use execute() to tell those cases apart.
        """
        return self.execute().response

    def execute(self) -> SendResult:
        """Perform the request and report which exit path was taken."""
        response = Response()

        try:
            session = self._get_session()
            options = self._build_options()
            session.reset()
            result = session.perform(options)

            if result.failed:
                response.body = result.error
                return SendResult(Outcome.TRANSPORT_ERROR, response=response)

            if result.body is None:
                logger.warning("response_without_body", url=self.url, method=self.method.value)
                return SendResult(Outcome.NO_BODY)

            response.body = result.body
            response.status = result.status
            response.headers = result.headers

        except Exception as e:
            logger.error("request_failed",
                         url=self.url,
                         method=self.method.value,
                         error=str(e),
                         exc_info=True)
            return SendResult(Outcome.FAILED, error=e)

        logger.info("request_completed",
                    url=self.url,
                    method=self.method.value,
                    status=response.status)
        return SendResult(Outcome.OK, response=response)

    def _get_session(self) -> HTTPSession:
        if self._session is None:
            config = self._config or get_config()
            self._session = HTTPSession(
                self.url,
                transport=self._transport,
                user_agent=config.client.get('user_agent'),
            )
            self._finalizer = weakref.finalize(self, self._session.close)
        return self._session

    def _build_options(self) -> TransportOptions:
        options = TransportOptions(url=self.url, method=self.method.value)

        # HEAD and GET carry no body
        if self.method is HTTPMethod.POST:
            options.data = dict(self.fields) or None

        if self.auth_method is AuthMethod.BASIC:
            if self.user and self.password:
                options.auth = httpx.BasicAuth(self.user, self.password)
        elif self.auth_method is AuthMethod.BEARER:
            if self.user:
                options.auth = BearerAuth(self.user)

        if self.headers:
            options.headers = [f"{name}: {value}" for name, value in self.headers.items()]

        return options

    def close(self):
        """Release the session, if one was opened. A later send() opens a new one."""
        if self._finalizer is not None:
            self._finalizer()
            self._finalizer = None
        self._session = None

    def __enter__(self) -> "Request":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"<Request [{self.method.value} {self.url}]>"
