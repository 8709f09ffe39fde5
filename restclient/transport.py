"""
Wraps the httpx client that a Request executes against.
Maps one TransportOptions value onto a single blocking call and reports
the outcome as a TransportResult instead of raising.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

import httpx
import structlog

logger = structlog.get_logger(__name__)

REDACTED_HEADERS = ('authorization', 'proxy-authorization')


@dataclass
class TransportOptions:
    url: str
    method: str = 'GET'
    headers: List[str] = field(default_factory=list)
    auth: Optional[httpx.Auth] = None
    data: Optional[Dict[str, str]] = None


@dataclass
class TransportResult:
    """Raw outcome of one call. body is None when no body could be produced."""
    body: Optional[str] = None
    status: int = 0
    headers: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.error is not None


class BearerAuth(httpx.Auth):
    """Send a single token as an HTTP bearer credential."""

    def __init__(self, token: str):
        self.token = token

    def auth_flow(self, request: httpx.Request):
        request.headers['Authorization'] = f'Bearer {self.token}'
        yield request


def parse_header_lines(lines: List[str]) -> List[Tuple[str, str]]:
    """Split "Name: Value" lines into (name, value) pairs."""
    pairs = []
    for line in lines:
        name, _, value = line.partition(':')
        pairs.append((name.strip(), value.strip()))
    return pairs


class HTTPSession:
    def __init__(self, url: str, transport: httpx.BaseTransport = None, user_agent: str = None):
        """Open an httpx client for the given target URL.

        Redirects are not followed and no timeout is applied: a call blocks
        until the transport itself resolves.
        """
        self.url = url
        self.user_agent = user_agent
        self.last_request_headers: Dict[str, str] = {}

        headers = {}
        if user_agent:
            headers['User-Agent'] = user_agent

        self._client = httpx.Client(
            transport=transport,
            headers=headers,
            follow_redirects=False,
            timeout=None,
            event_hooks={'request': [self._capture_request_headers]},
        )
        logger.debug("session_opened", url=url)

    def _capture_request_headers(self, request: httpx.Request):
        """Keep the outbound header block for diagnostics."""
        self.last_request_headers = dict(request.headers)
        logger.debug("request_headers_sent",
                     method=request.method,
                     url=str(request.url),
                     headers={
                         name: ('<redacted>' if name.lower() in REDACTED_HEADERS else value)
                         for name, value in self.last_request_headers.items()
                     })

    def reset(self):
        """Drop per-call state left over from a previous call."""
        self._client.cookies.clear()
        self.last_request_headers = {}

    def perform(self, options: TransportOptions) -> TransportResult:
        """Execute one call described by options."""
        try:
            response = self._client.request(
                options.method,
                options.url,
                headers=parse_header_lines(options.headers),
                auth=options.auth,
                data=options.data,
            )
        except httpx.TransportError as e:
            error = str(e) or e.__class__.__name__
            logger.warning("transport_error",
                           url=options.url,
                           method=options.method,
                           error=error)
            return TransportResult(error=error)
        except httpx.DecodingError as e:
            logger.warning("response_body_unreadable",
                           url=options.url,
                           method=options.method,
                           error=str(e))
            return TransportResult()

        return TransportResult(
            body=response.text,
            status=response.status_code,
            headers=dict(response.headers),
        )

    @property
    def is_closed(self) -> bool:
        return self._client.is_closed

    def close(self):
        """Close the underlying httpx client."""
        if not self._client.is_closed:
            self._client.close()
            logger.debug("session_closed", url=self.url)
