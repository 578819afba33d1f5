import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Dict, Optional, Tuple, Union
from urllib.parse import unquote, urlsplit

from servemux.constants import DEFAULT_CONTENT_TYPE

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Request:
    """An inbound HTTP request as seen by route handlers."""

    method: str
    target: str
    path: str
    query: str = ''
    headers: Dict[str, str] = field(default_factory=dict)
    client: Optional[Tuple[str, int]] = None

    @classmethod
    def from_handler(cls, handler) -> 'Request':
        """
        Build a Request from a BaseHTTPRequestHandler after the request line is parsed.

        `path` is percent-decoded and is what routes match against; the raw
        request target is kept in `target`.
        """
        parsed = urlsplit(handler.path)
        return cls(
            method=handler.command,
            target=handler.path,
            path=unquote(parsed.path) or '/',
            query=parsed.query,
            headers={k: v for k, v in handler.headers.items()},
            client=handler.client_address,
        )


class ResponseWriter:
    """
    Collects a single response and sends it through a BaseHTTPRequestHandler.

    Headers may be set until the status is chosen. The first `write()` picks
    an implicit 200 if `write_header()` was not called. The body is held
    until `finish()`, which sends the status line, a Content-Length and the
    body in one go so the connection can be kept alive. A writer belongs to
    exactly one request and is never shared between threads.
    """

    def __init__(self, handler, head: bool = False):
        self._handler = handler
        self._head = head
        self._body = bytearray()
        self._finished = False
        self.headers: Dict[str, str] = {}
        self.status: Optional[int] = None

    @property
    def headers_sent(self) -> bool:
        return self.status is not None

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def bytes_written(self) -> int:
        return len(self._body)

    def set_header(self, name: str, value: str) -> None:
        if self.headers_sent:
            logger.warning("ignoring header %s, headers already sent", name)
            return
        self.headers[name.title()] = str(value)

    def write_header(self, status: int) -> None:
        """Fix the response status; later header changes are ignored."""
        if self.headers_sent:
            logger.warning("superfluous write_header(%s), status %s already sent", int(status), self.status)
            return

        self.status = int(status)
        self.headers.setdefault('Content-Type', DEFAULT_CONTENT_TYPE)

    def write(self, data: Union[str, bytes]) -> int:
        """Append `data` to the response body, choosing a 200 status first if needed."""
        if not self.headers_sent:
            self.write_header(HTTPStatus.OK)
        if isinstance(data, str):
            data = data.encode('utf-8')
        self._body.extend(data)
        return len(data)

    def finish(self) -> None:
        """
        Send the response. A handler that wrote nothing still gets a 200.

        Raises:
            OSError: the client went away; nothing is retried
        """
        if self._finished:
            return
        if not self.headers_sent:
            self.write_header(HTTPStatus.OK)
        self._finished = True

        self._handler.send_response(self.status)
        self.headers.pop('Content-Length', None)
        for name, value in self.headers.items():
            self._handler.send_header(name, value)
        self._handler.send_header('Content-Length', str(len(self._body)))
        self._handler.end_headers()

        # HEAD keeps the GET Content-Length but sends no body
        if self._body and not self._head:
            self._handler.wfile.write(bytes(self._body))
        self._handler.wfile.flush()
