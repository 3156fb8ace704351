"""Shared HTTP type definitions to avoid circular imports."""

from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Callable, Mapping, Optional, Union

from requests.structures import CaseInsensitiveDict


class HttpMethod(str, Enum):
    """Request methods understood by the request line parser."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    OPTIONS = "OPTIONS"
    HEAD = "HEAD"
    CONNECT = "CONNECT"
    TRACE = "TRACE"


def _as_headers(headers: Optional[Mapping[str, str]]) -> CaseInsensitiveDict:
    """Wrap a header mapping so lookups ignore case while storage keeps it."""
    if isinstance(headers, CaseInsensitiveDict):
        return headers
    return CaseInsensitiveDict(headers or {})


@dataclass
class HttpRequest:
    """Represents a parsed HTTP request."""

    method: HttpMethod
    path: str
    version: str = "HTTP/1.1"
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Optional[bytes] = None
    params: dict[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        self.method = HttpMethod(self.method)
        self.headers = _as_headers(self.headers)


@dataclass
class HttpResponse:
    """Represents an HTTP response being assembled for a client.

    Text bodies are kept as ``str`` until serialization and encoded as UTF-8
    by :meth:`body_bytes`.
    """

    status_code: int = HTTPStatus.OK.value
    status_message: str = HTTPStatus.OK.phrase
    headers: CaseInsensitiveDict = field(default_factory=CaseInsensitiveDict)
    body: Union[bytes, str, None] = None

    def __post_init__(self) -> None:
        self.headers = _as_headers(self.headers)

    @classmethod
    def from_status(
        cls,
        status: HTTPStatus,
        headers: Optional[Mapping[str, str]] = None,
        body: Union[bytes, str, None] = None,
    ) -> "HttpResponse":
        """Build a response whose status line comes from ``HTTPStatus``."""
        return cls(status.value, status.phrase, _as_headers(headers), body)

    def body_bytes(self) -> Optional[bytes]:
        """Return the body as bytes, or None when no body is set."""
        if self.body is None:
            return None
        if isinstance(self.body, str):
            return self.body.encode("utf-8")
        return bytes(self.body)


Handler = Callable[[HttpRequest, HttpResponse], HttpResponse]
