"""Wire codec: raw request bytes in, serialized response bytes out.

Parsing works on one complete request buffer. Reading from the socket until
that buffer is available is the job of :mod:`minihttp.pipeline.io`.

Header names keep the case they arrived with; lookups on the resulting
mapping ignore case. Header lines without the ``": "`` separator, or with
nothing before it, are skipped unless ``strict_headers`` is set, in which
case they are rejected with :class:`MalformedHeaderLine`.
"""

import logging
from typing import Iterable, Optional, Union

from requests.structures import CaseInsensitiveDict

from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import HttpMethod, HttpRequest, HttpResponse

CODEC_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.pipeline.codec"), {}
)

CRLF = b"\r\n"
HEADER_SEPARATOR = ": "
RESPONSE_VERSION = "HTTP/1.1"


class MalformedRequest(ValueError):
    """Raised when a request buffer cannot be parsed."""


class MalformedRequestLine(MalformedRequest):
    """Raised when the request line does not hold exactly three tokens."""


class UnsupportedMethod(MalformedRequestLine):
    """Raised when the request line names a method outside HttpMethod."""


class MalformedHeaderLine(MalformedRequest):
    """Raised in strict mode for header lines missing the separator or a name."""


def parse_request_line(line: str) -> tuple[HttpMethod, str, str]:
    """Split the request line into method, request-target and version."""
    tokens = line.split(" ")
    if len(tokens) != 3:
        raise MalformedRequestLine(
            f"Request line must have 3 tokens, got {len(tokens)}: {line!r}"
        )
    method_token, path, version = tokens
    try:
        method = HttpMethod(method_token)
    except ValueError as exc:
        raise UnsupportedMethod(f"Unsupported method: {method_token!r}") from exc
    return method, path, version


def parse_headers(
    lines: Iterable[str], strict_headers: bool = False
) -> CaseInsensitiveDict:
    """Convert raw header lines into a case-insensitive mapping."""
    headers = CaseInsensitiveDict()
    for line in lines:
        name, separator, value = line.partition(HEADER_SEPARATOR)
        if not separator or not name:
            if strict_headers:
                raise MalformedHeaderLine(f"Malformed header line: {line!r}")
            if CODEC_LOGGER.logger.isEnabledFor(logging.DEBUG):
                CODEC_LOGGER.debug(
                    "Skipped malformed header line",
                    extra={"event": "header_line_skipped", "line": line},
                )
            continue
        headers[name] = value.strip()
    return headers


def _decode_lines(lines: list[bytes]) -> list[str]:
    try:
        return [line.decode("utf-8") for line in lines]
    except UnicodeDecodeError as exc:
        raise MalformedRequest("Request head is not valid UTF-8") from exc


def parse_request(
    raw_request: Union[bytes, str], strict_headers: bool = False
) -> HttpRequest:
    """Parse one complete request buffer into an :class:`HttpRequest`."""
    if isinstance(raw_request, str):
        raw_request = raw_request.encode("utf-8")

    lines = raw_request.split(CRLF)
    try:
        blank_index: Optional[int] = lines.index(b"", 1)
    except ValueError:
        blank_index = None

    head = _decode_lines(lines[:blank_index])
    method, path, version = parse_request_line(head[0])
    headers = parse_headers(head[1:], strict_headers)

    body = None
    if blank_index is not None:
        body = CRLF.join(lines[blank_index + 1 :]) or None

    return HttpRequest(method, path, version, headers, body)


def serialize_response(response: HttpResponse) -> bytes:
    """Render the status line, headers and body exactly as they will hit the wire."""
    head = [f"{RESPONSE_VERSION} {response.status_code} {response.status_message}"]
    head.extend(
        f"{name}{HEADER_SEPARATOR}{value}" for name, value in response.headers.items()
    )
    header_block = ("\r\n".join(head) + "\r\n\r\n").encode("utf-8")
    return header_block + (response.body_bytes() or b"")
