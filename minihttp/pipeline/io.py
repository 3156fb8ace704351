"""Socket input/output for one request-response cycle."""

import logging
import socket
from typing import Optional

from minihttp.bootstrap.config import HEADER_DELIMITER
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import HttpResponse
from minihttp.pipeline.codec import MalformedRequest, parse_headers, serialize_response

IO_LOGGER = CorrelationLoggerAdapter(logging.getLogger("minihttp.pipeline.io"), {})

RECV_CHUNK_BYTES = 4096


class RequestEntityTooLarge(Exception):
    """Raised when a request exceeds the configured size limit."""


def declared_content_length(header_block: bytes) -> int:
    """Return the Content-Length announced in a raw header block, or 0."""
    try:
        header_lines = header_block.decode("utf-8").split("\r\n")[1:]
    except UnicodeDecodeError as exc:
        raise MalformedRequest("Request head is not valid UTF-8") from exc

    header_value = parse_headers(header_lines).get("Content-Length")
    if header_value is None:
        return 0
    try:
        content_length = int(header_value)
    except ValueError as exc:
        raise MalformedRequest("Invalid Content-Length") from exc
    if content_length < 0:
        raise MalformedRequest("Negative Content-Length")
    return content_length


def _recv_more(client_socket: socket.socket, buffer: bytes, max_bytes: int) -> bytes:
    chunk = client_socket.recv(RECV_CHUNK_BYTES)
    if not chunk:
        return b""
    if len(buffer) + len(chunk) > max_bytes:
        raise RequestEntityTooLarge
    return chunk


def receive_request(client_socket: socket.socket, max_bytes: int) -> Optional[bytes]:
    """Read one complete request buffer: the header block plus its declared body.

    Returns None when the client closed the connection without sending
    anything. A client that closes mid-request yields whatever arrived.
    """
    buffer = b""
    while HEADER_DELIMITER not in buffer:
        chunk = _recv_more(client_socket, buffer, max_bytes)
        if not chunk:
            return buffer or None
        buffer += chunk

    header_block, _, remainder = buffer.partition(HEADER_DELIMITER)
    content_length = declared_content_length(header_block)
    if len(header_block) + len(HEADER_DELIMITER) + content_length > max_bytes:
        raise RequestEntityTooLarge

    while len(remainder) < content_length:
        chunk = _recv_more(client_socket, buffer, max_bytes)
        if not chunk:
            break
        buffer += chunk
        remainder += chunk

    if IO_LOGGER.logger.isEnabledFor(logging.DEBUG):
        IO_LOGGER.debug(
            "Received request bytes",
            extra={"event": "request_received", "bytes_in": len(buffer)},
        )
    return header_block + HEADER_DELIMITER + remainder[:content_length]


def send_response(client_socket: socket.socket, response: HttpResponse) -> None:
    """Serialize and send the HTTP response over the socket."""
    payload = serialize_response(response)
    client_socket.sendall(payload)
    if IO_LOGGER.logger.isEnabledFor(logging.DEBUG):
        IO_LOGGER.debug(
            "Sent response",
            extra={
                "event": "response_sent",
                "status_code": response.status_code,
                "bytes_out": len(payload),
            },
        )
