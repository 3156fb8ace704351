"""Content-Encoding negotiation for outgoing response bodies."""

import gzip
import logging
import zlib
from typing import Callable

from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import HttpRequest, HttpResponse
from minihttp.domain.response_builders import compression_failed_response

COMPRESSION_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.pipeline.compression"), {}
)

GZIP = "gzip"

Compressor = Callable[[bytes], bytes]


class CompressionFailure(Exception):
    """Raised when the body encoder cannot produce compressed output."""


def accepted_encodings(request: HttpRequest) -> list[str]:
    """Return the Accept-Encoding tokens in the order the client sent them."""
    raw_value = request.headers.get("Accept-Encoding", "")
    tokens = [token.strip() for token in raw_value.split(",")]
    return [token for token in tokens if token]


def gzip_compress(payload: bytes) -> bytes:
    """Gzip ``payload`` at the default level."""
    try:
        return gzip.compress(payload)
    except (OSError, TypeError, ValueError, zlib.error) as exc:
        raise CompressionFailure(str(exc)) from exc


def apply_content_encoding(
    request: HttpRequest,
    response: HttpResponse,
    compressor: Compressor = gzip_compress,
) -> HttpResponse:
    """Gzip the response body in place when the client accepts it.

    Raises :class:`CompressionFailure` when the compressor fails; the
    response is left untouched in that case.
    """
    if "Content-Encoding" in response.headers:
        return response
    if GZIP not in accepted_encodings(request):
        return response
    payload = response.body_bytes()
    if not payload:
        return response

    compressed = compressor(payload)
    response.body = compressed
    response.headers["Content-Encoding"] = GZIP
    response.headers["Content-Length"] = str(len(compressed))
    if COMPRESSION_LOGGER.logger.isEnabledFor(logging.DEBUG):
        COMPRESSION_LOGGER.debug(
            "Compressed payload",
            extra={
                "event": "response_compressed",
                "bytes_in": len(payload),
                "bytes_out": len(compressed),
            },
        )
    return response


def encode_response(
    request: HttpRequest,
    response: HttpResponse,
    compressor: Compressor = gzip_compress,
) -> HttpResponse:
    """Apply content encoding, downgrading to a plain 500 if compression fails."""
    try:
        return apply_content_encoding(request, response, compressor)
    except CompressionFailure as error:
        COMPRESSION_LOGGER.error(
            "Response compression failed",
            extra={
                "event": "compression_failed",
                "route": request.path,
                "error_type": type(error.__cause__ or error).__name__,
            },
        )
        return compression_failed_response()
