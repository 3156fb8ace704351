"""Pure HTTP response builders."""

from http import HTTPStatus

from minihttp.domain.http_types import HttpResponse

ERROR_BODY = HTTPStatus.INTERNAL_SERVER_ERROR.phrase


def set_text_body(response: HttpResponse, message: str) -> HttpResponse:
    """Populate a text/plain body together with its Content-Length."""
    payload = message.encode("utf-8")
    response.headers["Content-Type"] = "text/plain"
    response.headers["Content-Length"] = str(len(payload))
    response.body = message
    return response


def set_binary_body(
    response: HttpResponse,
    payload: bytes,
    content_type: str = "application/octet-stream",
) -> HttpResponse:
    """Populate a binary body together with its Content-Length."""
    response.headers["Content-Type"] = content_type
    response.headers["Content-Length"] = str(len(payload))
    response.body = payload
    return response


def not_found_response() -> HttpResponse:
    """Return a bare 404 response."""
    return HttpResponse.from_status(HTTPStatus.NOT_FOUND)


def internal_error_response() -> HttpResponse:
    """Return a bare 500 response used when a route handler fails."""
    return HttpResponse.from_status(HTTPStatus.INTERNAL_SERVER_ERROR)


def compression_failed_response() -> HttpResponse:
    """Return an uncompressed 500 response with an explicit plain-text body."""
    return set_text_body(
        HttpResponse.from_status(HTTPStatus.INTERNAL_SERVER_ERROR), ERROR_BODY
    )


def bad_request_response() -> HttpResponse:
    """Produce a 400 response for requests the codec could not parse."""
    return HttpResponse.from_status(HTTPStatus.BAD_REQUEST)


def forbidden_response() -> HttpResponse:
    """Produce a 403 response for paths outside the served directory."""
    return HttpResponse.from_status(HTTPStatus.FORBIDDEN)


def entity_too_large_response() -> HttpResponse:
    """Produce a 413 response when a request exceeds the configured size."""
    return HttpResponse(HTTPStatus.REQUEST_ENTITY_TOO_LARGE.value, "Payload Too Large")


def created_response() -> HttpResponse:
    """Produce a 201 response acknowledging a stored resource."""
    return HttpResponse.from_status(HTTPStatus.CREATED)
