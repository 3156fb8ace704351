"""System handlers for the index, echo and user-agent routes."""

import logging

from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import HttpRequest, HttpResponse
from minihttp.domain.response_builders import set_text_body

SYSTEM_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.handlers.system"), {}
)


def handle_index(_request: HttpRequest, response: HttpResponse) -> HttpResponse:
    """Answer GET / with an empty text/plain 200."""
    response.headers["Content-Type"] = "text/plain"
    return response


def handle_echo(request: HttpRequest, response: HttpResponse) -> HttpResponse:
    """Return the :message path parameter as the body."""
    content = request.params["message"]
    if SYSTEM_LOGGER.logger.isEnabledFor(logging.DEBUG):
        SYSTEM_LOGGER.debug(
            "Echo request processed",
            extra={"event": "echo_request", "bytes_out": len(content)},
        )
    return set_text_body(response, content)


def handle_user_agent(request: HttpRequest, response: HttpResponse) -> HttpResponse:
    """Return the User-Agent header, or an empty body when it is missing."""
    agent = request.headers.get("User-Agent", "")
    if SYSTEM_LOGGER.logger.isEnabledFor(logging.DEBUG):
        SYSTEM_LOGGER.debug(
            "User-agent request processed", extra={"event": "user_agent_request"}
        )
    return set_text_body(response, agent)
