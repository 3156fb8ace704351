"""Worker thread logic: one request, one response, then close."""

import logging
import socket
import threading
import time

from minihttp.domain.correlation_id import (
    CorrelationLoggerAdapter,
    adopt_client_correlation_id,
    clear_correlation_id,
    generate_correlation_id,
    set_correlation_id,
)
from minihttp.domain.http_types import HttpResponse
from minihttp.domain.response_builders import (
    bad_request_response,
    entity_too_large_response,
    internal_error_response,
)
from minihttp.pipeline.codec import MalformedRequest, parse_request
from minihttp.pipeline.compression import encode_response
from minihttp.pipeline.io import RequestEntityTooLarge, receive_request, send_response
from minihttp.pipeline.router import Router
from minihttp.transport.context import WorkerContext

WORKER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.transport.worker"), {}
)


def build_response(raw_request: bytes, router: Router) -> HttpResponse:
    """Run one raw request through parse, routing and content encoding."""
    try:
        request = parse_request(raw_request)
    except MalformedRequest as error:
        WORKER_LOGGER.warning(
            "Malformed request received",
            extra={"event": "malformed_request", "error_type": type(error).__name__},
        )
        return bad_request_response()

    adopt_client_correlation_id(request.headers)
    if WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        WORKER_LOGGER.debug(
            "Request line parsed",
            extra={
                "event": "request_line_parsed",
                "method": request.method.value,
                "route": request.path,
            },
        )

    response = router.route(request)
    return encode_response(request, response)


def _read_and_respond(
    client_socket: socket.socket, context: WorkerContext, client_addr_str: str
) -> None:
    try:
        raw_request = receive_request(client_socket, context.config.max_request_bytes)
    except RequestEntityTooLarge:
        WORKER_LOGGER.warning(
            "Request size exceeded limit",
            extra={"event": "request_too_large", "client": client_addr_str},
        )
        send_response(client_socket, entity_too_large_response())
        return
    except MalformedRequest as error:
        WORKER_LOGGER.warning(
            "Malformed request received",
            extra={
                "event": "malformed_request",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
        send_response(client_socket, bad_request_response())
        return

    if raw_request is None:
        if WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            WORKER_LOGGER.debug(
                "Client disconnected before sending a request",
                extra={"event": "client_disconnected", "client": client_addr_str},
            )
        return

    started = time.perf_counter()
    response = build_response(raw_request, context.router)
    send_response(client_socket, response)
    WORKER_LOGGER.info(
        "Request processing complete",
        extra={
            "event": "request_complete",
            "client": client_addr_str,
            "status_code": response.status_code,
            "duration_ms": round((time.perf_counter() - started) * 1000, 3),
        },
    )


def _send_internal_error(client_socket: socket.socket) -> None:
    try:
        send_response(client_socket, internal_error_response())
    except OSError:
        WORKER_LOGGER.debug(
            "Could not deliver error response", extra={"event": "error_send_failed"}
        )


def _close_socket(client_socket: socket.socket, client_addr_str: str) -> None:
    try:
        client_socket.shutdown(socket.SHUT_WR)
    except OSError:
        pass
    client_socket.close()
    WORKER_LOGGER.debug(
        "Socket closed",
        extra={"event": "socket_closed", "client": client_addr_str},
    )


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> None:
    """Serve exactly one request on ``client_socket`` and close it."""
    client_addr_str = f"{client_address[0]}:{client_address[1]}"
    current_thread = threading.current_thread()
    lifecycle = context.lifecycle
    if lifecycle is not None:
        lifecycle.register_worker(current_thread)
    client_socket.settimeout(context.config.socket_timeout)
    set_correlation_id(generate_correlation_id())

    try:
        _read_and_respond(client_socket, context, client_addr_str)
    except (ConnectionError, TimeoutError, OSError) as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
            exc_info=True,
        )
        _send_internal_error(client_socket)
    finally:
        _close_socket(client_socket, client_addr_str)
        if lifecycle is not None:
            lifecycle.cleanup_worker(current_thread)
        clear_correlation_id()
