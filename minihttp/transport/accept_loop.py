"""Main connection acceptance loop."""

import logging
import socket
import threading

from minihttp.bootstrap.config import ServerConfig
from minihttp.bootstrap.socket_factory import create_server_socket
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.lifecycle.state import ServerLifecycle
from minihttp.pipeline.router import Router
from minihttp.transport.context import WorkerContext
from minihttp.transport.worker import handle_client

ACCEPT_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.transport.accept"), {}
)


def _spawn_worker(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> threading.Thread:
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={
                "event": "client_accepted",
                "client": f"{client_address[0]}:{client_address[1]}",
            },
        )
    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, context),
        daemon=False,
    )
    thread.start()
    return thread


def run_server(
    config: ServerConfig, router: Router, lifecycle: ServerLifecycle
) -> None:
    """Accept connections until draining starts, one worker thread per connection."""
    server_socket = create_server_socket(config)
    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={"event": "server_listening", "host": config.host, "port": config.port},
    )
    context = WorkerContext(router=router, config=config, lifecycle=lifecycle)

    try:
        while not lifecycle.is_draining():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle.is_draining():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={"event": "accept_error", "error_type": type(error).__name__},
                )
                continue
            _spawn_worker(client_socket, client_address, context)
    finally:
        server_socket.close()
        ACCEPT_LOGGER.info(
            "Waiting for active connections to complete",
            extra={
                "event": "shutdown_waiting",
                "grace_seconds": config.shutdown_grace_seconds,
            },
        )
        lifecycle.wait_for_workers(config.shutdown_grace_seconds)
        ACCEPT_LOGGER.info("Server shutdown complete", extra={"event": "server_stopped"})
