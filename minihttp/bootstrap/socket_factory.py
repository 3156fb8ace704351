"""Listening socket creation."""

import logging
import socket

from minihttp.bootstrap.config import ServerConfig
from minihttp.domain.correlation_id import CorrelationLoggerAdapter

SOCKET_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.bootstrap.socket"), {}
)

ACCEPT_POLL_SECONDS = 0.5


def create_server_socket(config: ServerConfig) -> socket.socket:
    """Bind the listening socket; accept() wakes periodically to check for shutdown."""
    server_socket = socket.create_server(
        (config.host, config.port),
        reuse_port=hasattr(socket, "SO_REUSEPORT"),
    )
    server_socket.settimeout(ACCEPT_POLL_SECONDS)
    SOCKET_LOGGER.debug(
        "Listening socket bound",
        extra={"event": "socket_bound", "host": config.host, "port": config.port},
    )
    return server_socket
