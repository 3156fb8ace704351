"""HTTP server entry point: echo, user-agent and file routes over raw sockets."""

import logging
import signal
import sys

from minihttp.bootstrap.config import (
    build_server_config,
    parse_cli_args,
    read_log_settings,
)
from minihttp.bootstrap.logging_setup import configure_logging
from minihttp.bootstrap.routes import build_router
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.lifecycle.state import ServerLifecycle
from minihttp.transport.accept_loop import run_server

SERVER_LOGGER = CorrelationLoggerAdapter(logging.getLogger("minihttp.server"), {})


def main() -> None:
    """Start the HTTP server and spawn a worker thread per connection."""
    args = parse_cli_args(sys.argv[1:])
    config = build_server_config(args)
    log_settings = read_log_settings()
    configure_logging(
        log_settings.level, log_settings.destination, log_settings.use_json
    )

    router = build_router(config.directory)
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        SERVER_LOGGER.info(
            "Received shutdown signal", extra={"event": "signal", "signal": signum}
        )
        lifecycle.begin_draining()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting HTTP server",
        extra={
            "event": "server_starting",
            "host": config.host,
            "port": config.port,
            "directory": config.directory,
            "log_destination": log_settings.destination,
            "log_level": log_settings.level,
            "socket_timeout": config.socket_timeout,
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
        },
    )
    run_server(config, router, lifecycle)


if __name__ == "__main__":
    main()
