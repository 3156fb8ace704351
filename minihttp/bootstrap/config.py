"""Server configuration: CLI parsing plus environment-driven settings."""

import argparse
import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value else default


DEFAULT_HOST = "localhost"
DEFAULT_PORT = 4221
DEFAULT_SOCKET_TIMEOUT = 60
DEFAULT_SHUTDOWN_GRACE_SECONDS = 30
DEFAULT_MAX_REQUEST_BYTES = 5 * 1024 * 1024
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DESTINATION = "stdout"

HEADER_DELIMITER = b"\r\n\r\n"


@dataclass
class ServerConfig:
    """Settings threaded into the accept loop, workers and file handlers."""

    directory: str
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    socket_timeout: int = DEFAULT_SOCKET_TIMEOUT
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS
    max_request_bytes: int = DEFAULT_MAX_REQUEST_BYTES


@dataclass
class LogSettings:
    """Logging options read from the environment."""

    level: str
    destination: str
    use_json: bool


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments; --directory is the only flag."""
    parser = argparse.ArgumentParser(description="Minimal HTTP/1.1 server")
    parser.add_argument(
        "--directory",
        default=".",
        help="Directory read and written by the /files/ routes",
    )
    return parser.parse_args(argv)


def build_server_config(args: argparse.Namespace) -> ServerConfig:
    """Combine CLI arguments with MINIHTTP_* environment overrides."""
    return ServerConfig(
        directory=args.directory,
        host=_env_str("MINIHTTP_HOST", DEFAULT_HOST),
        port=_env_int("MINIHTTP_PORT", DEFAULT_PORT),
        socket_timeout=_env_int("MINIHTTP_SOCKET_TIMEOUT", DEFAULT_SOCKET_TIMEOUT),
        shutdown_grace_seconds=_env_int(
            "MINIHTTP_SHUTDOWN_GRACE_SECONDS", DEFAULT_SHUTDOWN_GRACE_SECONDS
        ),
        max_request_bytes=_env_int(
            "MINIHTTP_MAX_REQUEST_BYTES", DEFAULT_MAX_REQUEST_BYTES
        ),
    )


def read_log_settings() -> LogSettings:
    """Read logging level, destination and format from the environment."""
    return LogSettings(
        level=_env_str("MINIHTTP_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        destination=_env_str("MINIHTTP_LOG_DESTINATION", DEFAULT_LOG_DESTINATION),
        use_json=_env_str("MINIHTTP_LOG_FORMAT", "json").lower() != "text",
    )
