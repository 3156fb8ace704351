"""Unit tests validating CLI parsing and environment-driven configuration."""

from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from minihttp.bootstrap.config import (
    DEFAULT_HOST,
    DEFAULT_MAX_REQUEST_BYTES,
    DEFAULT_PORT,
    DEFAULT_SHUTDOWN_GRACE_SECONDS,
    DEFAULT_SOCKET_TIMEOUT,
    build_server_config,
    parse_cli_args,
    read_log_settings,
)

if TYPE_CHECKING:
    from _pytest.monkeypatch import MonkeyPatch

ENV_NAMES = (
    "MINIHTTP_HOST",
    "MINIHTTP_PORT",
    "MINIHTTP_SOCKET_TIMEOUT",
    "MINIHTTP_SHUTDOWN_GRACE_SECONDS",
    "MINIHTTP_MAX_REQUEST_BYTES",
    "MINIHTTP_LOG_LEVEL",
    "MINIHTTP_LOG_DESTINATION",
    "MINIHTTP_LOG_FORMAT",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: "MonkeyPatch") -> None:
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def test_directory_defaults_to_current_directory() -> None:
    assert parse_cli_args([]).directory == "."


def test_directory_flag_overrides_default(tmp_path: Path) -> None:
    args = parse_cli_args(["--directory", tmp_path.as_posix()])
    assert args.directory == tmp_path.as_posix()


def test_unknown_flags_are_rejected() -> None:
    with pytest.raises(SystemExit):
        parse_cli_args(["--port", "9090"])


def test_build_server_config_uses_defaults() -> None:
    config = build_server_config(parse_cli_args(["--directory", "/srv/files"]))

    assert config.directory == "/srv/files"
    assert config.host == DEFAULT_HOST
    assert config.port == DEFAULT_PORT
    assert config.socket_timeout == DEFAULT_SOCKET_TIMEOUT
    assert config.shutdown_grace_seconds == DEFAULT_SHUTDOWN_GRACE_SECONDS
    assert config.max_request_bytes == DEFAULT_MAX_REQUEST_BYTES


def test_build_server_config_honors_environment(monkeypatch: "MonkeyPatch") -> None:
    monkeypatch.setenv("MINIHTTP_HOST", "0.0.0.0")
    monkeypatch.setenv("MINIHTTP_PORT", "9090")
    monkeypatch.setenv("MINIHTTP_SOCKET_TIMEOUT", "5")
    monkeypatch.setenv("MINIHTTP_SHUTDOWN_GRACE_SECONDS", "2")
    monkeypatch.setenv("MINIHTTP_MAX_REQUEST_BYTES", "2048")

    config = build_server_config(parse_cli_args([]))

    assert config.host == "0.0.0.0"
    assert config.port == 9090
    assert config.socket_timeout == 5
    assert config.shutdown_grace_seconds == 2
    assert config.max_request_bytes == 2048


def test_read_log_settings_defaults() -> None:
    settings = read_log_settings()

    assert settings.level == "INFO"
    assert settings.destination == "stdout"
    assert settings.use_json is True


def test_read_log_settings_honors_environment(monkeypatch: "MonkeyPatch") -> None:
    monkeypatch.setenv("MINIHTTP_LOG_LEVEL", "warning")
    monkeypatch.setenv("MINIHTTP_LOG_DESTINATION", "app.log")
    monkeypatch.setenv("MINIHTTP_LOG_FORMAT", "text")

    settings = read_log_settings()

    assert settings.level == "WARNING"
    assert settings.destination == "app.log"
    assert settings.use_json is False
