"""Unit tests for lifecycle state and the accept loop shutdown path."""

import logging
import socket
import threading
from unittest.mock import MagicMock, patch

from minihttp.bootstrap.config import ServerConfig
from minihttp.lifecycle.state import ServerLifecycle
from minihttp.pipeline.router import Router
from minihttp.transport.accept_loop import run_server


def test_begin_draining_sets_flag():
    lifecycle = ServerLifecycle()
    assert not lifecycle.is_draining()

    lifecycle.begin_draining()

    assert lifecycle.is_draining()


def test_worker_registration_round_trip():
    lifecycle = ServerLifecycle()
    thread = threading.current_thread()

    lifecycle.register_worker(thread)
    assert lifecycle.active_worker_count() == 1

    lifecycle.cleanup_worker(thread)
    assert lifecycle.active_worker_count() == 0


def test_wait_for_workers_returns_true_when_workers_finish():
    lifecycle = ServerLifecycle()
    release = threading.Event()
    worker = threading.Thread(target=release.wait, args=(5,))
    worker.start()
    lifecycle.register_worker(worker)

    release.set()

    assert lifecycle.wait_for_workers(2)


def test_wait_for_workers_times_out_on_stuck_worker(caplog):
    caplog.set_level(logging.WARNING, logger="minihttp.lifecycle")
    lifecycle = ServerLifecycle()
    release = threading.Event()
    worker = threading.Thread(target=release.wait, args=(5,))
    worker.start()
    lifecycle.register_worker(worker)

    try:
        assert not lifecycle.wait_for_workers(0.2)
    finally:
        release.set()
        worker.join()

    assert any(
        getattr(record, "event", None) == "shutdown_timeout" for record in caplog.records
    )


def test_run_server_spawns_worker_and_stops_when_draining(caplog):
    caplog.set_level(logging.INFO, logger="minihttp.transport.accept")
    lifecycle = ServerLifecycle()
    client_socket = MagicMock(spec=socket.socket)
    client_address = ("127.0.0.1", 40000)
    server_socket = MagicMock()

    def accept_then_drain():
        if server_socket.accept.call_count == 1:
            return client_socket, client_address
        lifecycle.begin_draining()
        raise socket.timeout

    server_socket.accept.side_effect = accept_then_drain
    config = ServerConfig(directory=".", shutdown_grace_seconds=1)

    with patch(
        "minihttp.transport.accept_loop.create_server_socket",
        return_value=server_socket,
    ), patch("minihttp.transport.accept_loop._spawn_worker") as mock_spawn:
        run_server(config, Router(), lifecycle)

    mock_spawn.assert_called_once()
    spawned_socket, spawned_address, context = mock_spawn.call_args[0]
    assert spawned_socket is client_socket
    assert spawned_address == client_address
    assert context.lifecycle is lifecycle
    server_socket.close.assert_called_once()
    events = [getattr(record, "event", None) for record in caplog.records]
    assert "server_listening" in events
    assert "server_stopped" in events


def test_run_server_logs_accept_errors_and_continues(caplog):
    caplog.set_level(logging.ERROR, logger="minihttp.transport.accept")
    lifecycle = ServerLifecycle()
    server_socket = MagicMock()
    calls = {"count": 0}

    def failing_accept():
        calls["count"] += 1
        if calls["count"] == 1:
            raise OSError("accept failed")
        lifecycle.begin_draining()
        raise socket.timeout

    server_socket.accept.side_effect = failing_accept

    with patch(
        "minihttp.transport.accept_loop.create_server_socket",
        return_value=server_socket,
    ):
        run_server(ServerConfig(directory="."), Router(), lifecycle)

    assert any(
        getattr(record, "event", None) == "accept_error" for record in caplog.records
    )
