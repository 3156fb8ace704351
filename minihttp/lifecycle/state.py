"""Server lifecycle state management."""

import logging
import threading
import time

from minihttp.domain.correlation_id import CorrelationLoggerAdapter

LIFECYCLE_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.lifecycle"), {}
)

JOIN_SLICE_SECONDS = 0.1


class ServerLifecycle:
    """Tracks the draining flag and the worker threads still serving requests."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._draining_event = threading.Event()
        self._workers: set[threading.Thread] = set()

    def is_draining(self) -> bool:
        """Return True once shutdown has been requested."""
        return self._draining_event.is_set()

    def begin_draining(self) -> None:
        """Stop accepting new connections; in-flight ones run to completion."""
        self._draining_event.set()
        LIFECYCLE_LOGGER.info(
            "Beginning graceful shutdown", extra={"event": "shutdown_started"}
        )

    def register_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.add(thread)

    def cleanup_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.discard(thread)

    def active_worker_count(self) -> int:
        with self._lock:
            return len(self._workers)

    def wait_for_workers(self, timeout: float) -> bool:
        """Join worker threads until all finish or ``timeout`` elapses."""
        deadline = time.monotonic() + timeout
        while True:
            with self._lock:
                self._workers = {w for w in self._workers if w.is_alive()}
                active_workers = list(self._workers)
            if not active_workers:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                LIFECYCLE_LOGGER.warning(
                    "Shutdown timeout exceeded",
                    extra={
                        "event": "shutdown_timeout",
                        "remaining_workers": len(active_workers),
                    },
                )
                return False
            for worker in active_workers:
                worker.join(timeout=min(JOIN_SLICE_SECONDS, remaining))
                if time.monotonic() >= deadline:
                    break
