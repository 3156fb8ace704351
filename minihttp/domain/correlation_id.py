"""Request correlation ID management using contextvars."""

import contextvars
import logging
import uuid
from typing import Any, Mapping, MutableMapping, Optional

LOGGER_PREFIX = "minihttp."
REQUEST_ID_HEADER = "X-Request-ID"

_correlation_id_var: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)


def generate_correlation_id() -> str:
    """Generate a new correlation ID using UUID4."""
    return str(uuid.uuid4())


def get_correlation_id() -> Optional[str]:
    """Retrieve the current correlation ID from context."""
    return _correlation_id_var.get()


def set_correlation_id(correlation_id: str) -> None:
    """Store a correlation ID in the current context."""
    _correlation_id_var.set(correlation_id)


def clear_correlation_id() -> None:
    """Remove the correlation ID from the current context."""
    _correlation_id_var.set(None)


def adopt_client_correlation_id(headers: Mapping[str, str]) -> Optional[str]:
    """Switch to the client's X-Request-ID when it supplied one."""
    incoming = headers.get(REQUEST_ID_HEADER)
    if incoming:
        set_correlation_id(incoming)
    return get_correlation_id()


class CorrelationLoggerAdapter(logging.LoggerAdapter):
    """Logger adapter that injects the correlation ID and component into records."""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})

        correlation_id = get_correlation_id()
        extra["correlation_id"] = correlation_id if correlation_id is not None else "-"

        logger_name = self.logger.name
        if logger_name.startswith(LOGGER_PREFIX):
            extra["component"] = logger_name[len(LOGGER_PREFIX) :]
        else:
            extra["component"] = logger_name

        kwargs["extra"] = extra
        return msg, kwargs
