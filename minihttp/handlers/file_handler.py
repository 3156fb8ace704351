"""File serving handlers bound to one served directory."""

import logging

from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import HttpRequest, HttpResponse
from minihttp.domain.response_builders import (
    bad_request_response,
    created_response,
    forbidden_response,
    internal_error_response,
    not_found_response,
    set_binary_body,
)
from minihttp.domain.sandbox import ForbiddenPath, resolve_sandbox_path

FILE_LOGGER = CorrelationLoggerAdapter(logging.getLogger("minihttp.handlers.file"), {})


class FileHandlers:
    """Read and write files below ``directory`` for the /files/:filename routes."""

    def __init__(self, directory: str) -> None:
        self.directory = directory

    def _resolve(self, request: HttpRequest):
        filename = request.params.get("filename")
        if not filename:
            return None, bad_request_response()
        try:
            return resolve_sandbox_path(self.directory, filename), None
        except ForbiddenPath:
            FILE_LOGGER.warning(
                "Forbidden path access blocked",
                extra={
                    "event": "forbidden_path",
                    "path": filename,
                    "method": request.method.value,
                },
            )
            return None, forbidden_response()

    def read_file(self, request: HttpRequest, response: HttpResponse) -> HttpResponse:
        """Return the file's bytes, or 404 when it does not exist."""
        resolved_path, error_response = self._resolve(request)
        if error_response is not None:
            return error_response

        if not resolved_path.is_file():
            FILE_LOGGER.info(
                "File not found",
                extra={"event": "file_not_found", "path": resolved_path.as_posix()},
            )
            return not_found_response()

        payload = resolved_path.read_bytes()
        FILE_LOGGER.info(
            "File read operation complete",
            extra={
                "event": "file_read_complete",
                "path": resolved_path.as_posix(),
                "bytes_out": len(payload),
            },
        )
        return set_binary_body(response, payload)

    def write_file(self, request: HttpRequest, _response: HttpResponse) -> HttpResponse:
        """Store the request body, answering 201 Created."""
        resolved_path, error_response = self._resolve(request)
        if error_response is not None:
            return error_response

        payload = request.body or b""
        try:
            resolved_path.parent.mkdir(parents=True, exist_ok=True)
            resolved_path.write_bytes(payload)
        except OSError as error:
            FILE_LOGGER.error(
                "File write failed",
                extra={
                    "event": "file_write_failed",
                    "path": resolved_path.as_posix(),
                    "error_type": type(error).__name__,
                },
            )
            return internal_error_response()

        FILE_LOGGER.info(
            "File write complete",
            extra={
                "event": "file_write_complete",
                "path": resolved_path.as_posix(),
                "bytes_in": len(payload),
            },
        )
        return created_response()
