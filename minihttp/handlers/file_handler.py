"""File download and upload handlers."""

import logging

from minihttp.bootstrap.config import HEADER_DELIMITER, UPLOAD_TRIM_CHARACTERS
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import HttpResponse, decode_text, encode_text
from minihttp.domain.response_builders import (
    created_response,
    not_found_response,
    octet_response,
    server_error_response,
)
from minihttp.domain.sandbox import ForbiddenPath, resolve_sandbox_path

FILE_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.handlers.file"), {}
)


def read_file_response(directory: str, filename: str) -> HttpResponse:
    """Serve a file from the directory; every failure is reported as 404."""
    try:
        resolved_path = resolve_sandbox_path(directory, filename)
    except ForbiddenPath:
        FILE_LOGGER.warning(
            "Forbidden path access blocked",
            extra={"event": "forbidden_path", "path": filename, "method": "GET"},
        )
        return not_found_response()

    try:
        with open(resolved_path, "rb") as file_handle:
            content = file_handle.read()
    except OSError as error:
        FILE_LOGGER.info(
            "File not found",
            extra={
                "event": "file_not_found",
                "path": resolved_path.as_posix(),
                "error_type": type(error).__name__,
            },
        )
        return not_found_response()

    FILE_LOGGER.info(
        "File read operation complete",
        extra={
            "event": "file_read_complete",
            "path": resolved_path.as_posix(),
            "bytes_out": len(content),
        },
    )
    return octet_response(content)


def upload_file_response(directory: str, filename: str, raw: bytes) -> HttpResponse:
    """Store the body of the raw request under filename.

    The body is whatever follows the first blank line once the whole request
    has been stripped of surrounding whitespace. On success the entire raw
    request, not the stored body, is sent back.
    """
    trimmed = decode_text(raw).strip(UPLOAD_TRIM_CHARACTERS)
    _, separator, body = trimmed.partition(HEADER_DELIMITER)
    if not separator:
        FILE_LOGGER.warning(
            "Upload request has no header/body separator",
            extra={"event": "upload_missing_separator", "path": filename},
        )
        return server_error_response()

    try:
        resolved_path = resolve_sandbox_path(directory, filename)
    except ForbiddenPath:
        FILE_LOGGER.warning(
            "Forbidden path access blocked",
            extra={"event": "forbidden_path", "path": filename, "method": "POST"},
        )
        return server_error_response()

    payload = encode_text(body)
    try:
        with open(resolved_path, "wb") as file_handle:
            file_handle.write(payload)
    except OSError as error:
        FILE_LOGGER.error(
            "File write failed",
            extra={
                "event": "file_write_failed",
                "path": resolved_path.as_posix(),
                "error_type": type(error).__name__,
            },
        )
        return server_error_response()

    FILE_LOGGER.info(
        "File write complete",
        extra={
            "event": "file_write_complete",
            "path": resolved_path.as_posix(),
            "bytes_in": len(payload),
        },
    )
    return created_response(raw)
