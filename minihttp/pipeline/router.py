"""Request routing logic."""

import logging
from typing import Optional

from minihttp.bootstrap.config import (
    ECHO_ENDPOINT_MARKER,
    FILES_ENDPOINT_PREFIX,
    USER_AGENT_PATHS,
)
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import HttpResponse, ParsedRequest
from minihttp.domain.response_builders import not_found_response
from minihttp.handlers.file_handler import read_file_response, upload_file_response
from minihttp.handlers.system_handlers import handle_echo, handle_user_agent

ROUTER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.pipeline.router"), {}
)


def _log_match(route: str) -> None:
    if ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ROUTER_LOGGER.debug(
            "Route matched", extra={"event": "route_matched", "route": route}
        )


def _files_route(
    request: ParsedRequest, raw: bytes, directory: str
) -> Optional[HttpResponse]:
    if request.method == "GET":
        parts = request.path.split(FILES_ENDPOINT_PREFIX)
        if len(parts) != 2:
            ROUTER_LOGGER.info(
                "Ambiguous file path in request",
                extra={"event": "route_not_found", "route": request.path},
            )
            return not_found_response()
        return read_file_response(directory, parts[1])

    if request.method == "POST":
        filename = request.path.removeprefix(FILES_ENDPOINT_PREFIX)
        return upload_file_response(directory, filename, raw)

    ROUTER_LOGGER.warning(
        "Unsupported method for file route, closing without response",
        extra={
            "event": "unsupported_method",
            "route": request.path,
            "method": request.method,
        },
    )
    return None


def route_request(
    request: ParsedRequest, raw: bytes, directory: str
) -> Optional[HttpResponse]:
    """Route the request to its handler.

    Returns None when no response should be written at all, which only happens
    for methods other than GET and POST on a /files/ path.
    """
    if request.path in USER_AGENT_PATHS:
        _log_match(request.path)
        return handle_user_agent(request)

    if ECHO_ENDPOINT_MARKER in request.path:
        _log_match("/echo/*")
        return handle_echo(request)

    if FILES_ENDPOINT_PREFIX in request.path:
        _log_match("/files/*")
        return _files_route(request, raw, directory)

    ROUTER_LOGGER.info(
        "No matching route found",
        extra={
            "event": "route_not_found",
            "route": request.path,
            "method": request.method,
        },
    )
    return not_found_response()
