"""System handlers for echo and user-agent requests."""

import logging

from minihttp.bootstrap.config import ECHO_ENDPOINT_MARKER
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import HttpResponse, ParsedRequest, encode_text
from minihttp.domain.response_builders import text_response

SYSTEM_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.handlers.system"), {}
)


def handle_echo(request: ParsedRequest) -> HttpResponse:
    """Return everything after the first /echo/ in the path, verbatim."""
    _, _, content = request.path.partition(ECHO_ENDPOINT_MARKER)
    payload = encode_text(content)
    if SYSTEM_LOGGER.logger.isEnabledFor(logging.DEBUG):
        SYSTEM_LOGGER.debug(
            "Echo request processed",
            extra={"event": "echo_request", "bytes_out": len(payload)},
        )
    return text_response(payload)


def handle_user_agent(request: ParsedRequest) -> HttpResponse:
    """Return the user agent taken from the third request line."""
    if SYSTEM_LOGGER.logger.isEnabledFor(logging.DEBUG):
        SYSTEM_LOGGER.debug(
            "User-agent request processed",
            extra={"event": "user_agent_request", "user_agent": request.user_agent},
        )
    return text_response(encode_text(request.user_agent))
