"""Pure HTTP response builders."""

from minihttp.domain.http_types import HttpResponse

PROTOCOL = "HTTP/1.1 "
STATUS_OK = "200 OK"
STATUS_CREATED = "201 Created"
STATUS_NOT_FOUND = "404 Not Found"
STATUS_INTERNAL_SERVER_ERROR = "500 Internal Server Error"

CONTENT_TYPE_TEXT = "text/plain"
CONTENT_TYPE_OCTET = "application/octet-stream"


def _body_response(status: str, content_type: str, payload: bytes) -> HttpResponse:
    return HttpResponse(
        PROTOCOL + status,
        payload,
        content_type=content_type,
        content_length=len(payload),
        trailing_terminator=True,
    )


def _bodyless_response(status: str) -> HttpResponse:
    return HttpResponse(PROTOCOL + status)


def text_response(payload: bytes) -> HttpResponse:
    """Return a 200 text/plain response carrying the payload."""
    return _body_response(STATUS_OK, CONTENT_TYPE_TEXT, payload)


def octet_response(payload: bytes) -> HttpResponse:
    """Return a 200 application/octet-stream response carrying file bytes."""
    return _body_response(STATUS_OK, CONTENT_TYPE_OCTET, payload)


def created_response(raw_request: bytes) -> HttpResponse:
    """Return a 201 response that echoes the complete upload request."""
    return _body_response(STATUS_CREATED, CONTENT_TYPE_OCTET, raw_request)


def not_found_response() -> HttpResponse:
    return _bodyless_response(STATUS_NOT_FOUND)


def server_error_response() -> HttpResponse:
    return _bodyless_response(STATUS_INTERNAL_SERVER_ERROR)
