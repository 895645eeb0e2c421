"""HTTP Input/Output operations."""

import logging
import socket
from typing import Optional

from minihttp.bootstrap.config import LINE_TERMINATOR, READ_BUFFER_SIZE
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.domain.http_types import (
    HttpResponse,
    ParsedRequest,
    decode_text,
    encode_text,
)

IO_LOGGER = CorrelationLoggerAdapter(logging.getLogger("minihttp.io"), {})


def parse_request(raw: bytes) -> ParsedRequest:
    """Build a request from the first three lines of the raw buffer.

    Line 0 must split into exactly three space-separated tokens, lines 1 and 2
    into exactly two; any line that does not is skipped and its fields stay
    empty. Later lines are never inspected and parsing never fails.
    """
    request = ParsedRequest()
    lines = decode_text(raw).split(LINE_TERMINATOR)

    request_line = lines[0].split(" ")
    if len(request_line) == 3:
        request.method, request.path, request.version = request_line

    if len(lines) > 1:
        host_line = lines[1].split(" ")
        if len(host_line) == 2:
            request.host = host_line[1]

    if len(lines) > 2:
        agent_line = lines[2].split(" ")
        if len(agent_line) == 2:
            request.user_agent = agent_line[1]

    return request


def receive_request(client_socket: socket.socket) -> Optional[bytes]:
    """Perform the connection's single read; None when the peer sent nothing."""
    raw = client_socket.recv(READ_BUFFER_SIZE)
    if not raw:
        return None
    return raw


def serialize_response(response: HttpResponse) -> bytes:
    """Assemble the exact response bytes, including the empty Content-Length quirk."""
    header_lines = [response.status_line]
    if response.content_type is not None:
        header_lines.append(f"Content-Type: {response.content_type}")
    length_value = (
        str(response.content_length) if response.content_length is not None else ""
    )
    header_lines.append(f"Content-Length: {length_value}")
    header_block = encode_text(LINE_TERMINATOR.join(header_lines)) + b"\r\n\r\n"
    payload = header_block + response.body
    if response.trailing_terminator:
        payload += b"\r\n"
    return payload


def send_response(client_socket: socket.socket, response: HttpResponse) -> int:
    """Serialize and send the HTTP response over the socket."""
    payload = serialize_response(response)
    client_socket.sendall(payload)
    IO_LOGGER.debug(
        "Sent response",
        extra={"status": response.status_line, "bytes_out": len(payload)},
    )
    return len(payload)
