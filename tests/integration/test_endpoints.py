"""Integration tests exercising the public routes over real sockets."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import requests

from tests.utils.http import exchange, parse_raw_response

pytestmark = pytest.mark.integration

if TYPE_CHECKING:
    from tests.conftest import ServerProcessInfo

NOT_FOUND = b"HTTP/1.1 404 Not Found\r\nContent-Length: \r\n\r\n"


def _send(server_process: "ServerProcessInfo", raw_request: bytes) -> bytes:
    return exchange(server_process["host"], server_process["port"], raw_request)


def test_echo_endpoint_round_trips_payload(base_url: str) -> None:
    """Echo path should round-trip the payload unmodified."""

    response = requests.get(f"{base_url}/echo/sample", timeout=5)
    assert response.status_code == 200
    assert response.text == "sample"
    assert response.headers["Content-Type"] == "text/plain"
    assert response.headers["Content-Length"] == "6"


def test_echo_endpoint_splits_at_first_marker(base_url: str) -> None:
    """Only the first /echo/ separates route from payload."""

    response = requests.get(f"{base_url}/echo/a/echo/b", timeout=5)
    assert response.status_code == 200
    assert response.text == "a/echo/b"


def test_echo_wire_format_has_trailing_terminator(
    server_process: "ServerProcessInfo",
) -> None:
    """The body is followed by one extra line terminator."""

    raw = _send(server_process, b"GET /echo/abc HTTP/1.1\r\nHost: localhost\r\n\r\n")
    assert raw == (
        b"HTTP/1.1 200 OK\r\n"
        b"Content-Type: text/plain\r\n"
        b"Content-Length: 3\r\n"
        b"\r\n"
        b"abc\r\n"
    )


def test_user_agent_endpoint_reflects_third_line(
    server_process: "ServerProcessInfo",
) -> None:
    """User-agent endpoint mirrors the third request line's value."""

    raw = _send(
        server_process,
        b"GET /user-agent HTTP/1.1\r\nHost: localhost\r\nUser-Agent: xyz\r\n\r\n",
    )
    response = parse_raw_response(raw)
    assert response.status_line == "HTTP/1.1 200 OK"
    assert response.headers["content-length"] == "3"
    assert response.tail == b"xyz\r\n"


def test_root_endpoint_with_no_user_agent_has_empty_body(
    server_process: "ServerProcessInfo",
) -> None:
    """Root answers like /user-agent, here with a zero-length body."""

    raw = _send(server_process, b"GET / HTTP/1.1\r\n\r\n")
    response = parse_raw_response(raw)
    assert response.status_line == "HTTP/1.1 200 OK"
    assert response.headers["content-length"] == "0"
    assert response.tail == b"\r\n"


def test_unknown_path_returns_quirky_not_found(
    server_process: "ServerProcessInfo",
) -> None:
    """Unmatched routes get the bodiless 404 with an empty Content-Length."""

    assert _send(server_process, b"GET /nope HTTP/1.1\r\nHost: h\r\n\r\n") == NOT_FOUND


def test_unknown_path_via_requests(base_url: str) -> None:
    """Standard clients see a 404 with no content."""

    response = requests.get(f"{base_url}/nonexistent", timeout=5)
    assert response.status_code == 404
    assert response.content == b""


def test_missing_file_returns_not_found(server_process: "ServerProcessInfo") -> None:
    """Reading an absent file is a 404."""

    raw = _send(server_process, b"GET /files/missing.txt HTTP/1.1\r\nHost: h\r\n\r\n")
    assert raw == NOT_FOUND


def test_file_get_serves_existing_file(
    base_url: str, server_process: "ServerProcessInfo"
) -> None:
    """Existing files are served as octet streams."""

    payload = b"\x00binary\xffdata"
    (Path(server_process["directory"]) / "data.bin").write_bytes(payload)

    response = requests.get(f"{base_url}/files/data.bin", timeout=5)
    assert response.status_code == 200
    assert response.content == payload
    assert response.headers["Content-Type"] == "application/octet-stream"


def test_file_post_stores_body_and_echoes_request(
    server_process: "ServerProcessInfo",
) -> None:
    """Uploads persist the body and answer 201 with the full raw request."""

    raw_request = (
        b"POST /files/test.txt HTTP/1.1\r\n"
        b"Host: localhost\r\n"
        b"Content-Length: 5\r\n"
        b"\r\n"
        b"hello"
    )
    response = parse_raw_response(_send(server_process, raw_request))
    assert response.status_line == "HTTP/1.1 201 Created"
    assert response.headers["content-type"] == "application/octet-stream"
    assert response.headers["content-length"] == str(len(raw_request))
    assert response.tail == raw_request + b"\r\n"

    stored = Path(server_process["directory"]) / "test.txt"
    assert stored.read_bytes() == b"hello"


def test_file_round_trip(base_url: str, server_process: "ServerProcessInfo") -> None:
    """Uploading a file then reading it back returns the uploaded bytes."""

    # Headers and body go out in one write; the server reads a single buffer.
    payload = b"file-body"
    raw = _send(
        server_process,
        b"POST /files/payload.txt HTTP/1.1\r\nHost: h\r\n"
        b"Content-Length: 9\r\n\r\n" + payload,
    )
    assert raw.startswith(b"HTTP/1.1 201 Created\r\n")

    get_response = requests.get(f"{base_url}/files/payload.txt", timeout=5)
    assert get_response.status_code == 200
    assert get_response.content == payload
    assert (Path(server_process["directory"]) / "payload.txt").read_bytes() == payload


def test_repeated_get_is_byte_identical(server_process: "ServerProcessInfo") -> None:
    """Identical requests for an unchanged file give identical responses."""

    (Path(server_process["directory"]) / "same.txt").write_bytes(b"stable")
    request = b"GET /files/same.txt HTTP/1.1\r\nHost: h\r\n\r\n"
    responses = {_send(server_process, request) for _ in range(3)}
    assert len(responses) == 1


def test_upload_without_separator_is_server_error(
    server_process: "ServerProcessInfo",
) -> None:
    """An upload with no blank line fails without creating a file."""

    raw = _send(server_process, b"POST /files/broken.txt HTTP/1.1\r\nHost: h\r\n")
    assert raw == b"HTTP/1.1 500 Internal Server Error\r\nContent-Length: \r\n\r\n"
    assert not (Path(server_process["directory"]) / "broken.txt").exists()


def test_traversal_get_is_not_found(server_process: "ServerProcessInfo") -> None:
    """Names climbing out of the directory are never served."""

    raw = _send(server_process, b"GET /files/../server.log HTTP/1.1\r\nHost: h\r\n\r\n")
    assert raw == NOT_FOUND


def test_traversal_post_is_server_error(server_process: "ServerProcessInfo") -> None:
    """Uploads cannot write outside the directory."""

    raw = _send(
        server_process, b"POST /files/../escaped.txt HTTP/1.1\r\nHost: h\r\n\r\nx"
    )
    assert raw.startswith(b"HTTP/1.1 500 Internal Server Error\r\n")
    assert not (Path(server_process["directory"]).parent / "escaped.txt").exists()


def test_unsupported_method_on_files_closes_silently(
    server_process: "ServerProcessInfo",
) -> None:
    """DELETE on a /files/ path closes the connection with no bytes."""

    (Path(server_process["directory"]) / "keep.txt").write_bytes(b"keep")
    raw = _send(server_process, b"DELETE /files/keep.txt HTTP/1.1\r\nHost: h\r\n\r\n")
    assert raw == b""
    assert (Path(server_process["directory"]) / "keep.txt").exists()
