"""Server configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


DEFAULT_HOST = os.getenv("HTTP_SERVER_HOST", "0.0.0.0")
DEFAULT_PORT = _env_int("HTTP_SERVER_PORT", 4221)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("HTTP_SERVER_SHUTDOWN_GRACE_SECONDS", 5)

READ_BUFFER_SIZE = 16 * 1024
LISTENER_POLL_SECONDS = 0.5

LINE_TERMINATOR = "\r\n"
HEADER_DELIMITER = "\r\n\r\n"
# Unicode White_Space, trimmed from both ends of an upload before the body is
# split off. Narrower than str.strip(), which also drops \x1c-\x1f.
UPLOAD_TRIM_CHARACTERS = (
    " \t\n\v\f\r\x85\xa0\u1680"
    + "".join(chr(code) for code in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000"
)
ECHO_ENDPOINT_MARKER = "/echo/"
FILES_ENDPOINT_PREFIX = "/files/"
USER_AGENT_PATHS = {"/user-agent", "/"}


@dataclass
class ServerConfig:
    """Process-level settings that are not part of the request contract."""

    shutdown_grace_seconds: int


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(description="Minimal HTTP file and echo server")
    parser.add_argument(
        "--directory",
        default="",
        help="Directory that /files/ requests read from and write to",
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    default_log_level = os.getenv("HTTP_SERVER_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("HTTP_SERVER_LOG_DESTINATION", "stdout")
    default_log_format = os.getenv("HTTP_SERVER_LOG_FORMAT", "json").lower()
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=default_log_format,
        choices=["json", "text"],
        type=str.lower,
        help="One JSON object per line, or plain text",
    )
    parser.add_argument(
        "--shutdown-grace-seconds",
        type=int,
        default=DEFAULT_SHUTDOWN_GRACE_SECONDS,
        help="Seconds to wait for in-flight connections after a shutdown signal",
    )
    return parser.parse_args(argv)
