"""Shared HTTP type definitions to avoid circular imports."""

from dataclasses import dataclass
from typing import Optional

TEXT_ENCODING = "utf-8"
TEXT_ERRORS = "surrogateescape"


def decode_text(raw: bytes) -> str:
    """Decode request bytes so that any byte sequence survives a round trip."""
    return raw.decode(TEXT_ENCODING, TEXT_ERRORS)


def encode_text(text: str) -> bytes:
    return text.encode(TEXT_ENCODING, TEXT_ERRORS)


@dataclass
class ParsedRequest:
    """Positional view of the first three request lines.

    Every field stays empty when its line is missing or malformed.
    """

    method: str = ""
    path: str = ""
    version: str = ""
    host: str = ""
    user_agent: str = ""


@dataclass
class HttpResponse:
    """Represents an HTTP response to be sent to a client.

    A ``content_length`` of ``None`` emits the header label with no value.
    """

    status_line: str
    body: bytes = b""
    content_type: Optional[str] = None
    content_length: Optional[int] = None
    trailing_terminator: bool = False
