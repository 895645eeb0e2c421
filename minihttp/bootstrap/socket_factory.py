"""Listening socket creation."""

import argparse
import logging
import socket
import sys

from minihttp.bootstrap.config import LISTENER_POLL_SECONDS
from minihttp.domain.correlation_id import CorrelationLoggerAdapter

SOCKET_LOGGER = CorrelationLoggerAdapter(logging.getLogger("minihttp.socket"), {})


def create_server_socket(args: argparse.Namespace) -> socket.socket:
    """Bind the listener; a bind failure terminates the process with status 1."""
    try:
        server_socket = socket.create_server((args.host, args.port))
    except OSError as error:
        SOCKET_LOGGER.critical(
            f"Failed to bind to port {args.port}",
            extra={
                "event": "bind_failed",
                "host": args.host,
                "port": args.port,
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )
        sys.exit(1)
    server_socket.settimeout(LISTENER_POLL_SECONDS)
    return server_socket
