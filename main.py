"""HTTP server supporting echo, user-agent, and file operations."""

import logging
import signal
import sys

from minihttp.bootstrap.config import ServerConfig, parse_cli_args
from minihttp.bootstrap.logging_setup import configure_logging
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.lifecycle.state import ServerLifecycle
from minihttp.transport.accept_loop import run_server

SERVER_LOGGER = CorrelationLoggerAdapter(logging.getLogger("minihttp.server"), {})


def main() -> None:
    """Start the HTTP server and serve until SIGINT or SIGTERM."""
    args = parse_cli_args(sys.argv[1:])
    configure_logging(
        args.log_level, args.log_destination, use_json=args.log_format == "json"
    )

    config = ServerConfig(shutdown_grace_seconds=args.shutdown_grace_seconds)
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        SERVER_LOGGER.info(
            "Received shutdown signal",
            extra={"event": "shutdown_signal", "signal": signum},
        )
        lifecycle.request_stop()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting HTTP server",
        extra={
            "event": "server_starting",
            "host": args.host,
            "port": args.port,
            "directory": args.directory,
            "log_destination": args.log_destination,
            "log_level": args.log_level,
            "log_format": args.log_format,
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
        },
    )
    run_server(args, config, lifecycle)


if __name__ == "__main__":
    main()
