"""Main connection acceptance loop."""

import argparse
import logging
import socket
import sys
import threading

from minihttp.bootstrap.config import ServerConfig
from minihttp.bootstrap.socket_factory import create_server_socket
from minihttp.domain.correlation_id import CorrelationLoggerAdapter
from minihttp.lifecycle.state import ServerLifecycle
from minihttp.transport.context import WorkerContext
from minihttp.transport.worker import handle_client

ACCEPT_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.transport.accept"), {}
)


def _spawn_worker(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    handler_context: WorkerContext,
) -> None:
    """Hand a newly accepted connection to its own thread."""
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={
                "event": "client_accepted",
                "client": f"{client_address[0]}:{client_address[1]}",
            },
        )
    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, handler_context),
        daemon=True,
    )
    thread.start()


def run_server(
    args: argparse.Namespace, config: ServerConfig, lifecycle: ServerLifecycle
) -> None:
    """Accept connections until a stop is requested.

    Any accept failure other than the periodic poll timeout ends the process
    with status 1.
    """
    server_socket = create_server_socket(args)

    ACCEPT_LOGGER.info(
        f"Server listening on port {args.port}",
        extra={"event": "server_listening", "host": args.host, "port": args.port},
    )

    handler_context = WorkerContext(directory=args.directory, lifecycle=lifecycle)

    try:
        while not lifecycle.should_stop():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.critical(
                    "Error accepting connection",
                    extra={
                        "event": "accept_error",
                        "error_type": type(error).__name__,
                        "error": str(error),
                    },
                )
                sys.exit(1)

            _spawn_worker(client_socket, client_address, handler_context)
    finally:
        server_socket.close()

    ACCEPT_LOGGER.info(
        "Waiting for active connections to complete",
        extra={
            "event": "shutdown_waiting",
            "shutdown_grace_seconds": config.shutdown_grace_seconds,
            "remaining_workers": lifecycle.active_worker_count(),
        },
    )
    lifecycle.wait_for_workers(config.shutdown_grace_seconds)
    ACCEPT_LOGGER.info("Server shutdown complete", extra={"event": "server_stopped"})
