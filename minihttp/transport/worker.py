"""Worker thread logic for handling individual client connections."""

import logging
import socket
import threading

from minihttp.domain.correlation_id import CorrelationLoggerAdapter, connection_scope
from minihttp.pipeline.io import parse_request, receive_request, send_response
from minihttp.pipeline.router import route_request
from minihttp.transport.context import WorkerContext

WORKER_LOGGER = CorrelationLoggerAdapter(
    logging.getLogger("minihttp.transport.worker"), {}
)


def _serve_one_request(
    client_socket: socket.socket, client_addr_str: str, context: WorkerContext
) -> None:
    raw = receive_request(client_socket)
    if raw is None:
        if WORKER_LOGGER.logger.isEnabledFor(logging.DEBUG):
            WORKER_LOGGER.debug(
                "Client disconnected before sending a request",
                extra={"event": "client_disconnected", "client": client_addr_str},
            )
        return

    request = parse_request(raw)
    WORKER_LOGGER.debug(
        "Request parsed",
        extra={
            "event": "request_parsed",
            "client": client_addr_str,
            "method": request.method,
            "route": request.path,
            "host": request.host,
            "bytes_in": len(raw),
        },
    )

    response = route_request(request, raw, context.directory)
    if response is None:
        return

    bytes_out = send_response(client_socket, response)
    WORKER_LOGGER.info(
        "Request complete",
        extra={
            "event": "request_complete",
            "client": client_addr_str,
            "method": request.method,
            "route": request.path,
            "status": response.status_line,
            "bytes_out": bytes_out,
        },
    )


def _serve_connection(
    client_socket: socket.socket, client_addr_str: str, context: WorkerContext
) -> None:
    try:
        client_socket.settimeout(None)
        _serve_one_request(client_socket, client_addr_str, context)
    except OSError as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "client": client_addr_str,
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        client_socket.close()
        WORKER_LOGGER.debug(
            "Socket closed",
            extra={"event": "socket_closed", "client": client_addr_str},
        )


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> None:
    """Serve exactly one request on the socket, then close it.

    Errors are logged and stay inside this thread.
    """
    client_addr_str = f"{client_address[0]}:{client_address[1]}"
    current_thread = threading.current_thread()
    lifecycle = context.lifecycle
    if lifecycle is not None:
        lifecycle.register_worker(current_thread)
    try:
        with connection_scope():
            _serve_connection(client_socket, client_addr_str, context)
    finally:
        if lifecycle is not None:
            lifecycle.cleanup_worker(current_thread)
