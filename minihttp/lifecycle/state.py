"""Stop flag and in-flight worker bookkeeping shared by the accept loop and workers."""

import logging
import threading
import time

from minihttp.domain.correlation_id import CorrelationLoggerAdapter

LIFECYCLE_LOGGER = CorrelationLoggerAdapter(logging.getLogger("minihttp.lifecycle"), {})
JOIN_SLICE_SECONDS = 0.1


class ServerLifecycle:
    """Process-wide run state.

    Signal handlers call :meth:`request_stop`; the accept loop polls
    :meth:`should_stop` between accepts; workers register themselves for the
    lifetime of their connection so shutdown can give them a grace period.
    """

    def __init__(self) -> None:
        self._stopping = threading.Event()
        self._guard = threading.Lock()
        self._active: set[threading.Thread] = set()

    def should_stop(self) -> bool:
        return self._stopping.is_set()

    def request_stop(self) -> None:
        self._stopping.set()
        LIFECYCLE_LOGGER.info("Stop requested", extra={"event": "stop_requested"})

    def register_worker(self, thread: threading.Thread) -> None:
        with self._guard:
            self._active.add(thread)

    def cleanup_worker(self, thread: threading.Thread) -> None:
        with self._guard:
            self._active.discard(thread)

    def active_worker_count(self) -> int:
        with self._guard:
            return len(self._active)

    def _live_workers(self) -> list[threading.Thread]:
        with self._guard:
            self._active = {thread for thread in self._active if thread.is_alive()}
            return list(self._active)

    def wait_for_workers(self, timeout: float) -> bool:
        """Join live workers until none remain or ``timeout`` seconds pass.

        Returns False when workers were still running at the deadline.
        """
        deadline = time.monotonic() + timeout
        pending = self._live_workers()
        while pending:
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                LIFECYCLE_LOGGER.warning(
                    "Workers still running after shutdown grace period",
                    extra={
                        "event": "shutdown_timeout",
                        "remaining_workers": len(pending),
                    },
                )
                return False
            pending[0].join(timeout=min(JOIN_SLICE_SECONDS, remaining))
            pending = self._live_workers()
        return True
