"""Context object shared across worker threads."""

from dataclasses import dataclass
from typing import Optional

from minihttp.lifecycle.state import ServerLifecycle


@dataclass(frozen=True)
class WorkerContext:
    """Read-only dependencies handed to every connection thread."""

    directory: str
    lifecycle: Optional[ServerLifecycle] = None
