"""Cooperative cancellation for generation requests and tool processing."""

from typing import Callable, List, Optional

from .exceptions import GenerationAbortError
from .logger import get_logger

logger = get_logger(__name__)

CancellationListener = Callable[[str], None]


class CancellationSignal:
    """Read side of a cancellation request.

    Consumers poll :attr:`cancelled` or register a listener. Listeners must be
    removed by whoever added them, typically in a ``finally`` block.
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._reason: Optional[str] = None
        self._listeners: List[CancellationListener] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def add_listener(self, listener: CancellationListener) -> None:
        """Register a callback invoked once with the reason when cancellation happens."""
        self._listeners.append(listener)

    def remove_listener(self, listener: CancellationListener) -> None:
        """Remove a previously registered callback. Unknown callbacks are ignored."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def raise_if_cancelled(self) -> None:
        """Raise GenerationAbortError if cancellation was requested."""
        if self._cancelled:
            raise GenerationAbortError(self._reason or "Generation was cancelled")

    def _trigger(self, reason: str) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        self._reason = reason
        logger.debug("Cancellation requested: %s", reason)
        for listener in list(self._listeners):
            listener(reason)


class CancellationController:
    """Write side of a cancellation request; owns its :class:`CancellationSignal`."""

    def __init__(self) -> None:
        self.signal = CancellationSignal()

    def cancel(self, reason: str = "Request was aborted") -> None:
        """Request cancellation. Repeated calls are no-ops."""
        self.signal._trigger(reason)
