"""Protocol for the single cooperative scheduler."""

from collections.abc import Callable, Coroutine
from typing import Any, Protocol


class DeferredTaskProtocol(Protocol):
    """Handle to an action scheduled to run later."""

    def cancel(self) -> None:
        """Prevent the action from running. Safe to call after it has run."""
        ...

    @property
    def is_pending(self) -> bool:
        """Whether the action has neither run nor been cancelled."""
        ...


class SchedulerProtocol(Protocol):
    """Protocol for the execution context all timers and fetch completions run on."""

    def schedule(self, delay_seconds: float, action: Callable[[], None]) -> DeferredTaskProtocol:
        """Run action once after delay_seconds.

        Args:
            delay_seconds: Delay before the action runs.
            action: Zero-argument callable.

        Returns:
            A handle whose cancel() prevents the action from running.
        """
        ...

    def spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        """Run a coroutine concurrently on the same context."""
        ...

    def time(self) -> float:
        """Monotonic time in seconds."""
        ...
