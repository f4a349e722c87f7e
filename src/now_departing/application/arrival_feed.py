"""Live arrival feed for a single line/station/direction."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from now_departing.domain.errors import ArrivalFetchError
from now_departing.domain.models.activity_mode import ActivityMode
from now_departing.domain.models.poll_interval_policy import PollIntervalPolicy

if TYPE_CHECKING:
    from now_departing.domain.contracts.scheduler import DeferredTaskProtocol, SchedulerProtocol
    from now_departing.domain.models.arrival_time import ArrivalTime
    from now_departing.domain.ports.arrival_repository import ArrivalRepository

logger = logging.getLogger(__name__)

FeedListener = Callable[["ArrivalFeed"], None]

NO_ARRIVALS_TEXT = "—"
ERROR_TEXT = "--"
NOW_TEXT = "Now"


class ArrivalFeed:
    """Polls the arrival repository and keeps the latest arrivals.

    At most one fetch is in flight at a time: the poll timer is only re-armed
    from a fetch's completion. Stopping bumps a generation counter so a fetch
    still in flight at that moment never touches the feed's state.
    """

    def __init__(
        self,
        repository: ArrivalRepository,
        scheduler: SchedulerProtocol,
        policy: PollIntervalPolicy | None = None,
        activity_mode: ActivityMode = ActivityMode.FOREGROUND,
    ) -> None:
        """Initialize the feed.

        Args:
            repository: Source of arrival predictions.
            scheduler: Execution context for timers and fetch completions.
            policy: Poll intervals per activity mode.
            activity_mode: Initial activity mode.
        """
        self.repository = repository
        self.scheduler = scheduler
        self.policy = policy or PollIntervalPolicy()
        self.samples: list[ArrivalTime] = []
        self.is_loading = False
        self.last_error = ""
        self.last_updated: float | None = None
        self._activity_mode = activity_mode
        self._target: tuple[str, str, str] | None = None
        self._running = False
        self._generation = 0
        self._in_flight = False
        self._timer: DeferredTaskProtocol | None = None
        self._last_completed_at: float | None = None
        self._listeners: list[FeedListener] = []
        self._predecessor: ArrivalFeed | None = None
        self._awaiting_predecessor = False
        self._idle_callbacks: list[Callable[[], None]] = []

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def has_fetch_in_flight(self) -> bool:
        return self._in_flight

    @property
    def activity_mode(self) -> ActivityMode:
        return self._activity_mode

    @property
    def poll_interval(self) -> float | None:
        """Current seconds between fetches, or None while polling is suspended."""
        return self.policy.interval_for(self._activity_mode)

    @property
    def should_show_loader(self) -> bool:
        return self.is_loading and not self.samples

    @property
    def has_error(self) -> bool:
        return bool(self.last_error)

    @property
    def display_text(self) -> str:
        """Short label for the next arrival: "Now", "5m", or a placeholder."""
        if self.samples:
            minutes = self.samples[0].minutes_until_arrival
            return NOW_TEXT if minutes <= 0 else f"{minutes}m"
        if self.last_error:
            return ERROR_TEXT
        return NO_ARRIVALS_TEXT

    def add_listener(self, listener: FeedListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FeedListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def take_over_from(self, predecessor: ArrivalFeed) -> None:
        """Hold this feed's fetches until the predecessor's in-flight fetch has finished.

        Used when a feed replaces another one for the same target, so the two
        never query the repository at the same time.
        """
        if predecessor is not self and predecessor.has_fetch_in_flight:
            self._predecessor = predecessor

    def call_when_idle(self, callback: Callable[[], None]) -> None:
        """Run callback once no fetch is in flight (immediately if none is)."""
        if self._in_flight:
            self._idle_callbacks.append(callback)
        else:
            callback()

    def start(self, line_id: str, station_name: str, direction: str) -> None:
        """Fetch immediately, then keep polling at the current interval."""
        if self._running:
            logger.debug(f"Feed for {line_id} {station_name} {direction} already running")
            return

        self._target = (line_id, station_name, direction)
        self._running = True
        self._generation += 1
        logger.debug(f"Started feed for {self._describe()}")

        self._mark_loading()
        self._tick()

    def stop(self) -> None:
        """Stop polling. A fetch still in flight completes but is discarded."""
        if not self._running:
            return

        self._running = False
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        logger.debug(f"Stopped feed for {self._describe()}")

    def set_activity_mode(self, mode: ActivityMode) -> None:
        """Switch poll interval. A pending tick is re-timed from the last fetch."""
        if mode == self._activity_mode:
            return

        self._activity_mode = mode
        logger.debug(f"Feed for {self._describe()} now {mode.value}, interval {self.poll_interval}")
        if self._running and not self._in_flight:
            self._arm_timer()

    def _describe(self) -> str:
        if self._target is None:
            return "<not started>"
        return " ".join(self._target)

    def _mark_loading(self) -> None:
        if not self.samples and not self.is_loading:
            self.is_loading = True
            self._notify()

    def _tick(self) -> None:
        self._timer = None
        if not self._running or self._target is None:
            return
        if self._in_flight:
            logger.debug(f"Skipping tick for {self._describe()}: previous fetch still running")
            return
        if self._predecessor is not None:
            if self._predecessor.has_fetch_in_flight:
                if not self._awaiting_predecessor:
                    logger.debug(f"Feed for {self._describe()} waiting for replaced feed's fetch")
                    self._awaiting_predecessor = True
                    self._predecessor.call_when_idle(self._on_predecessor_idle)
                return
            self._predecessor = None

        self._in_flight = True
        self._mark_loading()
        self.scheduler.spawn(self._fetch(self._generation, self._target))

    async def _fetch(self, generation: int, target: tuple[str, str, str]) -> None:
        arrivals: list[ArrivalTime] | None = None
        error: str | None = None
        try:
            arrivals = sorted(await self.repository.get_arrivals(*target))
        except ArrivalFetchError as e:
            error = str(e) or e.__class__.__name__
        except Exception as e:
            # Keep polling on unexpected collaborator errors, same as a network failure
            logger.error(
                f"Unexpected error fetching arrivals for {' '.join(target)}: {e}", exc_info=True
            )
            error = str(e) or e.__class__.__name__
        finally:
            self._in_flight = False

        self._complete(generation, arrivals, error)

        callbacks, self._idle_callbacks = self._idle_callbacks, []
        for callback in callbacks:
            callback()

    def _on_predecessor_idle(self) -> None:
        self._awaiting_predecessor = False
        self._tick()

    def _complete(
        self, generation: int, arrivals: list[ArrivalTime] | None, error: str | None
    ) -> None:
        if generation != self._generation or not self._running:
            logger.debug(f"Discarding fetch result for {self._describe()}: feed was stopped")
            if self._running:
                # Restarted while the old fetch was in flight
                self._tick()
            return

        if error is None and arrivals is not None:
            self.samples = arrivals
            self.last_error = ""
            self.last_updated = self.scheduler.time()
        else:
            logger.warning(f"Failed to fetch arrivals for {self._describe()}: {error}")
            self.last_error = error or "Unknown error"
        self.is_loading = False
        self._last_completed_at = self.scheduler.time()

        self._notify()
        self._arm_timer()

    def _arm_timer(self) -> None:
        if not self._running or self._in_flight:
            return
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        interval = self.poll_interval
        if interval is None:
            logger.debug(f"Polling suspended for {self._describe()}")
            return

        delay = interval
        if self._last_completed_at is not None:
            delay = max(0.0, self._last_completed_at + interval - self.scheduler.time())
        self._timer = self.scheduler.schedule(delay, self._tick)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(f"Feed listener failed for {self._describe()}: {e}", exc_info=True)
