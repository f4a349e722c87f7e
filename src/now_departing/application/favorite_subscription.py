"""Binding of one favorite to its arrival feed."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from now_departing.domain.models.activity_mode import ActivityMode
from now_departing.domain.models.favorite_view_record import FavoriteViewRecord

if TYPE_CHECKING:
    from now_departing.application.arrival_feed import ArrivalFeed
    from now_departing.domain.contracts.scheduler import DeferredTaskProtocol, SchedulerProtocol
    from now_departing.domain.models.favorite import FavoriteEntity

logger = logging.getLogger(__name__)

SubscriptionListener = Callable[["FavoriteSubscription"], None]


class FavoriteSubscription:
    """Starts a favorite's feed after its stagger delay and relays its updates.

    Lifecycle is Created -> Started -> Stopped. A stopped subscription is
    discarded by the coordinator on rebuild rather than reused.
    """

    def __init__(
        self,
        entity: FavoriteEntity,
        feed: ArrivalFeed,
        scheduler: SchedulerProtocol,
        activity_mode: ActivityMode = ActivityMode.FOREGROUND,
    ) -> None:
        """Initialize the subscription.

        Args:
            entity: The favorite to monitor.
            feed: Feed dedicated to this favorite.
            scheduler: Execution context for the delayed start.
            activity_mode: Initial activity mode, forwarded to the feed.
        """
        self.entity = entity
        self.feed = feed
        self.scheduler = scheduler
        self.has_started = False
        self.activity_mode = activity_mode
        self._is_stopped = False
        self._deferred_start: DeferredTaskProtocol | None = None
        self._listeners: list[SubscriptionListener] = []

        self.feed.set_activity_mode(activity_mode)
        self.feed.add_listener(self._on_feed_changed)

    @property
    def is_waiting_to_start(self) -> bool:
        return not self.has_started and not self._is_stopped

    def add_listener(self, listener: SubscriptionListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: SubscriptionListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def start_delayed(self, delay_seconds: float) -> None:
        """Start the feed now (delay <= 0) or once the delay has elapsed."""
        if self.has_started or self._is_stopped:
            return

        if delay_seconds <= 0:
            self._start()
            return

        if self._deferred_start is not None:
            self._deferred_start.cancel()
        logger.debug(f"Starting {self.entity.key} in {delay_seconds:.2f}s")
        self._deferred_start = self.scheduler.schedule(delay_seconds, self._start)

    def stop(self) -> None:
        """Cancel a pending start and stop the feed."""
        self._is_stopped = True
        self._cancel_deferred_start()
        self.feed.stop()

    def resume(self) -> None:
        """Start the feed right away if it is not running, skipping any remaining delay."""
        self._cancel_deferred_start()
        self._is_stopped = False
        self.has_started = True
        if not self.feed.is_running:
            self._start_feed()

    def set_activity_mode(self, mode: ActivityMode) -> None:
        self.activity_mode = mode
        self.feed.set_activity_mode(mode)

    def view_record(self) -> FavoriteViewRecord:
        """Build the row the presentation layer renders for this favorite."""
        feed = self.feed
        return FavoriteViewRecord(
            entity=self.entity,
            display_text=feed.display_text,
            # Waiting for the stagger delay looks the same as loading
            should_show_loader=(feed.is_loading or self.is_waiting_to_start) and not feed.samples,
            has_error=feed.has_error,
            error_message=feed.last_error,
            samples=tuple(feed.samples),
        )

    def _cancel_deferred_start(self) -> None:
        if self._deferred_start is not None:
            self._deferred_start.cancel()
            self._deferred_start = None

    def _start(self) -> None:
        self._deferred_start = None
        if self.has_started or self._is_stopped:
            return
        self.has_started = True
        self._start_feed()

    def _start_feed(self) -> None:
        self.feed.start(self.entity.line_id, self.entity.station_name, self.entity.direction)

    def _on_feed_changed(self, _feed: ArrivalFeed) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception as e:
                logger.error(
                    f"Subscription listener failed for {self.entity.key}: {e}", exc_info=True
                )
