"""Coordinator owning one subscription per favorite."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from now_departing.application.arrival_feed import ArrivalFeed
from now_departing.application.favorite_subscription import FavoriteSubscription
from now_departing.domain.models.activity_mode import ActivityMode
from now_departing.domain.models.poll_interval_policy import PollIntervalPolicy

if TYPE_CHECKING:
    from collections.abc import Sequence

    from now_departing.domain.contracts.favorites_listener import FavoritesListenerProtocol
    from now_departing.domain.contracts.scheduler import SchedulerProtocol
    from now_departing.domain.models.favorite import FavoriteEntity
    from now_departing.domain.models.favorite_view_record import FavoriteViewRecord
    from now_departing.domain.ports.arrival_repository import ArrivalRepository

logger = logging.getLogger(__name__)

# Half a second between favorites keeps startup from bursting the transit API
DEFAULT_STAGGER_SECONDS = 0.5


class FavoritesCoordinator:
    """Polls every favorite and publishes per-row view records."""

    def __init__(
        self,
        repository: ArrivalRepository,
        scheduler: SchedulerProtocol,
        policy: PollIntervalPolicy | None = None,
        stagger_seconds: float = DEFAULT_STAGGER_SECONDS,
        activity_mode: ActivityMode = ActivityMode.FOREGROUND,
    ) -> None:
        """Initialize the coordinator.

        Args:
            repository: Arrival source shared by all feeds.
            scheduler: Execution context shared by all feeds.
            policy: Poll intervals per activity mode.
            stagger_seconds: Start offset between consecutive favorites.
            activity_mode: Initial activity mode.
        """
        self.repository = repository
        self.scheduler = scheduler
        self.policy = policy or PollIntervalPolicy()
        self.stagger_seconds = stagger_seconds
        self.activity_mode = activity_mode
        self._subscriptions: list[FavoriteSubscription] = []
        self._listeners: list[FavoritesListenerProtocol] = []

    @property
    def subscriptions(self) -> list[FavoriteSubscription]:
        return list(self._subscriptions)

    @property
    def is_empty(self) -> bool:
        return not self._subscriptions

    def add_listener(self, listener: FavoritesListenerProtocol) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: FavoritesListenerProtocol) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def view_records(self) -> list[FavoriteViewRecord]:
        return [subscription.view_record() for subscription in self._subscriptions]

    def rebuild(self, favorites: Sequence[FavoriteEntity]) -> None:
        """Replace all subscriptions with fresh ones, staggering their starts.

        Old subscriptions are fully stopped before any new one starts. A new
        feed for a favorite whose old feed still has a fetch in flight waits
        for that fetch to finish before its own first fetch.
        """
        replaced: dict[str, ArrivalFeed] = {}
        for subscription in self._subscriptions:
            subscription.remove_listener(self._on_subscription_changed)
            subscription.stop()
            replaced[subscription.entity.key] = subscription.feed

        self._subscriptions = [self._create_subscription(favorite) for favorite in favorites]
        for subscription in self._subscriptions:
            old_feed = replaced.get(subscription.entity.key)
            if old_feed is not None:
                subscription.feed.take_over_from(old_feed)
        logger.info(
            f"Rebuilt favorites: {len(self._subscriptions)} subscription(s), "
            f"stagger {self.stagger_seconds}s, mode {self.activity_mode.value}"
        )
        self._publish_rebuilt()

        for index, subscription in enumerate(list(self._subscriptions)):
            subscription.start_delayed(index * self.stagger_seconds)

    def set_activity_mode(self, mode: ActivityMode) -> None:
        if mode != self.activity_mode:
            logger.info(f"Favorites activity mode: {self.activity_mode.value} -> {mode.value}")
        self.activity_mode = mode
        for subscription in self._subscriptions:
            subscription.set_activity_mode(mode)

    def resume_all(self) -> None:
        """Start every feed that is not running, without delay."""
        resumed = 0
        for subscription in self._subscriptions:
            if not subscription.feed.is_running:
                subscription.resume()
                resumed += 1
        if resumed:
            logger.info(f"Resumed {resumed} favorite feed(s)")

    def stop_all(self) -> None:
        """Stop every feed but keep the subscriptions."""
        for subscription in self._subscriptions:
            subscription.stop()
        logger.info(f"Stopped {len(self._subscriptions)} favorite feed(s)")

    def _create_subscription(self, favorite: FavoriteEntity) -> FavoriteSubscription:
        feed = ArrivalFeed(
            self.repository, self.scheduler, policy=self.policy, activity_mode=self.activity_mode
        )
        subscription = FavoriteSubscription(
            favorite, feed, self.scheduler, activity_mode=self.activity_mode
        )
        subscription.add_listener(self._on_subscription_changed)
        return subscription

    def _on_subscription_changed(self, subscription: FavoriteSubscription) -> None:
        try:
            index = self._subscriptions.index(subscription)
        except ValueError:
            return
        record = subscription.view_record()
        for listener in list(self._listeners):
            try:
                listener.on_row_changed(index, record)
            except Exception as e:
                logger.error(f"Favorites listener failed on row {index}: {e}", exc_info=True)

    def _publish_rebuilt(self) -> None:
        records = self.view_records()
        for listener in list(self._listeners):
            try:
                listener.on_list_rebuilt(records)
            except Exception as e:
                logger.error(f"Favorites listener failed on rebuild: {e}", exc_info=True)
