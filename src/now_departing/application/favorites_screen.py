"""Maps host lifecycle signals onto the favorites coordinator."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from now_departing.domain.models.activity_mode import ActivityMode

if TYPE_CHECKING:
    from now_departing.application.favorites_coordinator import FavoritesCoordinator
    from now_departing.domain.models.favorite import FavoriteEntity
    from now_departing.domain.ports.favorites_store import FavoritesStore

logger = logging.getLogger(__name__)


class FavoritesScreenController:
    """Drives the coordinator from the favorites screen's lifecycle.

    Going to background only slows polling down; timers keep running so rows
    stay roughly current while the screen is not in front of the user.
    """

    def __init__(self, coordinator: FavoritesCoordinator, store: FavoritesStore) -> None:
        self.coordinator = coordinator
        self.store = store
        self.is_view_visible = False
        self.is_app_foreground = True
        self.store.add_listener(self.on_favorites_changed)

    @property
    def activity_mode(self) -> ActivityMode:
        if self.is_view_visible and self.is_app_foreground:
            return ActivityMode.FOREGROUND
        return ActivityMode.BACKGROUND

    def on_view_became_visible(self) -> None:
        self.is_view_visible = True
        if self.coordinator.is_empty:
            self._rebuild(self.store.favorites)
        else:
            self._apply_activity_mode()
            self.coordinator.resume_all()

    def on_view_became_hidden(self) -> None:
        self.is_view_visible = False
        self._apply_activity_mode()

    def on_foreground(self) -> None:
        self.is_app_foreground = True
        if self.is_view_visible:
            self._apply_activity_mode()
            self.coordinator.resume_all()

    def on_background(self) -> None:
        self.is_app_foreground = False
        self._apply_activity_mode()

    def on_favorites_changed(self, favorites: list[FavoriteEntity]) -> None:
        logger.info(f"Favorites changed ({len(favorites)} favorite(s)), rebuilding")
        self._rebuild(favorites)

    def refresh(self) -> None:
        """Pull-to-refresh: rebuild from the store's current list."""
        self._rebuild(self.store.favorites)

    def close(self) -> None:
        self.store.remove_listener(self.on_favorites_changed)
        self.coordinator.stop_all()

    def _apply_activity_mode(self) -> None:
        self.coordinator.set_activity_mode(self.activity_mode)

    def _rebuild(self, favorites: list[FavoriteEntity]) -> None:
        self.coordinator.set_activity_mode(self.activity_mode)
        self.coordinator.rebuild(favorites)
