"""Favorites store port."""

from collections.abc import Callable
from typing import Protocol

from now_departing.domain.models.favorite import FavoriteEntity

FavoritesChangedCallback = Callable[[list[FavoriteEntity]], None]


class FavoritesStore(Protocol):
    """Port for the persisted, ordered favorites list."""

    @property
    def favorites(self) -> list[FavoriteEntity]:
        """Snapshot of the current favorites, in display order."""
        ...

    def add_listener(self, callback: FavoritesChangedCallback) -> None:
        """Register a callback fired with the full list on add/remove/reorder."""
        ...

    def remove_listener(self, callback: FavoritesChangedCallback) -> None:
        """Unregister a change callback."""
        ...
