"""In-memory favorites store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from now_departing.domain.ports.favorites_store import FavoritesStore

if TYPE_CHECKING:
    from collections.abc import Iterable

    from now_departing.domain.models.favorite import FavoriteEntity
    from now_departing.domain.ports.favorites_store import FavoritesChangedCallback

logger = logging.getLogger(__name__)


class InMemoryFavoritesStore(FavoritesStore):
    """Ordered favorites list that notifies listeners with the full list on every change."""

    def __init__(self, favorites: Iterable[FavoriteEntity] = ()) -> None:
        self._favorites: list[FavoriteEntity] = []
        for favorite in favorites:
            if favorite not in self._favorites:
                self._favorites.append(favorite)
        self._listeners: list[FavoritesChangedCallback] = []

    @property
    def favorites(self) -> list[FavoriteEntity]:
        return list(self._favorites)

    def add_listener(self, callback: FavoritesChangedCallback) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: FavoritesChangedCallback) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def contains(self, favorite: FavoriteEntity) -> bool:
        return favorite in self._favorites

    def add(self, favorite: FavoriteEntity) -> bool:
        """Append a favorite. Returns False if it was already present."""
        if favorite in self._favorites:
            return False
        self._favorites.append(favorite)
        self._notify()
        return True

    def remove(self, favorite: FavoriteEntity) -> bool:
        """Remove a favorite. Returns False if it was not present."""
        if favorite not in self._favorites:
            return False
        self._favorites.remove(favorite)
        self._notify()
        return True

    def move(self, from_index: int, to_index: int) -> None:
        """Move the favorite at from_index so it ends up at to_index.

        Raises:
            ValueError: If either index is outside the list.
        """
        count = len(self._favorites)
        for name, index in (("from_index", from_index), ("to_index", to_index)):
            if not 0 <= index < count:
                raise ValueError(f"{name} {index} out of range for {count} favorite(s)")
        if from_index == to_index:
            return
        favorite = self._favorites.pop(from_index)
        self._favorites.insert(to_index, favorite)
        self._notify()

    def _notify(self) -> None:
        snapshot = self.favorites
        for callback in list(self._listeners):
            try:
                callback(snapshot)
            except Exception as e:
                logger.error(f"Favorites listener failed: {e}", exc_info=True)
