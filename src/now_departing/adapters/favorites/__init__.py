"""Favorites store adapters."""

from now_departing.adapters.favorites.in_memory_favorites_store import InMemoryFavoritesStore

__all__ = ["InMemoryFavoritesStore"]
