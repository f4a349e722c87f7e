"""Ports (interfaces) for the ports-and-adapters architecture."""

from now_departing.domain.ports.arrival_repository import ArrivalRepository
from now_departing.domain.ports.favorites_store import FavoritesChangedCallback, FavoritesStore

__all__ = [
    "ArrivalRepository",
    "FavoritesChangedCallback",
    "FavoritesStore",
]
