"""Domain layer - core models, ports and errors."""

from now_departing.domain.models import (
    ActivityMode,
    ArrivalTime,
    FavoriteEntity,
    FavoriteViewRecord,
    PollIntervalPolicy,
)
from now_departing.domain.ports import ArrivalRepository, FavoritesStore

__all__ = [
    "ActivityMode",
    "ArrivalRepository",
    "ArrivalTime",
    "FavoriteEntity",
    "FavoriteViewRecord",
    "FavoritesStore",
    "PollIntervalPolicy",
]
