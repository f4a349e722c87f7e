"""Application layer - the favorites polling engine."""

from now_departing.application.arrival_feed import ArrivalFeed
from now_departing.application.favorite_subscription import FavoriteSubscription
from now_departing.application.favorites_coordinator import (
    DEFAULT_STAGGER_SECONDS,
    FavoritesCoordinator,
)
from now_departing.application.favorites_screen import FavoritesScreenController
from now_departing.application.scheduler import DeferredTask, LoopScheduler

__all__ = [
    "DEFAULT_STAGGER_SECONDS",
    "ArrivalFeed",
    "DeferredTask",
    "FavoriteSubscription",
    "FavoritesCoordinator",
    "FavoritesScreenController",
    "LoopScheduler",
]
