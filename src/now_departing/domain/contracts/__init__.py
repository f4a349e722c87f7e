"""Contracts (protocols) between the engine's components."""

from now_departing.domain.contracts.favorites_listener import FavoritesListenerProtocol
from now_departing.domain.contracts.scheduler import DeferredTaskProtocol, SchedulerProtocol

__all__ = [
    "DeferredTaskProtocol",
    "FavoritesListenerProtocol",
    "SchedulerProtocol",
]
