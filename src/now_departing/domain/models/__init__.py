"""Domain models for Now Departing."""

from now_departing.domain.models.activity_mode import ActivityMode
from now_departing.domain.models.arrival_time import ArrivalTime
from now_departing.domain.models.favorite import FavoriteEntity
from now_departing.domain.models.favorite_view_record import FavoriteViewRecord
from now_departing.domain.models.poll_interval_policy import PollIntervalPolicy

__all__ = [
    "ActivityMode",
    "ArrivalTime",
    "FavoriteEntity",
    "FavoriteViewRecord",
    "PollIntervalPolicy",
]
