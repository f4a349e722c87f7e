"""Favorite view record domain model."""

from dataclasses import dataclass, field

from now_departing.domain.models.arrival_time import ArrivalTime
from now_departing.domain.models.favorite import FavoriteEntity


@dataclass(frozen=True)
class FavoriteViewRecord:
    """What the presentation layer needs to render one favorites row."""

    entity: FavoriteEntity
    display_text: str
    should_show_loader: bool
    has_error: bool
    error_message: str = ""
    samples: tuple[ArrivalTime, ...] = field(default_factory=tuple)

    @property
    def shows_error(self) -> bool:
        """Errors are only surfaced when there is no stale data to show instead."""
        return self.has_error and not self.samples
