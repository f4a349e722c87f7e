"""Favorite domain model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FavoriteEntity:
    """A line/station/direction tuple the user wants continuously monitored."""

    line_id: str
    station_name: str  # Name sent to the transit API
    station_display: str  # Name shown to the user
    direction: str  # Direction code, e.g. "N" or "S"

    @property
    def key(self) -> str:
        """Stable identifier for row diffing."""
        return f"{self.line_id}:{self.station_name}:{self.direction}"
