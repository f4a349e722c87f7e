"""Loader for the favorites list from TOML configuration."""

from typing import Any

from now_departing.adapters.config.app_config import AppConfig
from now_departing.domain.models.favorite import FavoriteEntity

REQUIRED_KEYS = ("line_id", "station_name", "direction")


class FavoritesLoader:
    """Builds FavoriteEntity objects from [[favorites]] tables."""

    @staticmethod
    def from_dict(data: dict[str, Any]) -> FavoriteEntity:
        """Create a favorite from one [[favorites]] table.

        station_display falls back to station_name when omitted.
        """
        missing = [key for key in REQUIRED_KEYS if not data.get(key)]
        if missing:
            raise ValueError(f"Favorite is missing required field(s): {', '.join(missing)}")
        return FavoriteEntity(
            line_id=str(data["line_id"]),
            station_name=str(data["station_name"]),
            station_display=str(data.get("station_display") or data["station_name"]),
            direction=str(data["direction"]),
        )

    @classmethod
    def load(cls, config: AppConfig) -> list[FavoriteEntity]:
        """Load favorites in file order, dropping exact duplicates."""
        toml_data = config.load_toml_data()
        entries = toml_data.get("favorites", [])
        if not isinstance(entries, list):
            raise ValueError("TOML config 'favorites' must be a list")

        favorites: list[FavoriteEntity] = []
        for entry in entries:
            if not isinstance(entry, dict):
                raise ValueError("Each favorite must be a table")
            favorite = cls.from_dict(entry)
            if favorite not in favorites:
                favorites.append(favorite)
        return favorites
