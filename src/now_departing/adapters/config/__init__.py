"""Configuration adapters."""

from now_departing.adapters.config.app_config import AppConfig
from now_departing.adapters.config.favorites_loader import FavoritesLoader

__all__ = ["AppConfig", "FavoritesLoader"]
