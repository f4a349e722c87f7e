"""Display adapters."""

from now_departing.adapters.display.log_display_adapter import LogDisplayAdapter

__all__ = ["LogDisplayAdapter"]
