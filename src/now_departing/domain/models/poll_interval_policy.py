"""Poll interval policy domain model."""

from dataclasses import dataclass

from now_departing.domain.models.activity_mode import ActivityMode


@dataclass(frozen=True)
class PollIntervalPolicy:
    """Seconds between fetches for each activity mode.

    A background interval of 0 suspends polling while in background.
    """

    foreground_interval_seconds: float = 30.0
    background_interval_seconds: float = 120.0

    def interval_for(self, mode: ActivityMode) -> float | None:
        """Return the poll interval for a mode, or None if polling is suspended."""
        if mode is ActivityMode.FOREGROUND:
            return self.foreground_interval_seconds
        if self.background_interval_seconds <= 0:
            return None
        return self.background_interval_seconds
