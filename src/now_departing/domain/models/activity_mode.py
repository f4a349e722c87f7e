"""Activity mode domain model."""

from enum import Enum


class ActivityMode(str, Enum):
    """Whether the favorites list is currently in front of the user."""

    FOREGROUND = "foreground"
    BACKGROUND = "background"
