"""Display adapter that renders favorites rows to the log."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from now_departing.domain.contracts.favorites_listener import FavoritesListenerProtocol

if TYPE_CHECKING:
    from now_departing.domain.models.favorite_view_record import FavoriteViewRecord

logger = logging.getLogger(__name__)

LOADER_TEXT = "..."


def format_row(record: FavoriteViewRecord) -> str:
    """Render one favorites row as a single line of text."""
    entity = record.entity
    if record.should_show_loader:
        time_text = LOADER_TEXT
    else:
        time_text = record.display_text
    upcoming = ", ".join(f"{a.minutes_until_arrival} min" for a in record.samples[1:4])
    line = f"[{entity.line_id}] {entity.station_display} ({entity.direction}): {time_text}"
    if upcoming:
        line += f" | then {upcoming}"
    if record.has_error:
        suffix = "stale" if record.samples else "error"
        line += f" ({suffix}: {record.error_message})"
    return line


class LogDisplayAdapter(FavoritesListenerProtocol):
    """Keeps the latest rows and logs each one when it changes."""

    def __init__(self) -> None:
        self.rows: list[FavoriteViewRecord] = []

    def on_list_rebuilt(self, records: list[FavoriteViewRecord]) -> None:
        self.rows = list(records)
        if not records:
            logger.info("No favorites yet")
            return
        logger.info(f"Showing {len(records)} favorite(s)")
        for record in records:
            logger.info(format_row(record))

    def on_row_changed(self, index: int, record: FavoriteViewRecord) -> None:
        if index >= len(self.rows):
            return
        previous = self.rows[index]
        self.rows[index] = record
        if format_row(previous) != format_row(record):
            logger.info(format_row(record))
