"""Protocol for observers of the favorites list."""

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from now_departing.domain.models.favorite_view_record import FavoriteViewRecord


class FavoritesListenerProtocol(Protocol):
    """Protocol for consumers of the coordinator's ordered view records."""

    def on_list_rebuilt(self, records: list["FavoriteViewRecord"]) -> None:
        """Called after the favorites list was rebuilt.

        Args:
            records: One record per favorite, in display order.
        """
        ...

    def on_row_changed(self, index: int, record: "FavoriteViewRecord") -> None:
        """Called when a single favorite's state changed.

        Args:
            index: Position of the favorite in the list.
            record: The favorite's new view record.
        """
        ...
