"""Arrival repository port."""

from typing import Protocol

from now_departing.domain.models.arrival_time import ArrivalTime


class ArrivalRepository(Protocol):
    """Port for retrieving predicted arrivals.

    Implementations raise ArrivalFetchError subclasses on failure and must be
    safe to call repeatedly and concurrently from independent feeds.
    """

    async def get_arrivals(
        self, line_id: str, station_name: str, direction: str
    ) -> list[ArrivalTime]:
        """Get upcoming arrivals, soonest first."""
        ...
