"""HTTP arrival repository adapter.

Queries ``GET {base_url}/arrivals?line=..&station=..&direction=..``. The
response is either a JSON list of arrivals or an object with an
``arrivals`` list; each arrival carries ``minutes`` (or
``minutesUntilArrival``).
"""

from __future__ import annotations

import asyncio
import logging
import math
from typing import TYPE_CHECKING, Any

import aiohttp

from now_departing.domain.errors import DecodeFailure, NetworkFailure, NoDataFailure
from now_departing.domain.models.arrival_time import ArrivalTime
from now_departing.domain.ports.arrival_repository import ArrivalRepository

if TYPE_CHECKING:
    from aiohttp import ClientResponse, ClientSession

logger = logging.getLogger(__name__)

MINUTE_KEYS = ("minutes", "minutesUntilArrival", "minutes_until_arrival")


def _status_reason(status: int) -> str:
    """Human-readable reason for an HTTP error status."""
    if status == 429:
        return "Rate limit exceeded"
    if status == 502:
        return "Bad gateway (server error)"
    if status == 503:
        return "Service unavailable"
    if status == 504:
        return "Gateway timeout"
    return f"HTTP {status}"


class HttpArrivalRepository(ArrivalRepository):
    """Fetches arrivals from the transit API over HTTP."""

    def __init__(
        self, session: ClientSession, base_url: str, timeout_seconds: float = 10.0
    ) -> None:
        """Initialize the repository.

        Args:
            session: Shared aiohttp session.
            base_url: Base URL of the transit API.
            timeout_seconds: Total timeout per request.
        """
        self._session = session
        self._url = f"{base_url.rstrip('/')}/arrivals"
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    async def get_arrivals(
        self, line_id: str, station_name: str, direction: str
    ) -> list[ArrivalTime]:
        """Get upcoming arrivals, soonest first.

        Raises:
            NetworkFailure: The API is unreachable, timed out or returned an error status.
            DecodeFailure: The response body is not a recognizable arrivals payload.
            NoDataFailure: The API returned no arrivals.
        """
        params = {"line": line_id, "station": station_name, "direction": direction}
        try:
            async with self._session.get(
                self._url, params=params, timeout=self._timeout
            ) as response:
                data = await self._read_payload(response)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise NetworkFailure(f"Transit API unreachable: {str(e) or type(e).__name__}") from e

        arrivals = self._parse_arrivals(data)
        if not arrivals:
            raise NoDataFailure(f"No arrivals for {line_id} at {station_name} ({direction})")
        logger.debug(f"Fetched {len(arrivals)} arrivals for {line_id} {station_name} {direction}")
        return sorted(arrivals)

    @staticmethod
    async def _read_payload(response: ClientResponse) -> Any:
        if response.status != 200:
            body = await response.text()
            logger.warning(f"Transit API returned status {response.status}: {body[:200]}")
            raise NetworkFailure(_status_reason(response.status), status_code=response.status)
        try:
            return await response.json(content_type=None)
        except ValueError as e:
            raise DecodeFailure(f"Malformed JSON from transit API: {e}") from e

    @staticmethod
    def _parse_arrivals(data: Any) -> list[ArrivalTime]:
        if isinstance(data, dict):
            data = data.get("arrivals")
        if not isinstance(data, list):
            raise DecodeFailure("Transit API response has no arrivals list")

        arrivals = []
        for item in data:
            if not isinstance(item, dict):
                raise DecodeFailure(f"Unexpected arrival entry: {item!r}")
            minutes = next((item[key] for key in MINUTE_KEYS if key in item), None)
            if isinstance(minutes, bool) or not isinstance(minutes, (int, float)):
                raise DecodeFailure(f"Arrival entry has no minutes: {item!r}")
            if not math.isfinite(minutes):
                raise DecodeFailure(f"Arrival entry has non-finite minutes: {item!r}")
            arrivals.append(ArrivalTime(minutes_until_arrival=int(minutes)))
        return arrivals
