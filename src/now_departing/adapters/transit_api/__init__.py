"""Transit API adapter."""

from now_departing.adapters.transit_api.http_arrival_repository import HttpArrivalRepository

__all__ = ["HttpArrivalRepository"]
