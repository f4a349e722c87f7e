"""Arrival time domain model."""

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class ArrivalTime:
    """A single predicted arrival, in whole minutes from now."""

    minutes_until_arrival: int
