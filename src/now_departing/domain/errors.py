"""Errors raised by arrival fetch collaborators."""


class ArrivalFetchError(Exception):
    """Base class for failures fetching arrivals for one station/direction."""


class NetworkFailure(ArrivalFetchError):
    """The transit API could not be reached, timed out, or answered with an error status."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class DecodeFailure(ArrivalFetchError):
    """The transit API answered with a payload that could not be decoded."""


class NoDataFailure(ArrivalFetchError):
    """The transit API answered correctly but had no arrivals."""
