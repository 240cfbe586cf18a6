"""
NavZones Errors

Domain exceptions for zone management input, plus the failure codes a
path query reports. None of these are fatal: management and query entry
points turn them into result values for the caller.
"""

from enum import Enum


class NavZonesError(Exception):
    """Base exception for NavZones operations."""


class ValidationError(NavZonesError, ValueError):
    """Malformed or out-of-range management input."""

    def __init__(self, message: str, field: str = "", value=None):
        self.field = field
        self.value = value
        super().__init__(message)


class NotFoundError(NavZonesError, LookupError):
    """No reference position available for an add request."""

    def __init__(self, source: str):
        self.source = source
        super().__init__(f"No {source} position available")


class QueryFailure(Enum):
    """
    Why a path query produced no path.

    - NO_START_ELEMENT: start point could not be anchored to the mesh
    - NO_END_ELEMENT: end point could not be anchored to the mesh
    - EMPTY_RESULT: search ran but found no complete route
    """
    NO_START_ELEMENT = "no_start_element"
    NO_END_ELEMENT = "no_end_element"
    EMPTY_RESULT = "empty_result"
