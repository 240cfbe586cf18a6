"""
Zone Type Definitions

Enumerations shared by the zone management layer.
"""

from enum import Enum


class AnchorSource(Enum):
    """
    Where a new dead zone is centred when no explicit position is given.

    - PLAYER: the local player's current position
    - TARGET: the currently selected target's position
    """
    PLAYER = "player"
    TARGET = "target"

    @classmethod
    def from_string(cls, value: str) -> "AnchorSource":
        """Parse anchor source from string (case-insensitive)."""
        normalized = value.lower().strip()
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(
            f"Invalid anchor source: '{value}'. "
            f"Valid sources: {[m.value for m in cls]}"
        )


class ZoneOpStatus(Enum):
    """
    Outcome of a zone management operation.

    Each management call reports exactly one of these.
    """
    ADDED = "added"
    REMOVED = "removed"
    CLEARED = "cleared"
    EDITED = "edited"
    LISTED = "listed"
    EMPTY = "empty"
    UNKNOWN_REGION = "unknown_region"
    NOTHING_TO_REMOVE = "nothing_to_remove"
    VALIDATION_ERROR = "validation_error"
    NOT_FOUND = "not_found"

    @property
    def is_failure(self) -> bool:
        return self in (ZoneOpStatus.VALIDATION_ERROR, ZoneOpStatus.NOT_FOUND)
