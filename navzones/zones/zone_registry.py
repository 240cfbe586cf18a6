"""
Zone Registry

Single source of truth for dead zones, grouped by region key.

Each region maps to an ordered list of zones. Position in the list is the
zone's only handle: removal and listing are addressed by index. A region
key appears only after its first zone is added and stays after clearing.
The registry does not persist anything itself; it calls a change listener
on every mutation so its owner can save.
"""

from typing import Callable, Iterator, Optional

from .zone_data import ExclusionZone, validate_region_key
from ..logging_utils import NavLogger


ChangeListener = Callable[[int], None]


class ZoneRegistry:
    """
    Region key -> ordered list of ExclusionZone.

    Thread Safety: NOT thread-safe. Queries running off the owning thread
    must work from ``snapshot()``, never from the live list.
    """

    MODULE_NAME = "ZoneRegistry"

    def __init__(
        self,
        on_change: Optional[ChangeListener] = None,
        logger: Optional[NavLogger] = None,
    ):
        self.logger = logger or NavLogger(self.MODULE_NAME)
        self._zones: dict[int, list[ExclusionZone]] = {}
        self._listeners: list[ChangeListener] = []
        if on_change is not None:
            self._listeners.append(on_change)
        self.logger.log_init()

    def add_listener(self, listener: ChangeListener) -> None:
        """Register a callback invoked with the region key after each mutation."""
        self._listeners.append(listener)

    def _notify(self, region: int) -> None:
        for listener in self._listeners:
            listener(region)

    # ========================================
    # QUERIES
    # ========================================

    def zones_for(self, region) -> list[ExclusionZone]:
        """
        Live ordered list for a region, or an empty list if the region is
        unknown. Does not create the region.
        """
        key = validate_region_key(region)
        return self._zones.get(key, [])

    def snapshot(self, region) -> tuple[ExclusionZone, ...]:
        """Detached copy of a region's zones for use by an in-flight query."""
        return tuple(zone.copy() for zone in self.zones_for(region))

    def has_region(self, region) -> bool:
        return validate_region_key(region) in self._zones

    def regions(self) -> list[int]:
        return sorted(self._zones)

    def zone_count(self, region) -> int:
        return len(self.zones_for(region))

    def __contains__(self, region) -> bool:
        return self.has_region(region)

    def __iter__(self) -> Iterator[tuple[int, list[ExclusionZone]]]:
        return iter(self._zones.items())

    def __len__(self) -> int:
        """Total number of zones across all regions."""
        return sum(len(zones) for zones in self._zones.values())

    # ========================================
    # MUTATION
    # ========================================

    def add_zone(self, region, zone: ExclusionZone) -> int:
        """
        Append a zone to a region, creating the region's list if needed.

        Returns:
            Index of the new zone (the previous length)
        """
        key = validate_region_key(region)
        zones = self._zones.setdefault(key, [])
        zones.append(zone)
        index = len(zones) - 1

        self.logger.debug(
            "Zone added",
            region=key,
            index=index,
            zone=zone,
        )
        self._notify(key)
        return index

    def remove_zone(self, region, index: int) -> ExclusionZone:
        """
        Remove the zone at ``index``; later zones shift down by one.

        Raises:
            IndexError: If index is outside [0, length)
        """
        key = validate_region_key(region)
        zones = self._zones.get(key, [])
        if not 0 <= index < len(zones):
            raise IndexError(
                f"Zone index {index} out of range for region {key} "
                f"({len(zones)} zones)"
            )
        removed = zones.pop(index)

        self.logger.debug("Zone removed", region=key, index=index, remaining=len(zones))
        self._notify(key)
        return removed

    def clear_zones(self, region) -> int:
        """
        Remove every zone of a region. The region key stays registered.
        Unknown regions are a no-op.

        Returns:
            Number of zones removed
        """
        key = validate_region_key(region)
        zones = self._zones.get(key)
        if zones is None:
            return 0

        count = len(zones)
        zones.clear()
        self.logger.debug("Region cleared", region=key, zones_cleared=count)
        self._notify(key)
        return count

    def touch(self, region) -> None:
        """Signal that a zone of ``region`` was edited in place."""
        key = validate_region_key(region)
        self.logger.debug("Zone edited", region=key)
        self._notify(key)

    # ========================================
    # SERIALIZATION
    # ========================================

    def to_dict(self) -> dict[int, list[list[float]]]:
        """Persistence form: region -> [[x, y, z, radius], ...] in order."""
        return {
            key: [list(zone.to_tuple()) for zone in zones]
            for key, zones in self._zones.items()
        }

    def load_from_dict(self, data: dict) -> int:
        """
        Replace registry contents from persistence form. Does not notify
        listeners; loading is not a user change.

        Returns:
            Number of zones loaded
        """
        loaded: dict[int, list[ExclusionZone]] = {}
        for region, entries in (data or {}).items():
            key = validate_region_key(region)
            loaded[key] = [ExclusionZone.from_tuple(entry) for entry in entries or []]

        self._zones = loaded
        count = len(self)
        self.logger.info(
            "Zones loaded",
            regions=len(loaded),
            zones_loaded=count,
        )
        return count
