"""
Zone Manager

Validated add / remove / list / edit operations on the zone registry.

Every operation validates its input before touching the registry and
reports a ZoneOperationResult; bad input never raises out of here.
The one corrective case is the add radius: a missing, unparsable or
non-positive radius falls back to the default and the add goes ahead.
"""

import math
import re
from dataclasses import dataclass, field
from typing import Callable, Optional, Union

from .zone_data import (
    DEFAULT_ZONE_RADIUS,
    EDIT_RADIUS_MAX,
    EDIT_RADIUS_MIN,
    ExclusionZone,
    Vector3,
    validate_region_key,
)
from .zone_registry import ZoneRegistry
from .zone_types import AnchorSource, ZoneOpStatus
from ..errors import NavZonesError, NotFoundError, ValidationError
from ..logging_utils import NavLogger

PositionProvider = Callable[[], Optional[Vector3]]

REMOVE_ALL = "all"
NO_ZONES_MESSAGE = "No dead zones defined for this zone."

_INDEX_PATTERN = re.compile(r"[+-]?[0-9]+", re.ASCII)


@dataclass
class ZoneOperationResult:
    """Result of a zone management operation."""
    status: ZoneOpStatus
    message: str = ""
    region: Optional[int] = None
    index: Optional[int] = None
    zone: Optional[ExclusionZone] = None
    entries: list[tuple[int, ExclusionZone]] = field(default_factory=list)
    corrected: bool = False
    error: Optional[NavZonesError] = None

    @property
    def success(self) -> bool:
        return not self.status.is_failure

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "success": self.success,
            "message": self.message,
            "region": self.region,
            "index": self.index,
            "zone": self.zone.to_dict() if self.zone else None,
            "entries": [
                {"index": i, **zone.to_dict()} for i, zone in self.entries
            ],
            "corrected": self.corrected,
            "error": str(self.error) if self.error else None,
        }


def parse_radius(value, default: float = DEFAULT_ZONE_RADIUS) -> tuple[float, bool]:
    """
    Resolve a requested radius.

    Returns:
        (radius, corrected) where corrected is True if the default replaced
        an unusable value. None means "not given" and is not a correction.
    """
    if value is None:
        return default, False
    try:
        radius = float(value)
    except (TypeError, ValueError):
        return default, True
    if not math.isfinite(radius) or radius <= 0:
        return default, True
    return radius, False


def parse_index(selector) -> int:
    """Parse a non-negative zone index, raising ValidationError otherwise."""
    if isinstance(selector, bool):
        raise ValidationError(f"Invalid index '{selector}'", field="index", value=selector)
    if isinstance(selector, int):
        index = selector
    else:
        text = str(selector).strip()
        if not _INDEX_PATTERN.fullmatch(text):
            raise ValidationError(
                f"Invalid index '{selector}'. Please provide a number or '{REMOVE_ALL}'.",
                field="index",
                value=selector,
            )
        index = int(text)
    if index < 0:
        raise ValidationError(f"Invalid dead zone index {index}.", field="index", value=selector)
    return index


class ZoneManager:
    """
    Management surface for dead zones.

    Usage:
        manager = ZoneManager(store.registry, player_position=get_player_pos)
        manager.add(132, radius="7.5")
        manager.remove(132, "all")
        for index, zone in manager.list(132).entries:
            ...
    """

    MODULE_NAME = "ZoneManager"

    def __init__(
        self,
        registry: ZoneRegistry,
        default_radius: float = DEFAULT_ZONE_RADIUS,
        player_position: Optional[PositionProvider] = None,
        target_position: Optional[PositionProvider] = None,
        logger: Optional[NavLogger] = None,
    ):
        """
        Args:
            registry: Registry to mutate
            default_radius: Radius used when the requested one is unusable
            player_position: Returns the player's position, or None
            target_position: Returns the selected target's position, or None
            logger: Optional logger
        """
        if default_radius <= 0:
            raise ValueError(f"default_radius must be > 0, got {default_radius}")
        self.registry = registry
        self.default_radius = float(default_radius)
        self._providers: dict[AnchorSource, Optional[PositionProvider]] = {
            AnchorSource.PLAYER: player_position,
            AnchorSource.TARGET: target_position,
        }
        self.logger = logger or NavLogger(self.MODULE_NAME)
        self.logger.log_init(default_radius=self.default_radius)

    # ========================================
    # ADD
    # ========================================

    def resolve_anchor(self, source: AnchorSource) -> Vector3:
        """
        Position of the player or target.

        Raises:
            NotFoundError: If the source has no position right now
        """
        provider = self._providers.get(source)
        position = provider() if provider is not None else None
        if position is None:
            raise NotFoundError(source.value)
        if not isinstance(position, Vector3):
            position = Vector3.from_iterable(position)
        return position

    def add(
        self,
        region,
        center: Optional[Vector3] = None,
        radius: Union[float, str, None] = None,
        use_target: bool = False,
    ) -> ZoneOperationResult:
        """
        Add a dead zone to a region.

        Args:
            region: Region key
            center: Explicit centre; if None the target or player position is used
            radius: Requested radius; unusable values fall back to the default
            use_target: Centre on the selected target instead of the player
        """
        self.logger.log_input("add", region=region, radius=radius, use_target=use_target)
        try:
            key = validate_region_key(region)
        except ValidationError as e:
            return self._failure(ZoneOpStatus.VALIDATION_ERROR, e, region=None)

        resolved_radius, corrected = parse_radius(radius, self.default_radius)
        if corrected:
            self.logger.warning(
                "Invalid radius value, using default",
                requested=radius,
                default=self.default_radius,
            )

        if center is None:
            source = AnchorSource.TARGET if use_target else AnchorSource.PLAYER
            try:
                center = self.resolve_anchor(source)
            except NotFoundError as e:
                return self._failure(ZoneOpStatus.NOT_FOUND, e, region=key)
        elif not isinstance(center, Vector3):
            try:
                center = Vector3.from_iterable(center)
            except (TypeError, ValueError) as e:
                error = ValidationError(f"Invalid center: {center!r}", field="center", value=center)
                error.__cause__ = e
                return self._failure(ZoneOpStatus.VALIDATION_ERROR, error, region=key)

        zone = ExclusionZone(center=center, radius=resolved_radius)
        index = self.registry.add_zone(key, zone)

        c = zone.center
        message = (
            f"Added dead zone at ({c.x:.1f}, {c.y:.1f}, {c.z:.1f}) "
            f"with radius {zone.radius:.1f} in zone {key}."
        )
        self.logger.info("Dead zone added", region=key, index=index, zone=zone)
        return ZoneOperationResult(
            status=ZoneOpStatus.ADDED,
            message=message,
            region=key,
            index=index,
            zone=zone,
            corrected=corrected,
        )

    # ========================================
    # REMOVE
    # ========================================

    def remove(self, region, selector: Union[int, str]) -> ZoneOperationResult:
        """
        Remove one zone by index, or every zone with the selector "all".
        """
        self.logger.log_input("remove", region=region, selector=selector)
        try:
            key = validate_region_key(region)
        except ValidationError as e:
            return self._failure(ZoneOpStatus.VALIDATION_ERROR, e, region=None)

        zones = self.registry.zones_for(key)
        if not zones:
            return ZoneOperationResult(
                status=ZoneOpStatus.NOTHING_TO_REMOVE,
                message="No dead zones to remove for this zone.",
                region=key,
            )

        if isinstance(selector, str) and selector.strip().lower() == REMOVE_ALL:
            count = self.registry.clear_zones(key)
            self.logger.info("All dead zones removed", region=key, count=count)
            return ZoneOperationResult(
                status=ZoneOpStatus.CLEARED,
                message=f"Removed all dead zones in zone {key}.",
                region=key,
            )

        try:
            index = parse_index(selector)
            removed = self.registry.remove_zone(key, index)
        except ValidationError as e:
            return self._failure(ZoneOpStatus.VALIDATION_ERROR, e, region=key)
        except IndexError:
            error = ValidationError(
                f"Invalid dead zone index {selector}.", field="index", value=selector
            )
            return self._failure(ZoneOpStatus.VALIDATION_ERROR, error, region=key)

        self.logger.info("Dead zone removed", region=key, index=index)
        return ZoneOperationResult(
            status=ZoneOpStatus.REMOVED,
            message=f"Removed dead zone #{index} in zone {key}.",
            region=key,
            index=index,
            zone=removed,
        )

    # ========================================
    # LIST
    # ========================================

    def list(self, region) -> ZoneOperationResult:
        """Indexed zones of a region, in insertion order."""
        try:
            key = validate_region_key(region)
        except ValidationError as e:
            return self._failure(ZoneOpStatus.VALIDATION_ERROR, e, region=None)

        if not self.registry.has_region(key):
            return ZoneOperationResult(
                status=ZoneOpStatus.UNKNOWN_REGION,
                message=NO_ZONES_MESSAGE,
                region=key,
            )

        entries = list(enumerate(self.registry.zones_for(key)))
        if not entries:
            return ZoneOperationResult(
                status=ZoneOpStatus.EMPTY,
                message=NO_ZONES_MESSAGE,
                region=key,
            )

        return ZoneOperationResult(
            status=ZoneOpStatus.LISTED,
            message=f"Dead zones in zone {key}:",
            region=key,
            entries=entries,
        )

    # ========================================
    # EDIT
    # ========================================

    def edit(
        self,
        region,
        index: int,
        center: Optional[Vector3] = None,
        radius: Optional[float] = None,
    ) -> ZoneOperationResult:
        """
        Change a zone's centre and/or radius in place. The radius is clamped
        to the editor range [EDIT_RADIUS_MIN, EDIT_RADIUS_MAX].
        """
        self.logger.log_input("edit", region=region, index=index, radius=radius)
        try:
            key = validate_region_key(region)
        except ValidationError as e:
            return self._failure(ZoneOpStatus.VALIDATION_ERROR, e, region=None)

        try:
            index = parse_index(index)
            zones = self.registry.zones_for(key)
            if index >= len(zones):
                raise ValidationError(
                    f"Invalid dead zone index {index}.", field="index", value=index
                )
            if radius is not None:
                radius = float(radius)
                if not math.isfinite(radius):
                    raise ValidationError(f"Invalid radius {radius}", field="radius", value=radius)
            if center is not None and not isinstance(center, Vector3):
                center = Vector3.from_iterable(center)
        except (ValueError, TypeError, OverflowError) as e:
            if not isinstance(e, ValidationError):
                e = ValidationError(f"Invalid edit value: {e}", field="edit")
            return self._failure(ZoneOpStatus.VALIDATION_ERROR, e, region=key)

        zone = zones[index]
        if center is not None:
            zone.center = center
        if radius is not None:
            zone.radius = min(max(radius, EDIT_RADIUS_MIN), EDIT_RADIUS_MAX)
        self.registry.touch(key)

        return ZoneOperationResult(
            status=ZoneOpStatus.EDITED,
            message=f"Edited dead zone #{index} in zone {key}.",
            region=key,
            index=index,
            zone=zone,
        )

    def _failure(
        self,
        status: ZoneOpStatus,
        error: NavZonesError,
        region: Optional[int],
    ) -> ZoneOperationResult:
        self.logger.warning(str(error), status=status.value, region=region)
        if isinstance(error, NotFoundError):
            message = (
                "No target selected to add a dead zone at."
                if error.source == AnchorSource.TARGET.value
                else "Player not found."
            )
        else:
            message = str(error)
        return ZoneOperationResult(
            status=status,
            message=message,
            region=region,
            error=error,
        )
