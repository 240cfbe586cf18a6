"""
Zone Data Structures

Vector and exclusion zone records. A zone is a sphere: centre plus radius.
Zones have no identity beyond their position in a region's list.
"""

import math
from dataclasses import dataclass

import numpy as np

from ..errors import ValidationError

REGION_KEY_MIN = 0
REGION_KEY_MAX = 0xFFFF

# Radius range exposed to interactive editors
EDIT_RADIUS_MIN = 0.1
EDIT_RADIUS_MAX = 30.0

DEFAULT_ZONE_RADIUS = 5.0


@dataclass(frozen=True)
class Vector3:
    """Immutable 3D vector."""
    x: float
    y: float
    z: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y, "z": self.z}

    @classmethod
    def from_dict(cls, data: dict) -> "Vector3":
        return cls(
            x=float(data.get("x", 0)),
            y=float(data.get("y", 0)),
            z=float(data.get("z", 0)),
        )

    @classmethod
    def from_iterable(cls, values) -> "Vector3":
        x, y, z = (float(v) for v in values)
        return cls(x, y, z)

    def to_tuple(self) -> tuple[float, float, float]:
        return (self.x, self.y, self.z)

    def to_array(self) -> np.ndarray:
        return np.array([self.x, self.y, self.z], dtype=np.float64)

    def distance_to(self, other: "Vector3") -> float:
        return math.sqrt(
            (self.x - other.x) ** 2 +
            (self.y - other.y) ** 2 +
            (self.z - other.z) ** 2
        )

    def __add__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: "Vector3") -> "Vector3":
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)


def validate_region_key(region) -> int:
    """Return region as int, raising ValidationError unless it fits in u16."""
    if isinstance(region, bool):
        raise ValidationError(f"Invalid region key: {region!r}", field="region", value=region)
    try:
        key = int(region)
    except (TypeError, ValueError, OverflowError):
        raise ValidationError(
            f"Invalid region key: {region!r}", field="region", value=region
        ) from None
    if key != region and not isinstance(region, str):
        raise ValidationError(f"Invalid region key: {region!r}", field="region", value=region)
    if not REGION_KEY_MIN <= key <= REGION_KEY_MAX:
        raise ValidationError(
            f"Region key {key} outside [{REGION_KEY_MIN}, {REGION_KEY_MAX}]",
            field="region",
            value=region,
        )
    return key


@dataclass
class ExclusionZone:
    """
    Spherical dead zone.

    The shape is fixed (a sphere) but both fields may be edited in place by
    whoever holds a reference into the registry's list. ``radius`` must stay
    strictly positive.
    """
    center: Vector3
    radius: float

    def __post_init__(self):
        self.radius = float(self.radius)
        if not math.isfinite(self.radius) or self.radius <= 0:
            raise ValidationError(
                f"Zone radius must be > 0, got {self.radius}",
                field="radius",
                value=self.radius,
            )

    def contains_point(self, point: Vector3) -> bool:
        """Closed-ball containment: the boundary counts as inside."""
        return self.center.distance_to(point) <= self.radius

    def copy(self) -> "ExclusionZone":
        return ExclusionZone(center=self.center, radius=self.radius)

    def to_tuple(self) -> tuple[float, float, float, float]:
        return (self.center.x, self.center.y, self.center.z, self.radius)

    @classmethod
    def from_tuple(cls, values) -> "ExclusionZone":
        if len(values) != 4:
            raise ValidationError(
                f"Zone entry needs (x, y, z, radius), got {values!r}",
                field="zone",
                value=values,
            )
        x, y, z, radius = values
        return cls(center=Vector3(float(x), float(y), float(z)), radius=float(radius))

    def to_dict(self) -> dict:
        return {"center": self.center.to_dict(), "radius": self.radius}

    def describe(self) -> str:
        c = self.center
        return f"Center=({c.x:.1f}, {c.y:.1f}, {c.z:.1f}), Radius={self.radius:.1f}"
