"""
NavZones Zone System

Spherical dead zones that block navmesh polygons at runtime.

- Zones are grouped by region (one u16 key per navigable area)
- Within a region, zones are addressed by list position
- Management input is validated before the registry is touched

Usage:
    from navzones.zones import ZoneRegistry, ZoneManager, Vector3

    registry = ZoneRegistry()
    manager = ZoneManager(registry)
    manager.add(132, center=Vector3(0, 0, 0), radius=5)
    manager.remove(132, "all")
"""

from .zone_types import AnchorSource, ZoneOpStatus
from .zone_data import (
    Vector3,
    ExclusionZone,
    DEFAULT_ZONE_RADIUS,
    validate_region_key,
)
from .zone_registry import ZoneRegistry
from .zone_manager import ZoneManager, ZoneOperationResult, parse_radius, parse_index
from .zone_commands import ZoneCommandHandler
from .zone_visualizer import ZoneVisualizer, DebugColor

__all__ = [
    # Types
    "AnchorSource",
    "ZoneOpStatus",
    # Data structures
    "Vector3",
    "ExclusionZone",
    "DEFAULT_ZONE_RADIUS",
    "validate_region_key",
    # Registry
    "ZoneRegistry",
    # Management
    "ZoneManager",
    "ZoneOperationResult",
    "parse_radius",
    "parse_index",
    "ZoneCommandHandler",
    # Visualization
    "ZoneVisualizer",
    "DebugColor",
]
