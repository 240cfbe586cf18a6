"""
Zone Visualization

Debug geometry for dead zones. Each zone becomes a wireframe sphere made
of three great circles (XY, XZ and YZ planes), emitted as line segments
for whatever renderer the host uses. Reads the registry only.
"""

from dataclasses import dataclass
from typing import Optional

import numpy as np

from .zone_data import ExclusionZone
from .zone_registry import ZoneRegistry
from ..logging_utils import NavLogger


@dataclass(frozen=True)
class DebugColor:
    """RGBA color for debug visualization."""
    r: float
    g: float
    b: float
    a: float = 1.0

    def to_argb32(self) -> int:
        """Pack into 0xAARRGGBB."""
        channels = [int(round(min(max(v, 0.0), 1.0) * 255)) for v in (self.a, self.r, self.g, self.b)]
        return (channels[0] << 24) | (channels[1] << 16) | (channels[2] << 8) | channels[3]


DEAD_ZONE_COLOR = DebugColor(1.0, 0.0, 0.0, 1.0)


class ZoneVisualizer:
    """
    Generates debug line commands for a region's dead zones.

    Usage:
        visualizer = ZoneVisualizer(store.registry)
        commands = visualizer.generate_debug_commands(region, enabled=config.show_dead_zones)
    """

    MODULE_NAME = "ZoneVisualizer"

    def __init__(
        self,
        registry: ZoneRegistry,
        segments: int = 24,
        color: DebugColor = DEAD_ZONE_COLOR,
        thickness: int = 2,
        logger: Optional[NavLogger] = None,
    ):
        """
        Args:
            registry: Registry to read zones from
            segments: Line segments per circle
            color: Line color
            thickness: Line thickness in pixels
            logger: Optional logger
        """
        if segments < 3:
            raise ValueError(f"segments must be at least 3, got {segments}")
        self.registry = registry
        self.segments = segments
        self.color = color
        self.thickness = thickness
        self.logger = logger or NavLogger(self.MODULE_NAME)

        angles = np.linspace(0.0, 2.0 * np.pi, segments + 1)
        self._unit_circle = np.stack([np.cos(angles), np.sin(angles)], axis=1)

    def sphere_segments(self, zone: ExclusionZone) -> list[tuple[tuple, tuple]]:
        """Line segments approximating the zone's sphere."""
        center = zone.center.to_array()
        segments = []
        # Axis pairs spanning each great circle's plane
        for a, b in ((0, 1), (0, 2), (1, 2)):
            points = np.tile(center, (len(self._unit_circle), 1))
            points[:, a] += zone.radius * self._unit_circle[:, 0]
            points[:, b] += zone.radius * self._unit_circle[:, 1]
            for i in range(self.segments):
                segments.append((tuple(points[i].tolist()), tuple(points[i + 1].tolist())))
        return segments

    def generate_debug_commands(self, region, enabled: bool = True) -> list[dict]:
        """
        Draw commands for every zone in ``region``.

        Returns:
            List of {"function": "DrawWorldLine", "params": {...}} dicts;
            empty when disabled
        """
        if not enabled:
            return []

        color = self.color.to_argb32()
        commands = []
        for zone in self.registry.zones_for(region):
            for start, end in self.sphere_segments(zone):
                commands.append({
                    "function": "DrawWorldLine",
                    "params": {
                        "start": start,
                        "end": end,
                        "color": color,
                        "thickness": self.thickness,
                    },
                })

        self.logger.debug(
            "Debug commands generated",
            region=region,
            command_count=len(commands),
        )
        return commands
