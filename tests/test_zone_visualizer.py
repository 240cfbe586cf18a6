"""
Zone Visualizer Tests

Validates debug line generation for dead zones.
"""

import numpy as np
import pytest

from navzones.zones import DebugColor, ExclusionZone, Vector3, ZoneVisualizer

REGION = 132


def test_sphere_segments_lie_on_sphere(registry) -> None:
    visualizer = ZoneVisualizer(registry, segments=12)
    zone = ExclusionZone(Vector3(1.0, 2.0, 3.0), 4.0)

    segments = visualizer.sphere_segments(zone)

    assert len(segments) == 36, "Three circles of 12 segments"
    centre = zone.center.to_array()
    for start, end in segments:
        assert np.linalg.norm(np.array(start) - centre) == pytest.approx(4.0)
        assert np.linalg.norm(np.array(end) - centre) == pytest.approx(4.0)


def test_commands_per_zone(registry) -> None:
    registry.add_zone(REGION, ExclusionZone(Vector3(0.0, 0.0, 0.0), 1.0))
    registry.add_zone(REGION, ExclusionZone(Vector3(5.0, 0.0, 0.0), 2.0))
    visualizer = ZoneVisualizer(registry, segments=8, thickness=3)

    commands = visualizer.generate_debug_commands(REGION)

    assert len(commands) == 2 * 3 * 8
    first = commands[0]
    assert first["function"] == "DrawWorldLine"
    assert first["params"]["color"] == 0xFFFF0000
    assert first["params"]["thickness"] == 3


def test_disabled_or_empty_draws_nothing(registry) -> None:
    registry.add_zone(REGION, ExclusionZone(Vector3(0.0, 0.0, 0.0), 1.0))
    visualizer = ZoneVisualizer(registry)

    assert visualizer.generate_debug_commands(REGION, enabled=False) == []
    assert visualizer.generate_debug_commands(999) == []


def test_color_packing() -> None:
    assert DebugColor(0.0, 1.0, 0.0, 0.5).to_argb32() == 0x8000FF00


def test_segment_count_validated(registry) -> None:
    with pytest.raises(ValueError):
        ZoneVisualizer(registry, segments=2)
