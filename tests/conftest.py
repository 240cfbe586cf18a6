"""Shared fixtures for the NavZones test suite."""

import pytest

from navzones.navmesh import NavMesh, NavMeshQuery, PathQueryEngine
from navzones.zones import Vector3, ZoneManager, ZoneRegistry


@pytest.fixture
def registry():
    return ZoneRegistry()


@pytest.fixture
def manager(registry):
    return ZoneManager(
        registry,
        player_position=lambda: Vector3(1.0, 2.0, 3.0),
        target_position=lambda: None,
    )


@pytest.fixture
def corridor_mesh():
    """
    Single row of 21 unit cells along X, centres at x = -10 .. 10, z = 0.
    Polygon ref of the cell centred at x is x + 11.
    """
    return NavMesh.grid(cols=21, rows=1, cell_size=1.0, origin=(-10.5, 0.0, -0.5))


@pytest.fixture
def open_mesh():
    """11 x 5 unit cells, centres at x = -5 .. 5, z = -2 .. 2."""
    return NavMesh.grid(cols=11, rows=5, cell_size=1.0, origin=(-5.5, 0.0, -2.5))


@pytest.fixture
def corridor_engine(corridor_mesh):
    return PathQueryEngine(NavMeshQuery(corridor_mesh))


@pytest.fixture
def open_engine(open_mesh):
    return PathQueryEngine(NavMeshQuery(open_mesh))
