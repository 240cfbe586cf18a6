"""
NavMesh and Search Engine Tests

Validates mesh construction, adjacency, nearest-polygon lookup and the
corridor search outcomes.
"""

import json
import logging

import numpy as np
import pytest
import yaml

from navzones.navmesh import (
    INVALID_REF,
    DefaultQueryFilter,
    NavMesh,
    NavMeshQuery,
    NavPoly,
    PathStatus,
)

logging.basicConfig(level=logging.INFO, format='[%(levelname)s] %(message)s')
logger = logging.getLogger(__name__)

HALF_EXTENTS = (0.5, 0.5, 0.5)


# ========================================
# MESH
# ========================================

def test_grid_refs_are_row_major(open_mesh) -> None:
    assert len(open_mesh) == 55
    assert list(open_mesh.refs()) == list(range(1, 56))
    # cell (c=5, r=2) is the middle of the grid
    assert np.allclose(open_mesh.poly_center(28), [0.0, 0.0, 0.0])


def test_adjacency_follows_shared_edges(corridor_mesh, open_mesh) -> None:
    assert corridor_mesh.neighbours(1) == [2]
    assert sorted(corridor_mesh.neighbours(11)) == [10, 12]
    assert sorted(open_mesh.neighbours(28)) == [17, 27, 29, 39], "Corner contact is not adjacency"


def test_edge_midpoint_is_shared_edge_centre(corridor_mesh) -> None:
    assert np.allclose(corridor_mesh.edge_midpoint(1, 2), [-9.5, 0.0, 0.0])


def test_invalid_reference_rejected(corridor_mesh) -> None:
    assert not corridor_mesh.is_valid_ref(INVALID_REF)
    assert not corridor_mesh.is_valid_ref(22)
    with pytest.raises(KeyError):
        corridor_mesh.poly(0)


def test_polygon_validation() -> None:
    with pytest.raises(ValueError):
        NavMesh([(0, 0, 0), (1, 0, 0), (1, 0, 1)], [NavPoly(verts=(0, 1))])
    with pytest.raises(ValueError):
        NavMesh([(0, 0, 0), (1, 0, 0), (1, 0, 1)], [NavPoly(verts=(0, 1, 5))])


def test_grid_holes_break_adjacency() -> None:
    mesh = NavMesh.grid(cols=3, rows=1, holes=[(1, 0)])

    assert len(mesh) == 2
    assert mesh.neighbours(1) == []
    assert mesh.neighbours(2) == []


@pytest.mark.parametrize("suffix", [".yaml", ".json"])
def test_load_mesh_file(tmp_path, corridor_mesh, suffix) -> None:
    path = tmp_path / f"corridor{suffix}"
    with open(path, "w", encoding="utf-8") as f:
        if suffix == ".yaml":
            yaml.safe_dump(corridor_mesh.to_dict(), f)
        else:
            json.dump(corridor_mesh.to_dict(), f)

    loaded = NavMesh.load(path)

    assert len(loaded) == len(corridor_mesh)
    assert np.allclose(loaded.vertices, corridor_mesh.vertices)
    assert sorted(loaded.neighbours(11)) == [10, 12]


def test_load_missing_mesh_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        NavMesh.load(tmp_path / "missing.yaml")


# ========================================
# NEAREST POLYGON
# ========================================

def test_find_nearest_poly_inside_cell(corridor_mesh) -> None:
    query = NavMeshQuery(corridor_mesh)

    ref, point = query.find_nearest_poly((3.0, 0.3, 0.1), HALF_EXTENTS, DefaultQueryFilter())

    assert ref == 14
    assert np.allclose(point, [3.0, 0.0, 0.1]), "Point should be projected onto the surface"


def test_find_nearest_poly_outside_box(corridor_mesh) -> None:
    query = NavMeshQuery(corridor_mesh)

    ref, point = query.find_nearest_poly((100.0, 0.0, 0.0), HALF_EXTENTS, DefaultQueryFilter())

    assert ref == INVALID_REF
    assert point is None


def test_find_nearest_poly_respects_filter(corridor_mesh) -> None:
    query = NavMeshQuery(corridor_mesh)

    ref, _ = query.find_nearest_poly((0.0, 0.0, 0.0), HALF_EXTENTS, DefaultQueryFilter(include_flags=0x04))

    assert ref == INVALID_REF


# ========================================
# CORRIDOR SEARCH
# ========================================

def test_find_path_along_corridor(corridor_mesh) -> None:
    query = NavMeshQuery(corridor_mesh)

    status, corridor = query.find_path(1, 21, (-10.0, 0.0, 0.0), (10.0, 0.0, 0.0), DefaultQueryFilter())

    assert status is PathStatus.SUCCESS
    assert status.succeeded()
    assert corridor == list(range(1, 22))


def test_find_path_same_polygon(corridor_mesh) -> None:
    query = NavMeshQuery(corridor_mesh)

    status, corridor = query.find_path(5, 5, (-6.1, 0.0, 0.0), (-5.9, 0.0, 0.2), DefaultQueryFilter())

    assert status is PathStatus.SUCCESS
    assert corridor == [5]


def test_find_path_invalid_refs(corridor_mesh) -> None:
    query = NavMeshQuery(corridor_mesh)

    status, corridor = query.find_path(INVALID_REF, 3, (0, 0, 0), (0, 0, 0), DefaultQueryFilter())

    assert status is PathStatus.FAILURE
    assert corridor == []


def test_find_path_disconnected_is_partial() -> None:
    mesh = NavMesh.grid(cols=3, rows=1, holes=[(1, 0)])
    query = NavMeshQuery(mesh)

    status, corridor = query.find_path(1, 2, (0.5, 0.0, 0.5), (2.5, 0.0, 0.5), DefaultQueryFilter())

    assert status is PathStatus.PARTIAL
    assert not status.succeeded()
    assert corridor == [1]


def test_find_path_out_of_nodes_is_partial(corridor_mesh) -> None:
    query = NavMeshQuery(corridor_mesh, max_nodes=2)

    status, corridor = query.find_path(1, 21, (-10.0, 0.0, 0.0), (10.0, 0.0, 0.0), DefaultQueryFilter())

    assert status is PathStatus.PARTIAL
    assert corridor == [1, 2]


def test_find_path_takes_shortest_route(open_mesh) -> None:
    query = NavMeshQuery(open_mesh)
    # (c=0, r=2) to (c=10, r=2)
    start, end = 23, 33

    status, corridor = query.find_path(start, end, (-5.0, 0.0, 0.0), (5.0, 0.0, 0.0), DefaultQueryFilter())

    assert status is PathStatus.SUCCESS
    assert corridor == list(range(23, 34)), "Straight row is the cheapest corridor"
