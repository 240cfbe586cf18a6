"""
NavZones NavMesh

Polygon navigation mesh, query filters and the path query engine that
applies dead zones to every search.

Usage:
    from navzones.navmesh import NavMesh, NavMeshQuery, PathQueryEngine

    mesh = NavMesh.load("level.mesh.yaml")
    engine = PathQueryEngine(NavMeshQuery(mesh))
    path = engine.find(start, end, registry.snapshot(region))
"""

from .mesh import NavMesh, NavPoly, INVALID_REF, POLYFLAG_WALK
from .filters import QueryFilter, DefaultQueryFilter, ExclusionAwareFilter
from .query import NavMeshQuery, PathStatus
from .path_query import PathQueryEngine, PathQueryResult

__all__ = [
    # Mesh
    "NavMesh",
    "NavPoly",
    "INVALID_REF",
    "POLYFLAG_WALK",
    # Filters
    "QueryFilter",
    "DefaultQueryFilter",
    "ExclusionAwareFilter",
    # Search
    "NavMeshQuery",
    "PathStatus",
    "PathQueryEngine",
    "PathQueryResult",
]
