"""
NavMesh Query

Base search engine: nearest-polygon lookup inside an axis-aligned box and
A* corridor search over polygon adjacency. Every polygon visited is
checked against the caller's filter; traversal cost comes from the filter.

Search nodes sit on the midpoints of the edges shared between polygons,
with the caller's start and end points used at the two ends of the path.
"""

import heapq
import itertools
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import numpy as np

from .filters import QueryFilter
from .mesh import NavMesh, INVALID_REF
from ..logging_utils import NavLogger

HEURISTIC_SCALE = 0.999


class PathStatus(Enum):
    """
    Search outcome.

    - SUCCESS: corridor reaches the end polygon
    - PARTIAL: search stopped early; corridor ends at the closest node found
    - FAILURE: invalid input, nothing searched
    """
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"

    def succeeded(self) -> bool:
        return self is PathStatus.SUCCESS


@dataclass
class _Node:
    ref: int
    pos: np.ndarray
    cost: float
    total: float
    parent: int = INVALID_REF
    closed: bool = False


class NavMeshQuery:
    """
    Queries against one NavMesh.

    Thread Safety: a query object holds no per-search state, so one
    instance may serve several threads.
    """

    MODULE_NAME = "NavMeshQuery"

    def __init__(
        self,
        mesh: NavMesh,
        max_nodes: int = 2048,
        logger: Optional[NavLogger] = None,
    ):
        """
        Args:
            mesh: Mesh to search
            max_nodes: Upper bound on search nodes per find_path call
            logger: Optional logger
        """
        self.mesh = mesh
        self.max_nodes = max_nodes
        self.logger = logger or NavLogger(self.MODULE_NAME)
        self.logger.log_init(polygons=len(mesh), max_nodes=max_nodes)

    # ========================================
    # NEAREST POLYGON
    # ========================================

    def query_polygons(self, center, half_extents, query_filter: QueryFilter) -> list[int]:
        """All polygons passing the filter whose bounds overlap the box."""
        c = np.asarray(center, dtype=np.float64)
        e = np.asarray(half_extents, dtype=np.float64)
        bmin, bmax = c - e, c + e

        result = []
        for ref in self.mesh.refs():
            verts = self.mesh.poly_vertices(ref)
            pmin, pmax = verts.min(axis=0), verts.max(axis=0)
            if np.any(pmin > bmax) or np.any(pmax < bmin):
                continue
            if query_filter.pass_filter(ref, self.mesh):
                result.append(ref)
        return result

    def find_nearest_poly(
        self,
        center,
        half_extents,
        query_filter: QueryFilter,
    ) -> tuple[int, Optional[np.ndarray]]:
        """
        Nearest polygon to ``center`` among those overlapping the search box.

        Returns:
            (ref, nearest_point); ref is INVALID_REF and point None if none
        """
        c = np.asarray(center, dtype=np.float64)
        nearest_ref, nearest_pt, nearest_d = INVALID_REF, None, np.inf

        for ref in self.query_polygons(c, half_extents, query_filter):
            pt = self.mesh.closest_point_on_poly(ref, c)
            d = float(np.sum((pt - c) ** 2))
            if d < nearest_d:
                nearest_ref, nearest_pt, nearest_d = ref, pt, d

        return nearest_ref, nearest_pt

    # ========================================
    # PATH SEARCH
    # ========================================

    def find_path(
        self,
        start_ref: int,
        end_ref: int,
        start_pos,
        end_pos,
        query_filter: QueryFilter,
    ) -> tuple[PathStatus, list[int]]:
        """
        A* search for a polygon corridor from start_ref to end_ref.

        Returns:
            (status, corridor). On PARTIAL the corridor leads to the node
            closest to the end; on FAILURE it is empty.
        """
        mesh = self.mesh
        if not (mesh.is_valid_ref(start_ref) and mesh.is_valid_ref(end_ref)):
            return PathStatus.FAILURE, []

        start = np.asarray(start_pos, dtype=np.float64)
        end = np.asarray(end_pos, dtype=np.float64)

        if start_ref == end_ref:
            return PathStatus.SUCCESS, [start_ref]

        h0 = float(np.linalg.norm(start - end)) * HEURISTIC_SCALE
        nodes: dict[int, _Node] = {start_ref: _Node(start_ref, start, 0.0, h0)}
        counter = itertools.count()
        open_heap = [(h0, next(counter), start_ref)]

        best_ref, best_h = start_ref, h0
        out_of_nodes = False

        while open_heap:
            total, _, ref = heapq.heappop(open_heap)
            node = nodes[ref]
            if node.closed or total > node.total:
                continue
            node.closed = True

            if ref == end_ref:
                best_ref = end_ref
                break

            for nref in mesh.neighbours(ref):
                if nref == node.parent:
                    continue
                if not query_filter.pass_filter(nref, mesh):
                    continue

                npos = mesh.edge_midpoint(ref, nref)
                cost = node.cost + query_filter.get_cost(
                    node.pos, npos, node.parent, ref, nref, mesh
                )
                if nref == end_ref:
                    cost += query_filter.get_cost(
                        npos, end, ref, nref, INVALID_REF, mesh
                    )
                    heuristic = 0.0
                else:
                    heuristic = float(np.linalg.norm(npos - end)) * HEURISTIC_SCALE
                new_total = cost + heuristic

                neighbour = nodes.get(nref)
                if neighbour is None:
                    if len(nodes) >= self.max_nodes:
                        out_of_nodes = True
                        continue
                    neighbour = _Node(nref, npos, cost, new_total, parent=ref)
                    nodes[nref] = neighbour
                elif new_total >= neighbour.total:
                    continue
                else:
                    neighbour.pos = npos
                    neighbour.cost = cost
                    neighbour.total = new_total
                    neighbour.parent = ref
                    neighbour.closed = False

                heapq.heappush(open_heap, (new_total, next(counter), nref))
                if heuristic < best_h:
                    best_ref, best_h = nref, heuristic

        corridor = self._corridor(nodes, best_ref)
        if best_ref == end_ref:
            status = PathStatus.SUCCESS
        else:
            status = PathStatus.PARTIAL

        self.logger.log_output(
            "Path search finished",
            status=status.value,
            corridor_length=len(corridor),
            nodes_used=len(nodes),
            out_of_nodes=out_of_nodes,
        )
        return status, corridor

    @staticmethod
    def _corridor(nodes: dict[int, _Node], last_ref: int) -> list[int]:
        path = []
        ref = last_ref
        while ref != INVALID_REF:
            path.append(ref)
            ref = nodes[ref].parent
        path.reverse()
        return path
