"""
Path Query Engine

Runs one path query against the base search engine with the dead zones of
the caller's region applied.

Steps per query:
1. Pick the filter: ExclusionAwareFilter over a snapshot of the zones, or
   the plain base filter when there are none
2. Anchor start and end to the nearest admissible polygon inside a small
   search box
3. Search the corridor from start polygon to end polygon
4. Report the corridor, or an empty path with the reason

No-path outcomes are values, not exceptions. The engine never mutates
zone state.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

import numpy as np

from .filters import DefaultQueryFilter, ExclusionAwareFilter, QueryFilter
from .mesh import INVALID_REF
from .query import NavMeshQuery, PathStatus
from ..errors import QueryFailure
from ..logging_utils import NavLogger
from ..zones.zone_data import ExclusionZone, Vector3
from ..zones.zone_registry import ZoneRegistry

DEFAULT_HALF_EXTENTS = (0.5, 0.5, 0.5)


@dataclass
class PathQueryResult:
    """Result of a path query."""
    success: bool
    path: list[int] = field(default_factory=list)
    failure: Optional[QueryFailure] = None
    start_ref: int = INVALID_REF
    end_ref: int = INVALID_REF
    zone_count: int = 0
    message: str = ""
    suggested_fix: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "path": list(self.path),
            "failure": self.failure.value if self.failure else None,
            "start_ref": self.start_ref,
            "end_ref": self.end_ref,
            "zone_count": self.zone_count,
            "message": self.message,
            "suggested_fix": self.suggested_fix,
        }


def _as_point(value) -> np.ndarray:
    if isinstance(value, Vector3):
        return value.to_array()
    return np.asarray(value, dtype=np.float64).reshape(3)


class PathQueryEngine:
    """
    Filter selection and result normalisation around NavMeshQuery.

    Usage:
        engine = PathQueryEngine(NavMeshQuery(mesh))
        result = engine.find_path(start, end, registry.snapshot(region))
        if result.success:
            follow(result.path)
    """

    MODULE_NAME = "PathQueryEngine"

    def __init__(
        self,
        query: NavMeshQuery,
        half_extents: Sequence[float] = DEFAULT_HALF_EXTENTS,
        base_filter: Optional[QueryFilter] = None,
        logger: Optional[NavLogger] = None,
    ):
        """
        Args:
            query: Base search engine
            half_extents: Half size of the box searched around start and end
            base_filter: Filter used when no zones apply, and wrapped when they do
            logger: Optional logger
        """
        self.query = query
        self.half_extents = np.asarray(half_extents, dtype=np.float64).reshape(3)
        self.base_filter = base_filter if base_filter is not None else DefaultQueryFilter()
        self.logger = logger or NavLogger(self.MODULE_NAME)
        self.logger.log_init(half_extents=self.half_extents.tolist())

    def select_filter(self, zones: Optional[Sequence[ExclusionZone]]) -> QueryFilter:
        """Exclusion-aware filter over a copy of zones, or the base filter if empty."""
        if zones:
            return ExclusionAwareFilter(zones, base=self.base_filter)
        return self.base_filter

    def find_path(
        self,
        start,
        end,
        zones: Optional[Sequence[ExclusionZone]] = None,
    ) -> PathQueryResult:
        """
        Find a polygon corridor from start to end avoiding the given zones.

        Args:
            start: Start point (Vector3 or x, y, z)
            end: End point (Vector3 or x, y, z)
            zones: Dead zones to respect; empty or None means none

        Returns:
            PathQueryResult; on failure ``path`` is empty and ``failure`` set
        """
        start_pt = _as_point(start)
        end_pt = _as_point(end)
        query_filter = self.select_filter(zones)
        zone_count = len(zones) if zones else 0

        self.logger.log_input(
            "Path query",
            start=start_pt.tolist(),
            end=end_pt.tolist(),
            zone_count=zone_count,
        )

        start_ref, _ = self.query.find_nearest_poly(start_pt, self.half_extents, query_filter)
        if start_ref == INVALID_REF:
            return self._fail(
                QueryFailure.NO_START_ELEMENT,
                zone_count,
                message="No navigable polygon near start point",
                suggested_fix="Move the start point onto the mesh or remove the dead zone covering it",
            )

        end_ref, _ = self.query.find_nearest_poly(end_pt, self.half_extents, query_filter)
        if end_ref == INVALID_REF:
            return self._fail(
                QueryFailure.NO_END_ELEMENT,
                zone_count,
                start_ref=start_ref,
                message="No navigable polygon near end point",
                suggested_fix="Move the end point onto the mesh or remove the dead zone covering it",
            )

        status, corridor = self.query.find_path(
            start_ref, end_ref, start_pt, end_pt, query_filter
        )
        if status is not PathStatus.SUCCESS:
            return self._fail(
                QueryFailure.EMPTY_RESULT,
                zone_count,
                start_ref=start_ref,
                end_ref=end_ref,
                message=f"No complete route (search status: {status.value})",
                suggested_fix="Dead zones may cut every route; remove or shrink one",
            )

        result = PathQueryResult(
            success=True,
            path=list(corridor),
            start_ref=start_ref,
            end_ref=end_ref,
            zone_count=zone_count,
            message=f"Path found through {len(corridor)} polygons",
        )
        self.logger.log_output("Path found", path_length=len(corridor))
        return result

    def find(self, start, end, zones: Optional[Sequence[ExclusionZone]] = None) -> list[int]:
        """Corridor polygon refs, or an empty list when there is no path."""
        return self.find_path(start, end, zones).path

    def find_path_for_region(
        self,
        registry: ZoneRegistry,
        region,
        start,
        end,
    ) -> PathQueryResult:
        """Query using a snapshot of ``region``'s zones taken now."""
        return self.find_path(start, end, registry.snapshot(region))

    def _fail(
        self,
        failure: QueryFailure,
        zone_count: int,
        start_ref: int = INVALID_REF,
        end_ref: int = INVALID_REF,
        message: str = "",
        suggested_fix: Optional[str] = None,
    ) -> PathQueryResult:
        self.logger.warning(
            message,
            failure=failure.value,
            zone_count=zone_count,
            suggested_fix=suggested_fix,
        )
        return PathQueryResult(
            success=False,
            failure=failure,
            start_ref=start_ref,
            end_ref=end_ref,
            zone_count=zone_count,
            message=message,
            suggested_fix=suggested_fix,
        )
