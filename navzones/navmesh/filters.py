"""
Query Filters

A filter decides which polygons a search may enter and what it costs to
move between two points across polygons. Filters compose by holding
another filter, not by subclassing it:

    DefaultQueryFilter                   flag masks + area costs
    ExclusionAwareFilter(zones, base)    base, minus polygons in dead zones
"""

from abc import ABC, abstractmethod
from typing import Iterable, Optional

import numpy as np

from .mesh import NavMesh
from ..zones.zone_data import ExclusionZone

MAX_AREAS = 64


class QueryFilter(ABC):
    """Acceptance and cost policy consulted by the search engine."""

    @abstractmethod
    def pass_filter(self, ref: int, mesh: NavMesh) -> bool:
        """True if the polygon may be part of a path."""

    @abstractmethod
    def get_cost(
        self,
        start_pos: np.ndarray,
        end_pos: np.ndarray,
        prev_ref: int,
        cur_ref: int,
        next_ref: int,
        mesh: NavMesh,
    ) -> float:
        """Cost of moving from start_pos to end_pos across cur_ref."""


class DefaultQueryFilter(QueryFilter):
    """
    Flag and area based filter.

    A polygon passes when it has at least one include flag and no exclude
    flag. Cost is segment length scaled by the area cost of the polygon
    being crossed.
    """

    def __init__(
        self,
        include_flags: int = 0xFFFF,
        exclude_flags: int = 0,
        area_costs: Optional[dict[int, float]] = None,
    ):
        self.include_flags = include_flags
        self.exclude_flags = exclude_flags
        self._area_cost = [1.0] * MAX_AREAS
        for area, cost in (area_costs or {}).items():
            self.set_area_cost(area, cost)

    def set_area_cost(self, area: int, cost: float) -> None:
        if not 0 <= area < MAX_AREAS:
            raise ValueError(f"Area id {area} outside [0, {MAX_AREAS})")
        if cost <= 0:
            raise ValueError(f"Area cost must be > 0, got {cost}")
        self._area_cost[area] = float(cost)

    def get_area_cost(self, area: int) -> float:
        return self._area_cost[area]

    def pass_filter(self, ref: int, mesh: NavMesh) -> bool:
        flags = mesh.poly(ref).flags
        return (flags & self.include_flags) != 0 and (flags & self.exclude_flags) == 0

    def get_cost(self, start_pos, end_pos, prev_ref, cur_ref, next_ref, mesh) -> float:
        distance = float(np.linalg.norm(np.asarray(end_pos) - np.asarray(start_pos)))
        return distance * self._area_cost[mesh.poly(cur_ref).area]


class ExclusionAwareFilter(QueryFilter):
    """
    Wraps a base filter and additionally rejects any polygon whose centre
    lies inside one of the given dead zones (boundary inclusive).

    Zones are copied at construction: edits made to the registry afterwards
    do not reach a filter already handed to a query. Cost is the base
    filter's cost; zones only affect admissibility, so a detour around a
    zone carries no extra weighting.
    """

    def __init__(
        self,
        zones: Iterable[ExclusionZone],
        base: Optional[QueryFilter] = None,
    ):
        self.base = base if base is not None else DefaultQueryFilter()
        self.zones: tuple[ExclusionZone, ...] = tuple(zone.copy() for zone in zones)

        if self.zones:
            self._centers = np.array([z.center.to_tuple() for z in self.zones], dtype=np.float64)
            self._radii = np.array([z.radius for z in self.zones], dtype=np.float64)
        else:
            self._centers = np.empty((0, 3), dtype=np.float64)
            self._radii = np.empty((0,), dtype=np.float64)

    def __len__(self) -> int:
        return len(self.zones)

    def is_excluded(self, point) -> bool:
        """True if point lies within distance <= radius of any zone."""
        if not self.zones:
            return False
        distances = np.linalg.norm(self._centers - np.asarray(point, dtype=np.float64), axis=1)
        return bool(np.any(distances <= self._radii))

    def pass_filter(self, ref: int, mesh: NavMesh) -> bool:
        if not self.base.pass_filter(ref, mesh):
            return False
        return not self.is_excluded(mesh.poly_center(ref))

    def get_cost(self, start_pos, end_pos, prev_ref, cur_ref, next_ref, mesh) -> float:
        return self.base.get_cost(start_pos, end_pos, prev_ref, cur_ref, next_ref, mesh)
