"""
Navigation Mesh

Minimal polygon navmesh: shared vertex array, convex polygons given as
vertex index loops, per-polygon flags and area ids. Neighbours are derived
from shared edges.

Polygon references are ``index + 1``; reference ``0`` means "no polygon".
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import yaml

INVALID_REF = 0

POLYFLAG_WALK = 0x01
DEFAULT_AREA = 0


@dataclass(frozen=True)
class NavPoly:
    """One mesh polygon: vertex indices into the mesh, flags and area id."""
    verts: tuple[int, ...]
    flags: int = POLYFLAG_WALK
    area: int = DEFAULT_AREA


class NavMesh:
    """
    Polygon mesh with edge adjacency.

    Thread Safety: read-only after construction.
    """

    def __init__(self, vertices, polygons: Sequence[NavPoly]):
        self.vertices = np.asarray(vertices, dtype=np.float64).reshape(-1, 3)
        self.polygons: tuple[NavPoly, ...] = tuple(polygons)

        for i, poly in enumerate(self.polygons):
            if len(poly.verts) < 3:
                raise ValueError(f"Polygon {i} has fewer than 3 vertices")
            if max(poly.verts) >= len(self.vertices) or min(poly.verts) < 0:
                raise ValueError(f"Polygon {i} references a missing vertex")

        self._centers = np.array(
            [self.vertices[list(p.verts)].mean(axis=0) for p in self.polygons]
        ).reshape(-1, 3)
        self._neighbours = self._build_adjacency()

    def _build_adjacency(self) -> list[list[int]]:
        edge_owner: dict[tuple[int, int], list[int]] = {}
        for i, poly in enumerate(self.polygons):
            n = len(poly.verts)
            for j in range(n):
                a, b = poly.verts[j], poly.verts[(j + 1) % n]
                edge_owner.setdefault((min(a, b), max(a, b)), []).append(i)

        neighbours: list[list[int]] = [[] for _ in self.polygons]
        for owners in edge_owner.values():
            for i in owners:
                for k in owners:
                    if k != i and (k + 1) not in neighbours[i]:
                        neighbours[i].append(k + 1)
        return neighbours

    # ========================================
    # REFERENCES
    # ========================================

    def __len__(self) -> int:
        return len(self.polygons)

    def is_valid_ref(self, ref: int) -> bool:
        return 1 <= ref <= len(self.polygons)

    def refs(self) -> range:
        return range(1, len(self.polygons) + 1)

    def poly(self, ref: int) -> NavPoly:
        if not self.is_valid_ref(ref):
            raise KeyError(f"Invalid polygon reference {ref}")
        return self.polygons[ref - 1]

    def poly_vertices(self, ref: int) -> np.ndarray:
        return self.vertices[list(self.poly(ref).verts)]

    def poly_center(self, ref: int) -> np.ndarray:
        """Arithmetic mean of the polygon's vertices."""
        if not self.is_valid_ref(ref):
            raise KeyError(f"Invalid polygon reference {ref}")
        return self._centers[ref - 1]

    def neighbours(self, ref: int) -> list[int]:
        if not self.is_valid_ref(ref):
            raise KeyError(f"Invalid polygon reference {ref}")
        return self._neighbours[ref - 1]

    # ========================================
    # GEOMETRY
    # ========================================

    def closest_point_on_poly(self, ref: int, point: np.ndarray) -> np.ndarray:
        """
        Closest point on the polygon's XZ footprint, with height taken from
        the polygon's plane (walkable surfaces are Y-up).
        """
        verts = self.poly_vertices(ref)
        p = np.asarray(point, dtype=np.float64)

        if _point_in_poly_xz(p, verts):
            xz = p[[0, 2]]
        else:
            best, best_d = None, np.inf
            n = len(verts)
            for i in range(n):
                a, b = verts[i][[0, 2]], verts[(i + 1) % n][[0, 2]]
                q = _closest_on_segment(p[[0, 2]], a, b)
                d = float(np.sum((q - p[[0, 2]]) ** 2))
                if d < best_d:
                    best, best_d = q, d
            xz = best

        y = _height_on_poly(xz, verts)
        return np.array([xz[0], y, xz[1]])

    def portal(self, from_ref: int, to_ref: int) -> Optional[tuple[np.ndarray, np.ndarray]]:
        """Shared edge between two adjacent polygons, or None."""
        a_verts = self.poly(from_ref).verts
        b_set = set(self.poly(to_ref).verts)
        n = len(a_verts)
        for i in range(n):
            u, v = a_verts[i], a_verts[(i + 1) % n]
            if u in b_set and v in b_set:
                return self.vertices[u], self.vertices[v]
        return None

    def edge_midpoint(self, from_ref: int, to_ref: int) -> np.ndarray:
        portal = self.portal(from_ref, to_ref)
        if portal is None:
            return (self.poly_center(from_ref) + self.poly_center(to_ref)) / 2.0
        return (portal[0] + portal[1]) / 2.0

    # ========================================
    # CONSTRUCTION
    # ========================================

    @classmethod
    def from_dict(cls, data: dict) -> "NavMesh":
        """
        Expected format:
        {
            "vertices": [[x, y, z], ...],
            "polygons": [{"verts": [0, 1, 2], "flags": 1, "area": 0}, ...]
        }
        """
        polygons = []
        for entry in data.get("polygons", []):
            if isinstance(entry, dict):
                polygons.append(NavPoly(
                    verts=tuple(int(v) for v in entry["verts"]),
                    flags=int(entry.get("flags", POLYFLAG_WALK)),
                    area=int(entry.get("area", DEFAULT_AREA)),
                ))
            else:
                polygons.append(NavPoly(verts=tuple(int(v) for v in entry)))
        return cls(data.get("vertices", []), polygons)

    def to_dict(self) -> dict:
        return {
            "vertices": self.vertices.tolist(),
            "polygons": [
                {"verts": list(p.verts), "flags": p.flags, "area": p.area}
                for p in self.polygons
            ],
        }

    @classmethod
    def load(cls, path) -> "NavMesh":
        """Load a mesh from a YAML or JSON file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Mesh file not found: {path}")
        with open(path, "r", encoding="utf-8") as f:
            if path.suffix in (".yaml", ".yml"):
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        return cls.from_dict(data or {})

    @classmethod
    def grid(
        cls,
        cols: int,
        rows: int,
        cell_size: float = 1.0,
        origin: tuple[float, float, float] = (0.0, 0.0, 0.0),
        holes: Sequence[tuple[int, int]] = (),
    ) -> "NavMesh":
        """
        Flat mesh of square cells on the XZ plane, one polygon per cell.
        Cells listed in ``holes`` as (col, row) are left out. Polygon order
        is row-major over the remaining cells.
        """
        ox, oy, oz = origin
        vertices = [
            (ox + c * cell_size, oy, oz + r * cell_size)
            for r in range(rows + 1)
            for c in range(cols + 1)
        ]
        skip = set(holes)
        polygons = []
        for r in range(rows):
            for c in range(cols):
                if (c, r) in skip:
                    continue
                v0 = r * (cols + 1) + c
                v1 = v0 + 1
                v2 = v1 + (cols + 1)
                v3 = v0 + (cols + 1)
                polygons.append(NavPoly(verts=(v0, v1, v2, v3)))
        return cls(vertices, polygons)


def _point_in_poly_xz(p: np.ndarray, verts: np.ndarray) -> bool:
    """Ray-casting point-in-polygon test on the XZ plane."""
    x, z = p[0], p[2]
    inside = False
    n = len(verts)
    j = n - 1
    for i in range(n):
        xi, zi = verts[i][0], verts[i][2]
        xj, zj = verts[j][0], verts[j][2]
        if ((zi > z) != (zj > z)) and (x < (xj - xi) * (z - zi) / (zj - zi) + xi):
            inside = not inside
        j = i
    if inside:
        return True
    # Points on an edge count as inside
    for i in range(n):
        a, b = verts[i][[0, 2]], verts[(i + 1) % n][[0, 2]]
        q = _closest_on_segment(p[[0, 2]], a, b)
        if float(np.sum((q - p[[0, 2]]) ** 2)) <= 1e-12:
            return True
    return False


def _closest_on_segment(p: np.ndarray, a: np.ndarray, b: np.ndarray) -> np.ndarray:
    ab = b - a
    denom = float(np.dot(ab, ab))
    if denom == 0.0:
        return a.copy()
    t = float(np.clip(np.dot(p - a, ab) / denom, 0.0, 1.0))
    return a + t * ab


def _height_on_poly(xz: np.ndarray, verts: np.ndarray) -> float:
    """Height of the polygon's plane at (x, z), from its first three vertices."""
    a, b, c = verts[0], verts[1], verts[2]
    normal = np.cross(b - a, c - a)
    if abs(normal[1]) < 1e-12:
        return float(verts[:, 1].mean())
    d = -float(np.dot(normal, a))
    return float(-(normal[0] * xz[0] + normal[2] * xz[1] + d) / normal[1])
