"""
Surface CSG Solver
==================
Applies one influence volume to the terrain surface without touching the mesh:
it returns the triangles to replace and the volume swept by the edit, and the
World commits the result.

For the triangles whose bounding box overlaps the volume (the candidates):
1. Refine them together by midpoint subdivision down to the edit resolution
   (only where they overlap the volume bounds). Split decisions are taken per
   edge, so both sides of a shared edge are split alike.
2. Clip each piece against the volume boundary, splitting it along the
   crossing points of its edges.
3. Move every vertex inside the volume along the edit axis until it leaves
   the volume. SUB moves into the material, ADD out of it, so moved vertices
   lie on the far boundary of the volume and the surface conforms to it.

Refined points, crossings and displacements only depend on positions, so a
vertex shared by neighbouring triangles moves identically and the surface
stays welded, also across repeated and overlapping edits.
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
import logging
from typing import Dict, List, Set, Tuple, TYPE_CHECKING

import numpy as np
from scipy.optimize import brentq

from terrainedit import config
from terrainedit.edit.brush import Operation

if TYPE_CHECKING:
    import numpy.typing as npt
    from terrainedit.core.mesh import TerrainMesh
    from terrainedit.edit.volumes import InfluenceVolume

logger = logging.getLogger(__name__)

MAX_REFINE_DEPTH = 12

PointKey = Tuple[float, float, float]
EdgeKey = Tuple[PointKey, PointKey]


@dataclass
class CarveResult:
    """Outcome of a solve. ``replacements`` is sorted by triangle index."""
    replacements: List[Tuple[int, npt.NDArray[np.float64]]] = field(default_factory=list)
    volume: float = 0.0
    axis: npt.NDArray[np.float64] = field(default_factory=lambda: np.array(config.UP))

    @property
    def removed_indices(self) -> list[int]:
        return [index for index, _ in self.replacements]

    @property
    def added(self) -> npt.NDArray[np.float64]:
        if not self.replacements:
            return np.empty((0, 3, 3), dtype=np.float64)
        return np.concatenate([pieces for _, pieces in self.replacements], axis=0)

    @property
    def is_empty(self) -> bool:
        return not self.replacements


def _key(point: npt.NDArray[np.float64]) -> PointKey:
    return float(point[0]), float(point[1]), float(point[2])


def _area_vectors(triangles: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    a, b, c = triangles[:, 0], triangles[:, 1], triangles[:, 2]
    return 0.5 * np.cross(b - a, c - a)


def _collapsed(triangles: npt.NDArray[np.float64]) -> npt.NDArray[np.bool_]:
    """Triangles with two coincident corners. Dropping them opens no edge."""
    a, b, c = triangles[:, 0], triangles[:, 1], triangles[:, 2]
    return np.all(a == b, axis=1) | np.all(b == c, axis=1) | np.all(c == a, axis=1)


def _overlaps(triangle: npt.NDArray[np.float64], lo: npt.NDArray[np.float64], hi: npt.NDArray[np.float64]) -> bool:
    return bool(np.all(triangle.min(axis=0) <= hi) and np.all(triangle.max(axis=0) >= lo))


def _longest_edge(triangle: npt.NDArray[np.float64]) -> float:
    edges = triangle - np.roll(triangle, -1, axis=0)
    return float(np.max(np.linalg.norm(edges, axis=1)))


def _edge_key(p: npt.NDArray[np.float64], q: npt.NDArray[np.float64]) -> EdgeKey:
    """Orientation-free key of the edge p-q."""
    a, b = _key(p), _key(q)
    return (a, b) if a <= b else (b, a)


def _edge_keys(triangle: npt.NDArray[np.float64]) -> list[EdgeKey]:
    return [_edge_key(triangle[i], triangle[(i + 1) % 3]) for i in range(3)]


def _split(triangle: npt.NDArray[np.float64], marked: Set[EdgeKey]) -> list[npt.NDArray[np.float64]]:
    """
    Subdivide a triangle at the midpoints of its marked edges.

    Children keep the parent's winding. Midpoints only depend on the edge
    endpoints, so the triangle on the other side of a marked edge produces
    the same points.
    """
    flags = [key in marked for key in _edge_keys(triangle)]
    count = sum(flags)
    if count == 0:
        return [triangle]

    if count == 3:
        a, b, c = triangle
        ab, bc, ca = (a + b) / 2.0, (b + c) / 2.0, (c + a) / 2.0
        return [
            np.array([a, ab, ca]),
            np.array([ab, b, bc]),
            np.array([ca, bc, c]),
            np.array([ab, bc, ca]),
        ]

    if count == 1:
        # p0-p1 is the marked edge
        k = flags.index(True)
        p0, p1, p2 = triangle[k], triangle[(k + 1) % 3], triangle[(k + 2) % 3]
        m = (p0 + p1) / 2.0
        return [np.array([p0, m, p2]), np.array([m, p1, p2])]

    # p0-p1 is the only unmarked edge
    k = flags.index(False)
    p0, p1, p2 = triangle[k], triangle[(k + 1) % 3], triangle[(k + 2) % 3]
    m12, m20 = (p1 + p2) / 2.0, (p2 + p0) / 2.0
    return [
        np.array([p0, p1, m12]),
        np.array([m20, m12, p2]),
        np.array([p0, m12, m20]),
    ]


class CsgSolver:
    """
    Class for a surface CSG solver.
    """

    def __init__(
        self,
        volume: InfluenceVolume,
        operation: Operation,
        resolution: float = config.EDIT_RESOLUTION,
    ) -> None:
        """
        Initialize the solver with a volume.

        Args:
            volume: The influence volume of the brush.
            operation: ADD or SUB.
            resolution: Longest edge allowed for refined pieces.
        """
        if resolution <= 0:
            raise ValueError(f"Resolution must be positive, got {resolution}")
        self.volume = volume
        self.operation = Operation(operation)
        self.resolution = resolution
        self.lo, self.hi = volume.bounds()
        # a ray leaving any interior point is outside after this distance (convex volume)
        self.max_travel = 2.0 * volume.bounding_radius + 1.0

        self._crossings: Dict[Tuple[PointKey, PointKey], npt.NDArray[np.float64]] = {}
        self._displacements: Dict[PointKey, float] = {}

    def solve(self, mesh: TerrainMesh) -> CarveResult:
        """
        Compute the edit against ``mesh``.

        Raises:
            ValueError: If the boundary cannot be located (no sign change).
        """
        candidates = mesh.overlapping(self.lo, self.hi)
        if candidates.size == 0:
            return CarveResult()

        axis = self._edit_axis(mesh.vertices[candidates])
        step = -axis if self.operation == Operation.SUB else axis
        result = CarveResult(axis=axis)
        moved_any = False

        refined = self._refine(mesh.vertices[candidates])
        for index, parts in zip(candidates, refined):
            pieces = np.array(self._clip_all(parts))

            displacement = np.array([
                [self._displacement(vertex, step) for vertex in piece] for piece in pieces
            ])
            moved = bool(np.any(displacement > 0.0))
            # a whole, unmoved candidate shares no split edge with its neighbours
            if len(pieces) == 1 and not moved:
                continue
            moved_any = moved_any or moved

            # prism volume between each piece and its displaced copy
            swept = _area_vectors(pieces) @ axis * displacement.mean(axis=1)
            displaced = pieces + displacement[:, :, None] * step

            result.replacements.append((int(index), displaced[~_collapsed(displaced)]))
            result.volume += float(swept.sum())

        if not moved_any:
            # the volume only grazed the candidates; refinement alone is no edit
            return CarveResult()

        logger.debug(
            f"{self.volume!r}: {len(candidates)} candidates, "
            f"{len(result.replacements)} replaced, volume {result.volume:.6f}"
        )
        return result

    def _edit_axis(self, triangles: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Area-weighted mean normal of the touched surface, +Y if degenerate."""
        total = _area_vectors(triangles).sum(axis=0)
        norm = np.linalg.norm(total)
        if norm < config.GEOMETRY_EPSILON:
            return np.array(config.UP, dtype=np.float64)
        return total / norm

    def _refine(self, triangles: npt.NDArray[np.float64]) -> list[list[npt.NDArray[np.float64]]]:
        """
        Conforming midpoint refinement of all candidates together.

        Works level by level: every triangle that overlaps the volume bounds
        and is still coarser than the resolution marks its edges, then every
        triangle of the level is split at the marked edges. A marked edge is
        split on both of its sides, so no vertex ends up on the interior of a
        neighbour's edge. Edges on the border of the candidate set are only
        marked where they overlap the volume bounds; the triangle beyond them
        is then a candidate too, or there is none (world border).

        Args:
            triangles: Candidate triangles, shape (K, 3, 3).

        Returns:
            The pieces of each candidate, in candidate order.
        """
        level = [(owner, triangle) for owner, triangle in enumerate(triangles)]
        for _ in range(MAX_REFINE_DEPTH):
            sides = Counter(key for _, triangle in level for key in _edge_keys(triangle))
            marked: Set[EdgeKey] = set()
            for _, triangle in level:
                if not _overlaps(triangle, self.lo, self.hi) or _longest_edge(triangle) <= self.resolution:
                    continue
                for i, key in enumerate(_edge_keys(triangle)):
                    edge = np.array([triangle[i], triangle[(i + 1) % 3]])
                    if sides[key] > 1 or _overlaps(edge, self.lo, self.hi):
                        marked.add(key)
            if not marked:
                break
            level = [(owner, child) for owner, triangle in level for child in _split(triangle, marked)]

        pieces: list[list[npt.NDArray[np.float64]]] = [[] for _ in range(len(triangles))]
        for owner, triangle in level:
            pieces[owner].append(triangle)
        return pieces

    def _clip_all(self, pieces: list[npt.NDArray[np.float64]]) -> list[npt.NDArray[np.float64]]:
        if not pieces:
            return []
        stacked = np.array(pieces)
        inside = self.volume.contains(stacked.reshape(-1, 3)).reshape(-1, 3)
        out = []
        for piece, mask in zip(stacked, inside):
            out.extend(self._clip(piece, mask))
        return out

    def _clip(
        self,
        triangle: npt.NDArray[np.float64],
        inside: npt.NDArray[np.bool_],
    ) -> list[npt.NDArray[np.float64]]:
        """Split a triangle along the volume boundary, keeping its winding."""
        count = int(inside.sum())
        if count in (0, 3):
            return [triangle]

        # rotate so that the vertex alone on its side comes first
        lone = int(np.flatnonzero(inside if count == 1 else ~inside)[0])
        p0 = triangle[lone]
        p1 = triangle[(lone + 1) % 3]
        p2 = triangle[(lone + 2) % 3]
        p0_inside = bool(inside[lone])

        q01 = self._crossing(p0, p1, p0_inside)
        q02 = self._crossing(p0, p2, p0_inside)
        return [
            np.array([p0, q01, q02]),
            np.array([q01, p1, p2]),
            np.array([q01, p2, q02]),
        ]

    def _crossing(
        self,
        p: npt.NDArray[np.float64],
        q: npt.NDArray[np.float64],
        p_inside: bool,
    ) -> npt.NDArray[np.float64]:
        """Boundary point on the edge p-q, always solved from the inside end."""
        start, end = (p, q) if p_inside else (q, p)
        key = (_key(start), _key(end))
        cached = self._crossings.get(key)
        if cached is not None:
            return cached

        delta = end - start
        f = lambda t: self.volume.distance_at(start + t * delta)
        t = brentq(f, 0.0, 1.0, xtol=config.ROOT_TOLERANCE)
        point = start + t * delta
        self._crossings[key] = point
        # boundary points stay put so clipped pieces remain welded to untouched ones
        self._displacements[_key(point)] = 0.0
        return point

    def _displacement(self, vertex: npt.NDArray[np.float64], step: npt.NDArray[np.float64]) -> float:
        """Distance along ``step`` from an inside vertex to the volume boundary."""
        key = _key(vertex)
        cached = self._displacements.get(key)
        if cached is not None:
            return cached

        f = lambda t: self.volume.distance_at(vertex + t * step)
        if f(0.0) > -config.GEOMETRY_EPSILON:
            # outside, or on the boundary
            distance = 0.0
        else:
            distance = brentq(f, 0.0, self.max_travel, xtol=config.ROOT_TOLERANCE)
        self._displacements[key] = distance
        return distance
