from __future__ import annotations

from datetime import datetime
import logging

import numpy as np
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from terrainedit.geometry.primitives import Triangle

from typing import Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    import numpy.typing as npt

logger = logging.getLogger(__name__)


class TerrainMesh:
    """
    Ordered collection of terrain triangles stored as an (N, 3, 3) array
    (triangle, corner, xyz). Corners are wound so the normal points out of
    the material.
    """

    def __init__(self, vertices: npt.ArrayLike | None = None) -> None:
        """
        Initialize the TerrainMesh class.

        Args:
            vertices: Triangle corner coordinates, shape (N, 3, 3).
        """
        if vertices is None:
            vertices = np.empty((0, 3, 3), dtype=np.float64)
        vertices = np.array(vertices, dtype=np.float64).reshape(-1, 3, 3)
        self.vertices: npt.NDArray[np.float64] = vertices

    def __len__(self) -> int:
        return len(self.vertices)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(triangles={len(self)})"

    @classmethod
    def flat(cls, size: int, height: float = 0.0) -> TerrainMesh:
        """
        Flat square plane of ``size`` x ``size`` unit cells centered on the
        origin in the XZ plane. Each cell is split along its diagonal into two
        triangles facing +Y.
        """
        if size < 0:
            raise ValueError(f"World size must be non-negative, got {size}")
        origin = -size / 2.0
        triangles = []
        for i in range(size):
            x0 = origin + i
            x1 = x0 + 1.0
            for j in range(size):
                z0 = origin + j
                z1 = z0 + 1.0
                triangles.append([(x0, height, z0), (x0, height, z1), (x1, height, z1)])
                triangles.append([(x0, height, z0), (x1, height, z1), (x1, height, z0)])
        logger.debug(f"Created flat terrain with {len(triangles)} triangles.")
        return cls(np.array(triangles, dtype=np.float64).reshape(-1, 3, 3))

    @property
    def triangles(self) -> list[Triangle]:
        return [Triangle.from_array(t) for t in self.vertices]

    def triangles_at(self, indices: Sequence[int]) -> list[Triangle]:
        return [Triangle.from_array(self.vertices[i]) for i in indices]

    @property
    def bounds(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """(min corner, max corner) over all triangles."""
        if len(self) == 0:
            return np.zeros(3), np.zeros(3)
        flat = self.vertices.reshape(-1, 3)
        return flat.min(axis=0), flat.max(axis=0)

    @property
    def area_vectors(self) -> npt.NDArray[np.float64]:
        """Normal scaled by area for every triangle, shape (N, 3)."""
        a, b, c = self.vertices[:, 0], self.vertices[:, 1], self.vertices[:, 2]
        return 0.5 * np.cross(b - a, c - a)

    @property
    def total_area(self) -> float:
        return float(np.linalg.norm(self.area_vectors, axis=1).sum())

    def overlapping(
        self,
        lo: npt.NDArray[np.float64],
        hi: npt.NDArray[np.float64],
    ) -> npt.NDArray[np.int64]:
        """Indices of triangles whose bounding box overlaps the box [lo, hi]."""
        if len(self) == 0:
            return np.empty(0, dtype=np.int64)
        tri_lo = self.vertices.min(axis=1)
        tri_hi = self.vertices.max(axis=1)
        mask = np.all((tri_lo <= hi) & (tri_hi >= lo), axis=1)
        return np.flatnonzero(mask)

    def spliced(
        self,
        replacements: Sequence[tuple[int, npt.NDArray[np.float64]]],
    ) -> npt.NDArray[np.float64]:
        """
        New vertex array where each listed triangle is replaced in place by its
        pieces. The mesh itself is not modified.

        Args:
            replacements: (triangle index, (K, 3, 3) pieces) sorted by index.
        """
        segments = []
        previous = 0
        for index, pieces in replacements:
            segments.append(self.vertices[previous:index])
            segments.append(np.asarray(pieces, dtype=np.float64).reshape(-1, 3, 3))
            previous = index + 1
        segments.append(self.vertices[previous:])
        return np.concatenate(segments, axis=0)

    def plot(self) -> None:
        """Plot the terrain surface (debugging aid)."""
        plt.rcParams["figure.constrained_layout.use"] = True
        fig = plt.figure()
        ax = fig.add_subplot(projection="3d")

        # world Y is up, matplotlib Z is up
        polygons = self.vertices[:, :, [0, 2, 1]]
        collection = Poly3DCollection(polygons, facecolor="tan", edgecolor="black", linewidths=0.2, alpha=0.8)
        ax.add_collection3d(collection)

        lo, hi = self.bounds
        ax.set_xlim(lo[0], hi[0])
        ax.set_ylim(lo[2], hi[2])
        ax.set_zlim(min(lo[1], -1.0), max(hi[1], 1.0))

        ax.set_title(f"Terrain plotted at {datetime.now().strftime('%d.%m.%Y %H:%M:%S')}")
        ax.set_xlabel("X Coordinate")
        ax.set_ylabel("Z Coordinate")
        ax.set_zlabel("Height")
        plt.show()
