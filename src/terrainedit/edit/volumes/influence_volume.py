from __future__ import annotations

from abc import ABC, abstractmethod

from typing import TYPE_CHECKING

import numpy as np

from terrainedit import config

if TYPE_CHECKING:
    import numpy.typing as npt
    from terrainedit.edit.brush import Brush
    from terrainedit.geometry.primitives import Vertex


def orthonormal_frame(direction: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
    """
    Build a right-handed orthonormal frame whose first axis is ``direction``.

    The two remaining axes are derived from the fixed world up vector, so the
    same direction always yields the same frame on every peer.

    Args:
        direction: Non-zero 3D vector.

    Returns:
        A (3, 3) array with rows [forward, side, up'].
    """
    forward = direction / np.linalg.norm(direction)
    reference = np.array(config.UP, dtype=np.float64)
    side = np.cross(reference, forward)
    if np.linalg.norm(side) < config.GEOMETRY_EPSILON:
        # direction is parallel to up, use world X as reference instead
        side = np.cross(np.array([1.0, 0.0, 0.0]), forward)
    side = side / np.linalg.norm(side)
    up = np.cross(forward, side)
    return np.array([forward, side, up])


class InfluenceVolume(ABC):
    """
    Abstract base class for the solid region affected by a brush.

    A volume is described implicitly by ``signed_distance``: values <= 0 are
    inside (the boundary is closed) and the zero set is the boundary surface.
    The function is continuous but only needs to be an exact distance where
    that is cheap; the CSG solver only relies on its sign and continuity.
    All volumes are convex.
    """

    def __init__(self, brush: Brush) -> None:
        """
        Initialize the volume from a validated brush.

        Args:
            brush: The brush whose shape parameters define the volume.
        """
        self.brush = brush
        self.center = brush.center.to_array()
        self.bounding_radius = brush.bounding_radius

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(center={self.center}, bounding_radius={self.bounding_radius})"

    @abstractmethod
    def signed_distance(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """
        Evaluate the implicit function.

        Args:
            points: Array of shape (N, 3).

        Returns:
            Array of shape (N,), <= 0 inside the volume.
        """

    def contains(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.bool_]:
        """Inclusion mask for an (N, 3) array of points (closed boundary)."""
        return self.signed_distance(np.atleast_2d(points)) <= 0.0

    def contains_point(self, vertex: Vertex) -> bool:
        return bool(self.contains(vertex.to_array())[0])

    def distance_at(self, point: npt.NDArray[np.float64]) -> float:
        """Scalar form of ``signed_distance`` for root finding."""
        return float(self.signed_distance(point.reshape(1, 3))[0])

    def bounds(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        """
        Axis-aligned bounding box of the volume.

        The default is the box around the bounding sphere; subclasses tighten it.

        Returns:
            Tuple (min corner, max corner).
        """
        r = self.bounding_radius
        return self.center - r, self.center + r
