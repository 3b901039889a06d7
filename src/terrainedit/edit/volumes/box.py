from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from terrainedit.edit.volumes.influence_volume import InfluenceVolume, orthonormal_frame

if TYPE_CHECKING:
    import numpy.typing as npt
    from terrainedit.edit.brush import Brush


class BoxVolume(InfluenceVolume):
    """
    Oriented box with half-extents (size_a, size_b, size_c) along the frame
    [direction, side, up'] built by ``orthonormal_frame``.
    """

    def __init__(self, brush: Brush) -> None:
        super().__init__(brush)
        self.frame = orthonormal_frame(brush.direction.to_array())
        self.half_extents = np.array([brush.size_a, brush.size_b, brush.size_c])

    def to_local(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        """Coordinates of ``points`` in the box frame."""
        return (points - self.center) @ self.frame.T

    def signed_distance(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return np.max(np.abs(self.to_local(points)) - self.half_extents, axis=1)

    def bounds(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        # world-axis extent of an oriented box: sum of |axis_k| * half_k
        extent = np.abs(self.frame).T @ self.half_extents
        return self.center - extent, self.center + extent
