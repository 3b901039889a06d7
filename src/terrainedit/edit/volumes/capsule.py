from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from terrainedit.edit.volumes.influence_volume import InfluenceVolume

if TYPE_CHECKING:
    import numpy.typing as npt
    from terrainedit.edit.brush import Brush


class CapsuleVolume(InfluenceVolume):
    """
    Points within ``size_a`` of the segment
    [center - direction * size_b, center + direction * size_b].
    """

    def __init__(self, brush: Brush) -> None:
        super().__init__(brush)
        self.axis = brush.unit_direction.to_array()
        self.start = self.center - self.axis * brush.size_b
        self.end = self.center + self.axis * brush.size_b

    def signed_distance(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        length = 2.0 * self.brush.size_b
        relative = points - self.start
        if length > 0.0:
            t = np.clip(relative @ self.axis, 0.0, length)
        else:
            t = np.zeros(len(points))
        closest = self.start + t[:, None] * self.axis
        return np.linalg.norm(points - closest, axis=1) - self.brush.size_a

    def bounds(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        r = self.brush.size_a
        lo = np.minimum(self.start, self.end) - r
        hi = np.maximum(self.start, self.end) + r
        return lo, hi
