from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from terrainedit.edit.volumes.influence_volume import InfluenceVolume

if TYPE_CHECKING:
    import numpy.typing as npt
    from terrainedit.edit.brush import Brush


class WedgeVolume(InfluenceVolume):
    """
    Cone tapering linearly from radius ``size_a`` at the center to a point at
    ``center + direction * size_b``.

    With s = (p - c) . d and t = clamp(s, 0, size_b) / size_b, a point is
    inside when 0 <= s <= size_b and its radial distance is <= size_a * (1 - t).
    A zero-length wedge degenerates to a flat disk.
    """

    def __init__(self, brush: Brush) -> None:
        super().__init__(brush)
        self.axis = brush.unit_direction.to_array()

    def signed_distance(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        base_radius = self.brush.size_a
        length = self.brush.size_b

        relative = points - self.center
        axial = relative @ self.axis
        radial = np.linalg.norm(relative - axial[:, None] * self.axis, axis=1)

        if length == 0.0:
            return np.maximum(np.abs(axial), radial - base_radius)

        t = np.clip(axial, 0.0, length) / length
        taper = base_radius * (1.0 - t)
        return np.maximum.reduce([-axial, axial - length, radial - taper])
