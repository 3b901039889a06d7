from __future__ import annotations

from typing import TYPE_CHECKING

import numpy as np

from terrainedit.edit.volumes.influence_volume import InfluenceVolume

if TYPE_CHECKING:
    import numpy.typing as npt


class SphereVolume(InfluenceVolume):
    """
    Ball of radius ``size_a`` around the brush center.
    """

    def signed_distance(self, points: npt.NDArray[np.float64]) -> npt.NDArray[np.float64]:
        return np.linalg.norm(points - self.center, axis=1) - self.brush.size_a
