"""
Influence volumes: the solid region a brush acts on, one class per shape.
"""
from __future__ import annotations

from typing import TYPE_CHECKING

from terrainedit.edit.brush import Shape
from terrainedit.edit.volumes.influence_volume import InfluenceVolume, orthonormal_frame
from terrainedit.edit.volumes.sphere import SphereVolume
from terrainedit.edit.volumes.capsule import CapsuleVolume
from terrainedit.edit.volumes.wedge import WedgeVolume
from terrainedit.edit.volumes.box import BoxVolume

if TYPE_CHECKING:
    from terrainedit.edit.brush import Brush

VOLUME_TYPE_MAP: dict[Shape, type[InfluenceVolume]] = {
    Shape.SPHERE: SphereVolume,
    Shape.CAPSULE: CapsuleVolume,
    Shape.WEDGE: WedgeVolume,
    Shape.BOX: BoxVolume,
}


def volume_for_brush(brush: Brush) -> InfluenceVolume:
    """Instantiate the influence volume matching the brush shape."""
    return VOLUME_TYPE_MAP[brush.shape](brush)


__all__ = [
    "InfluenceVolume",
    "SphereVolume",
    "CapsuleVolume",
    "WedgeVolume",
    "BoxVolume",
    "VOLUME_TYPE_MAP",
    "orthonormal_frame",
    "volume_for_brush",
]
