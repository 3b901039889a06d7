from __future__ import annotations

from typing import TYPE_CHECKING

from terrainedit import config
from terrainedit.edit.brush import Brush, Operation
from terrainedit.tools.tool import Tool

if TYPE_CHECKING:
    from terrainedit.core.player import Player
    from terrainedit.geometry.primitives import Vertex


class Pickaxe(Tool):
    """
    Digs a capsule-shaped tunnel along the look direction. Holding the button
    keeps mining, with energy proportional to the held time.
    """
    ITEM_ID = 2

    radius = 0.5
    half_length = 0.75
    energy = 8.0
    material_id = config.MATERIAL_STONE
    hold_rate = 1.0

    def __init__(self) -> None:
        super().__init__(name="Pickaxe", item_id=self.ITEM_ID)

    def compute(self, player: Player, vertex: Vertex) -> Brush:
        return Brush.capsule(
            Operation.SUB,
            center=vertex,
            direction=player.look_direction,
            half_length=self.half_length,
            radius=self.radius,
            energy=self.energy,
            material_id=self.material_id,
        )
