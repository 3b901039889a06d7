from __future__ import annotations

from typing import TYPE_CHECKING

from terrainedit import config
from terrainedit.edit.brush import Brush, Operation
from terrainedit.tools.tool import Tool

if TYPE_CHECKING:
    from terrainedit.core.player import Player
    from terrainedit.geometry.primitives import Vertex


class Axe(Tool):
    """
    Chops a wedge out of the terrain in the direction the player is facing.
    """
    ITEM_ID = 1

    base_radius = 0.75
    length = 1.5
    energy = 10.0
    material_id = config.MATERIAL_WOOD

    def __init__(self) -> None:
        super().__init__(name="Axe", item_id=self.ITEM_ID)

    def compute(self, player: Player, vertex: Vertex) -> Brush:
        return Brush.wedge(
            Operation.SUB,
            center=vertex,
            direction=player.look_direction,
            base_radius=self.base_radius,
            length=self.length,
            energy=self.energy,
            material_id=self.material_id,
        )
