from __future__ import annotations

from typing import TYPE_CHECKING

from terrainedit import config
from terrainedit.edit.brush import Brush, Operation
from terrainedit.tools.tool import Tool

if TYPE_CHECKING:
    from terrainedit.core.player import Player
    from terrainedit.geometry.primitives import Vertex


class Shovel(Tool):
    """
    Left click digs a spherical scoop of dirt, right click puts one back
    (paid for from the player's inventory).
    """
    ITEM_ID = 3

    radius = 1.0
    energy = 1.0
    material_id = config.MATERIAL_DIRT

    def __init__(self) -> None:
        super().__init__(name="Shovel", item_id=self.ITEM_ID)

    def compute(self, player: Player, vertex: Vertex) -> Brush:
        return Brush.sphere(Operation.SUB, vertex, self.radius, self.energy, self.material_id)

    def compute_secondary(self, player: Player, vertex: Vertex) -> Brush:
        return Brush.sphere(Operation.ADD, vertex, self.radius, self.energy, self.material_id)
