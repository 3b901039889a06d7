from __future__ import annotations

import logging
from typing import Any, Optional, TYPE_CHECKING

from terrainedit import config
from terrainedit.core.inventory import Inventory
from terrainedit.geometry.primitives import Vertex

if TYPE_CHECKING:
    from terrainedit.core.item import Item
    from terrainedit.core.world import World

logger = logging.getLogger(__name__)


class Player:
    """
    A participant acting on the world. Owns exactly one inventory.
    """

    def __init__(
        self,
        name: str,
        position: Vertex = Vertex(0.0, 0.0, 0.0),
        facing: Vertex = Vertex(1.0, 0.0, 0.0),
        capacity: float = config.DEFAULT_CAPACITY,
    ) -> None:
        """
        Args:
            name: Unique player name within a world.
            position: Eye position in world space.
            facing: Look direction; need not be normalized.
            capacity: Capacity of the player's inventory.
        """
        self.name = name
        self.position = position
        self.facing = facing
        self.inventory = Inventory(capacity=capacity)
        self.world: Optional[World] = None
        self.equipped: Optional[Item] = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self.name}', position={self.position})"

    @property
    def look_direction(self) -> Vertex:
        """Unit facing vector, +X when the facing is degenerate."""
        direction = self.facing.normalize()
        if direction.magnitude == 0.0:
            return Vertex(1.0, 0.0, 0.0)
        return direction

    def equip(self, item: Optional[Item]) -> None:
        if self.equipped is not None:
            self.equipped.on_unequip(self)
        self.equipped = item
        if item is not None:
            item.on_equip(self)
            logger.debug(f"{self.name} equipped {item.name}")

    # Input-layer entry points, forwarded to the item in hand

    def left_click(self, vertex: Vertex) -> Any:
        return self.equipped.left_click(vertex) if self.equipped else None

    def right_click(self, vertex: Vertex) -> Any:
        return self.equipped.right_click(vertex) if self.equipped else None

    def left_hold(self, vertex: Vertex, seconds: float) -> Any:
        return self.equipped.left_hold(vertex, seconds) if self.equipped else None

    def right_hold(self, vertex: Vertex, seconds: float) -> Any:
        return self.equipped.right_hold(vertex, seconds) if self.equipped else None
