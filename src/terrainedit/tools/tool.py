from __future__ import annotations

from abc import abstractmethod
import logging
from typing import Optional, TYPE_CHECKING

from terrainedit.core.errors import ToolNotEquippedError
from terrainedit.core.item import Item

if TYPE_CHECKING:
    from terrainedit.core.player import Player
    from terrainedit.core.world import InteractionOutcome
    from terrainedit.edit.brush import Brush
    from terrainedit.geometry.primitives import Vertex

logger = logging.getLogger(__name__)


class Tool(Item):
    """
    Abstract base class for tools: items that turn an aim point into a brush.

    ``compute`` must be a pure function of the player's current state and the
    aim point. A click runs one compute and one world interaction; a hold
    sample does the same with the energy scaled by the elapsed time.
    """

    # energy multiplier per held second, 0 disables hold interactions
    hold_rate: float = 0.0

    def __init__(self, name: str, item_id: int) -> None:
        super().__init__(name=name, item_id=item_id)
        self.holder: Optional[Player] = None

    @abstractmethod
    def compute(self, player: Player, vertex: Vertex) -> Brush:
        """
        Build the brush for a primary use of the tool.

        Args:
            player: The acting player (read only).
            vertex: Aim point in world space.
        """

    def compute_secondary(self, player: Player, vertex: Vertex) -> Brush:
        """Brush for a secondary use; same as the primary unless overridden."""
        return self.compute(player, vertex)

    def on_equip(self, player: Player) -> None:
        self.holder = player

    def on_unequip(self, player: Player) -> None:
        if self.holder is player:
            self.holder = None

    def _require_holder(self) -> Player:
        player = self.holder
        if player is None or player.world is None:
            raise ToolNotEquippedError(f"{self.name} is not held by a player in a world")
        return player

    def left_click(self, vertex: Vertex) -> InteractionOutcome:
        player = self._require_holder()
        return player.world.interact(player, self.compute(player, vertex))

    def right_click(self, vertex: Vertex) -> InteractionOutcome:
        player = self._require_holder()
        return player.world.interact(player, self.compute_secondary(player, vertex))

    def left_hold(self, vertex: Vertex, seconds: float) -> Optional[InteractionOutcome]:
        return self._hold(vertex, seconds, secondary=False)

    def right_hold(self, vertex: Vertex, seconds: float) -> Optional[InteractionOutcome]:
        return self._hold(vertex, seconds, secondary=True)

    def _hold(self, vertex: Vertex, seconds: float, secondary: bool) -> Optional[InteractionOutcome]:
        # every call is an independent sample; the input layer owns the timing
        if seconds <= 0.0 or self.hold_rate <= 0.0:
            return None
        player = self._require_holder()
        brush = self.compute_secondary(player, vertex) if secondary else self.compute(player, vertex)
        brush = brush.with_energy(brush.energy * seconds * self.hold_rate)
        return player.world.interact(player, brush)
