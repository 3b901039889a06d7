"""Command-line demo: chop, dig and refill a small patch of terrain."""
import logging

from terrainedit.logging_config import setup_logging
from terrainedit.core.player import Player
from terrainedit.core.world import World
from terrainedit.geometry.primitives import Vertex
from terrainedit.tools import Axe, Shovel


def main() -> None:
    setup_logging(level=logging.INFO)
    logger = logging.getLogger("terrainedit.demo")

    world = World(size=16)
    player = Player("demo", position=Vertex(-3.0, 1.7, 0.0), facing=Vertex(1.0, 0.0, 0.0))
    world.add_player(player)

    player.equip(Axe())
    outcome = player.left_click(Vertex(0.0, 0.0, 0.0))
    logger.info(f"Axe: {len(outcome.edit.mesh_delta)} triangles changed, deposited {outcome.deposited}")

    player.equip(Shovel())
    outcome = player.left_click(Vertex(4.0, 0.0, 4.0))
    logger.info(f"Shovel dig: deposited {outcome.deposited}")
    outcome = player.right_click(Vertex(-4.0, 0.0, -4.0))
    logger.info(f"Shovel fill: deposited {outcome.deposited}, failures {outcome.failures}")

    for item, amount in player.inventory.items().items():
        logger.info(f"  {item.name}: {amount:.3f}")
    logger.info(f"Terrain now has {world.triangle_count} triangles.")


if __name__ == "__main__":
    main()
