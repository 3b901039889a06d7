import matplotlib

matplotlib.use("Agg")

import pytest

from terrainedit import config
from terrainedit.core.player import Player
from terrainedit.core.world import World
from terrainedit.geometry.primitives import Vertex


@pytest.fixture
def world() -> World:
    return World(size=8)


@pytest.fixture
def player(world: World) -> Player:
    alice = Player("alice", position=Vertex(-2.0, 1.7, 0.0), facing=Vertex(1.0, 0.0, 0.0))
    world.add_player(alice)
    return alice


@pytest.fixture
def wood(world: World):
    return world.registry.resource_for(config.MATERIAL_WOOD)


@pytest.fixture
def dirt(world: World):
    return world.registry.resource_for(config.MATERIAL_DIRT)
