import numpy as np
import pytest

from terrainedit import config
from terrainedit.edit.brush import Brush, Operation
from terrainedit.geometry.primitives import Vertex
from terrainedit.io import WorldIO


def test_save_and_load_restores_terrain_and_players(tmp_path, world, player, wood, dirt):
    world.apply(Brush.sphere(Operation.SUB, Vertex(1.0, 0.0, -1.0), 1.0, energy=1.0, material_id=3))
    player.inventory.add_item(wood, 3.5)
    player.inventory.add_item(dirt, 0.25)

    path = tmp_path / "world.h5"
    WorldIO.save_world(world, str(path))
    loaded = WorldIO.load_world(str(path))

    assert loaded.size == world.size
    assert loaded.resolution == world.resolution
    np.testing.assert_array_equal(loaded.mesh.vertices, world.mesh.vertices)

    restored = loaded.get_player("alice")
    assert restored is not None
    assert restored.world is loaded
    assert restored.position == player.position
    assert restored.facing == player.facing
    assert restored.inventory.capacity == config.DEFAULT_CAPACITY
    assert restored.inventory.get_amt_of_item(wood) == 3.5
    assert restored.inventory.get_amt_of_item(dirt) == 0.25


def test_player_with_empty_inventory(tmp_path, world, player):
    path = tmp_path / "empty.h5"
    WorldIO.save_world(world, str(path))
    restored = WorldIO.load_world(str(path)).get_player("alice")
    assert len(restored.inventory) == 0


def test_loaded_world_is_editable(tmp_path, world):
    path = tmp_path / "flat.h5"
    WorldIO.save_world(world, str(path))
    loaded = WorldIO.load_world(str(path))
    result = loaded.apply(Brush.sphere(Operation.SUB, Vertex(0.0, 0.0, 0.0), 1.0, energy=1.0))
    assert result.mesh_delta


def test_rejects_files_that_are_not_hdf5(tmp_path):
    path = tmp_path / "notes.txt"
    path.write_text("not a world")
    with pytest.raises(ValueError):
        WorldIO.load_world(str(path))
