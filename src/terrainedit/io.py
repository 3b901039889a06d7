"""
Input/Output Manager (HDF5)
Handles saving and loading World snapshots (terrain + player inventories) to .h5 files.
"""
import logging
from typing import Optional
from importlib.metadata import version, PackageNotFoundError

import h5py
import numpy as np

from terrainedit.core.item import ItemRegistry
from terrainedit.core.mesh import TerrainMesh
from terrainedit.core.player import Player
from terrainedit.core.world import World
from terrainedit.geometry.primitives import Vertex

# Get module logger
logger = logging.getLogger(__name__)

try:
    APP_VERSION = version("terrainedit")
except PackageNotFoundError:
    APP_VERSION = "0.0.0-dev"


class WorldIO:
    @staticmethod
    def save_world(world: World, filepath: str) -> None:
        logger.info(f"Saving world to: {filepath}")
        try:
            with h5py.File(filepath, "w") as f:
                f.attrs["version"] = APP_VERSION
                f.attrs["size"] = world.size
                f.attrs["resolution"] = world.resolution

                # --- 1. SAVE TERRAIN ---
                grp_terrain = f.create_group("terrain")
                grp_terrain.create_dataset("triangles", data=world.mesh.vertices, compression="gzip")

                # --- 2. SAVE PLAYERS ---
                grp_players = f.create_group("players")
                for player in world.players:
                    grp = grp_players.create_group(player.name)
                    grp.attrs["position"] = np.array(list(player.position))
                    grp.attrs["facing"] = np.array(list(player.facing))

                    ledger = player.inventory.to_dict()
                    grp.attrs["capacity"] = ledger["capacity"]
                    item_ids = np.array(list(ledger["items"].keys()), dtype=np.int64)
                    amounts = np.array(list(ledger["items"].values()), dtype=np.float64)
                    grp.create_dataset("item_ids", data=item_ids)
                    grp.create_dataset("amounts", data=amounts)

            logger.info(f"World saved to: {filepath}")

        except Exception as e:
            logger.exception(f"Failed to save world: {e}")
            raise

    @staticmethod
    def load_world(filepath: str, registry: Optional[ItemRegistry] = None) -> World:
        logger.info(f"Loading world from: {filepath}")
        if not h5py.is_hdf5(filepath):
            msg = f"File '{filepath}' is not a valid HDF5 file."
            logger.error(msg)
            raise ValueError(msg)

        with h5py.File(filepath, "r") as f:
            triangles = f["terrain"]["triangles"][:] if "terrain" in f else None
            world = World(
                size=int(f.attrs["size"]),
                resolution=float(f.attrs["resolution"]),
                registry=registry,
                mesh=TerrainMesh(triangles) if triangles is not None else None,
            )

            if "players" in f:
                for name, grp in f["players"].items():
                    player = Player(
                        name=name,
                        position=Vertex.from_array(grp.attrs["position"]),
                        facing=Vertex.from_array(grp.attrs["facing"]),
                        capacity=float(grp.attrs["capacity"]),
                    )
                    for item_id, amount in zip(grp["item_ids"][:], grp["amounts"][:]):
                        item = world.registry.get(int(item_id))
                        if item is None:
                            logger.warning(f"Unknown item id {item_id} in inventory of '{name}', skipped.")
                            continue
                        player.inventory.add_item(item, float(amount))
                    world.add_player(player)

        logger.info(f"World loaded: {world!r}")
        return world
