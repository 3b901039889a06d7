"""
Configuration & Constants
=========================
This module serves as the central registry for global constants and asset paths.

Why is this file needed?
------------------------
1. Tuning: World extent, edit resolution and ledger capacity live in one place
   instead of being scattered as magic numbers through the mesh and CSG code.
2. Deployment: It handles the logic required by PyInstaller (sys._MEIPASS) to
   find assets (tool and item icons) when the game is frozen into an .exe.

Exports:
    WORLD_SIZE (int): Number of unit cells along each axis of the terrain.
    EDIT_RESOLUTION (float): Longest triangle edge allowed inside an edit region.
    DEFAULT_CAPACITY (float): Default inventory capacity.
    ASSETS_PATH (str): Absolute path to the assets directory.
"""
import sys
import os
from pathlib import Path


def get_resource_path(relative_path: str) -> str:
    """
    Get absolute path to resource, works for dev and for PyInstaller.
    """
    if hasattr(sys, '_MEIPASS'):
        # PyInstaller temp folder
        base_path: str = getattr(sys, '_MEIPASS')
        return os.path.join(base_path, relative_path)

    # Development mode: resolve relative to this file
    # config.py is in src/terrainedit/
    current_file_path: Path = Path(__file__)
    project_root: Path = current_file_path.parent.parent.parent
    return os.path.join(str(project_root), relative_path)


def icon_path(name: str) -> str:
    """Path of the icon for an item. The file is not required to exist."""
    return os.path.join(ICONS_PATH, f"{name.lower().replace(' ', '_')}.png")


# World
WORLD_SIZE: int = 100  # cells per axis, 2 triangles per cell
EDIT_RESOLUTION: float = 0.25  # max edge length of refined triangles [world units]
UP: tuple[float, float, float] = (0.0, 1.0, 0.0)

# Numerics
GEOMETRY_EPSILON: float = 1e-9
ROOT_TOLERANCE: float = 1e-10  # brentq xtol for boundary crossings

# Inventory
DEFAULT_CAPACITY: float = 1024.0

# Materials (0 = unspecified, never harvestable)
MATERIAL_UNSPECIFIED: int = 0
MATERIAL_WOOD: int = 1
MATERIAL_STONE: int = 2
MATERIAL_DIRT: int = 3

MATERIAL_NAMES: dict[int, str] = {
    MATERIAL_WOOD: "Wood",
    MATERIAL_STONE: "Stone",
    MATERIAL_DIRT: "Dirt",
}

# Assets
ASSETS_PATH: str = get_resource_path("assets")
ICONS_PATH: str = os.path.join(ASSETS_PATH, "icons")
