"""
Exceptions raised by the terrain editing core.
"""


class TerrainEditError(Exception):
    """Base class for all errors raised by terrainedit."""


class ValidationError(TerrainEditError, ValueError):
    """A Brush (or its wire form) violates a construction invariant."""


class MeshEditError(TerrainEditError):
    """A brush could not be applied; the mesh was left untouched."""


class BrushOutOfBoundsError(MeshEditError):
    """The brush influence volume lies entirely outside the world extent."""


class UnknownMaterialError(TerrainEditError, KeyError):
    """No resource item is registered for a material id."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the plain message
        return str(self.args[0]) if self.args else ""


class ToolNotEquippedError(TerrainEditError, RuntimeError):
    """A tool was clicked while not held by a player registered in a world."""


class InventoryInvariantError(TerrainEditError, AssertionError):
    """The capacity invariant of an inventory was broken. This is a defect."""
