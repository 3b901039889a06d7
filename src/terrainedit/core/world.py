"""
World (Mesh Store & Brush Interpreter)
======================================
The World owns the terrain mesh and the player registry. It is the only
component that interprets brushes.

Why is this file needed?
------------------------
1. Transactions: ``apply`` computes the complete edit first and swaps the mesh
   in one step under a global lock, or raises without mutating anything.
2. Accounting: ``interact`` turns the material yield of an edit into deposits
   on the acting player's inventory, strictly after the mesh mutation. An
   accounting failure never rolls back geometry.

Classes:
    MeshDelta: Triangles removed from and added to the mesh by one edit.
    EditResult: Material deltas plus mesh delta of one applied brush.
    InteractionOutcome: An EditResult plus what was deposited.
    World: The mesh and player owner.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
import threading
from typing import Dict, List, Optional, TYPE_CHECKING

import numpy as np

from terrainedit import config
from terrainedit.core.csg import CsgSolver
from terrainedit.core.errors import BrushOutOfBoundsError, MeshEditError, UnknownMaterialError
from terrainedit.core.item import ItemRegistry
from terrainedit.core.mesh import TerrainMesh
from terrainedit.edit.brush import Operation
from terrainedit.edit.volumes import volume_for_brush

if TYPE_CHECKING:
    import numpy.typing as npt
    from terrainedit.core.player import Player
    from terrainedit.edit.brush import Brush
    from terrainedit.geometry.primitives import Triangle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeshDelta:
    removed: List[Triangle] = field(default_factory=list)
    added: List[Triangle] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.removed or self.added)

    def __len__(self) -> int:
        return len(self.removed) + len(self.added)


@dataclass(frozen=True)
class EditResult:
    """
    ``material_delta`` maps material id to signed yield (volume x energy):
    positive when material was harvested (SUB), negative when it was
    consumed (ADD).
    """
    material_delta: Dict[int, float] = field(default_factory=dict)
    mesh_delta: MeshDelta = field(default_factory=MeshDelta)
    volume: float = 0.0

    @property
    def is_empty(self) -> bool:
        return not self.mesh_delta


@dataclass
class InteractionOutcome:
    edit: Optional[EditResult] = None
    deposited: Dict[int, float] = field(default_factory=dict)
    failures: Dict[int, str] = field(default_factory=dict)
    error: Optional[str] = None

    @property
    def applied(self) -> bool:
        return self.edit is not None


class World:
    def __init__(
        self,
        size: int = config.WORLD_SIZE,
        resolution: float = config.EDIT_RESOLUTION,
        registry: Optional[ItemRegistry] = None,
        mesh: Optional[TerrainMesh] = None,
    ) -> None:
        """
        Initialize the world with a flat terrain.

        Args:
            size: Number of unit cells along each horizontal axis.
            resolution: Longest triangle edge inside an edited region.
            registry: Items known to the world; defaults to one resource per material.
            mesh: Existing terrain (e.g. a loaded snapshot) instead of the flat plane.
        """
        if resolution <= 0:
            raise ValueError(f"Resolution must be positive, got {resolution}")
        self.size = size
        self.resolution = resolution
        self.registry = registry if registry is not None else ItemRegistry.default()
        self.mesh = mesh if mesh is not None else TerrainMesh.flat(size)

        half = size / 2.0
        self.extent_min = np.array([-half, -half])  # (x, z)
        self.extent_max = np.array([half, half])

        self._lock = threading.RLock()
        self._players: Dict[str, Player] = {}
        logger.info(f"World created: {size}x{size} cells, {len(self.mesh)} triangles.")

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(size={self.size}, triangles={self.triangle_count}, players={len(self._players)})"

    # ---------------------------------------------------------------
    # Mesh access
    # ---------------------------------------------------------------

    @property
    def triangles(self) -> list[Triangle]:
        with self._lock:
            return self.mesh.triangles

    @property
    def triangle_count(self) -> int:
        return len(self.mesh)

    @property
    def bounds(self) -> tuple[npt.NDArray[np.float64], npt.NDArray[np.float64]]:
        with self._lock:
            return self.mesh.bounds

    # ---------------------------------------------------------------
    # Players
    # ---------------------------------------------------------------

    @property
    def players(self) -> list[Player]:
        with self._lock:
            return list(self._players.values())

    def add_player(self, player: Player) -> None:
        with self._lock:
            if player.name in self._players:
                raise ValueError(f"Player '{player.name}' is already in the world")
            self._players[player.name] = player
            player.world = self
        logger.info(f"Player '{player.name}' joined.")

    def remove_player(self, player: Player) -> None:
        with self._lock:
            if self._players.get(player.name) is not player:
                raise ValueError(f"Player '{player.name}' is not in the world")
            del self._players[player.name]
            player.world = None
        logger.info(f"Player '{player.name}' left.")

    def get_player(self, name: str) -> Optional[Player]:
        with self._lock:
            return self._players.get(name)

    # ---------------------------------------------------------------
    # Editing
    # ---------------------------------------------------------------

    def apply(self, brush: Brush) -> EditResult:
        """
        Interpret ``brush`` as a CSG operation on the terrain.

        Either the full edit is committed and both deltas are returned, or the
        mesh is left untouched and ``MeshEditError`` is raised.

        Raises:
            BrushOutOfBoundsError: The brush lies entirely outside the world extent.
            MeshEditError: No consistent re-triangulation could be computed.
        """
        volume = volume_for_brush(brush)
        lo, hi = volume.bounds()
        horizontal_lo, horizontal_hi = lo[[0, 2]], hi[[0, 2]]
        if np.any(horizontal_hi < self.extent_min) or np.any(horizontal_lo > self.extent_max):
            msg = f"Brush at {brush.center} is outside the world extent"
            logger.warning(msg)
            raise BrushOutOfBoundsError(msg)

        with self._lock:
            solver = CsgSolver(volume, brush.operation, resolution=self.resolution)
            try:
                carve = solver.solve(self.mesh)
                new_vertices = self.mesh.spliced(carve.replacements) if not carve.is_empty else None
            except (ValueError, RuntimeError, FloatingPointError) as e:
                logger.error(f"Failed to apply {brush}: {e}")
                raise MeshEditError(f"Could not re-triangulate around {brush.center}: {e}") from e

            if carve.is_empty:
                logger.debug(f"Brush at {brush.center} touched no triangle.")
                return EditResult(material_delta={brush.material_id: 0.0})

            if not np.all(np.isfinite(new_vertices)) or not np.isfinite(carve.volume):
                msg = f"Non-finite geometry while applying brush at {brush.center}"
                logger.error(msg)
                raise MeshEditError(msg)

            mesh_delta = MeshDelta(
                removed=self.mesh.triangles_at(carve.removed_indices),
                added=TerrainMesh(carve.added).triangles,
            )
            # commit: single assignment
            self.mesh.vertices = new_vertices

        material_yield = carve.volume * brush.energy
        if brush.operation == Operation.ADD:
            material_yield = -material_yield
        logger.debug(
            f"Applied {brush.operation.name} {brush.shape.name} at {brush.center}: "
            f"-{len(mesh_delta.removed)}/+{len(mesh_delta.added)} triangles, yield {material_yield:.6f}"
        )
        return EditResult(
            material_delta={brush.material_id: material_yield},
            mesh_delta=mesh_delta,
            volume=carve.volume,
        )

    def interact(self, player: Player, brush: Brush) -> InteractionOutcome:
        """
        Apply ``brush`` on behalf of ``player`` and settle the material yield
        with the player's inventory.

        Harvested material is added; consumed material is removed. Material 0
        is never deposited. Deposit problems are recorded on the outcome and
        logged; the mesh edit stands regardless.
        """
        if self.get_player(player.name) is not player:
            raise ValueError(f"Player '{player.name}' is not in the world")

        try:
            edit = self.apply(brush)
        except MeshEditError as e:
            logger.info(f"Ignored interaction of '{player.name}': {e}")
            return InteractionOutcome(error=str(e))

        outcome = InteractionOutcome(edit=edit)
        for material_id, amount in edit.material_delta.items():
            if material_id == config.MATERIAL_UNSPECIFIED or amount == 0.0:
                continue
            try:
                item = self.registry.resource_for(material_id)
            except UnknownMaterialError as e:
                logger.warning(f"No deposit for '{player.name}': {e}")
                outcome.failures[material_id] = str(e)
                continue

            if amount > 0.0:
                outcome.deposited[material_id] = player.inventory.add_item(item, amount)
            elif player.inventory.remove_item(item, -amount):
                outcome.deposited[material_id] = amount
            else:
                msg = f"Insufficient {item.name}: needed {-amount:.4f}"
                logger.info(f"'{player.name}': {msg}")
                outcome.failures[material_id] = msg
        return outcome
