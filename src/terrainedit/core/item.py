"""
Items
=====
Capability interface for everything a player can hold or store.

Classes:
    Item: Abstract base class (identity + click/hold hooks).
    ResourceItem: Harvested material; its only role is to be an inventory key.
    ItemRegistry: Lookup of items by id and of resources by material id.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Any, Dict, Iterator, Optional, TYPE_CHECKING

from terrainedit import config
from terrainedit.core.errors import UnknownMaterialError

if TYPE_CHECKING:
    from terrainedit.core.player import Player
    from terrainedit.geometry.primitives import Vertex

logger = logging.getLogger(__name__)

RESOURCE_ID_OFFSET = 1000


class Item(ABC):
    """
    Abstract base class for items. Identity is the stable integer id, which is
    also what gets serialized; two items with the same id are equal.
    """

    def __init__(self, name: str, item_id: int) -> None:
        self._name = name
        self._id = int(item_id)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name='{self._name}', id={self._id})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Item):
            return NotImplemented
        return self._id == other._id

    def __hash__(self) -> int:
        return hash(self._id)

    @property
    def name(self) -> str:
        return self._name

    @property
    def id(self) -> int:
        return self._id

    @property
    def image(self) -> str:
        """Opaque icon handle (a path). The core never opens it."""
        return config.icon_path(self._name)

    @abstractmethod
    def left_click(self, vertex: Vertex) -> Any:
        pass

    @abstractmethod
    def right_click(self, vertex: Vertex) -> Any:
        pass

    def left_hold(self, vertex: Vertex, seconds: float) -> Any:
        """Called repeatedly by the input layer while the button is held."""
        return None

    def right_hold(self, vertex: Vertex, seconds: float) -> Any:
        return None

    def on_equip(self, player: Player) -> None:
        """Hook invoked when a player takes the item in hand."""

    def on_unequip(self, player: Player) -> None:
        """Hook invoked when a player puts the item away."""


class ResourceItem(Item):
    """Collectible material. Clicking it does nothing."""

    def __init__(self, name: str, item_id: int, material_id: int) -> None:
        super().__init__(name=name, item_id=item_id)
        self.material_id = material_id

    def left_click(self, vertex: Vertex) -> None:
        return None

    def right_click(self, vertex: Vertex) -> None:
        return None


class ItemRegistry:
    """
    Maps item ids to items and material ids to the resource they yield.
    """

    def __init__(self) -> None:
        self._items: Dict[int, Item] = {}
        self._resources: Dict[int, ResourceItem] = {}

    @classmethod
    def default(cls) -> ItemRegistry:
        """Registry with one resource item per configured material."""
        registry = cls()
        for material_id, name in config.MATERIAL_NAMES.items():
            registry.register(ResourceItem(
                name=name,
                item_id=RESOURCE_ID_OFFSET + material_id,
                material_id=material_id,
            ))
        return registry

    def __iter__(self) -> Iterator[Item]:
        return iter(self._items.values())

    def __len__(self) -> int:
        return len(self._items)

    def register(self, item: Item) -> None:
        existing = self._items.get(item.id)
        if existing is not None and existing is not item:
            raise ValueError(f"Item id {item.id} already registered as {existing!r}")
        self._items[item.id] = item
        if isinstance(item, ResourceItem):
            self._resources[item.material_id] = item
        logger.debug(f"Registered {item!r}")

    def get(self, item_id: int) -> Optional[Item]:
        return self._items.get(item_id)

    def resource_for(self, material_id: int) -> ResourceItem:
        """
        Resource item harvested from a material.

        Raises:
            UnknownMaterialError: If no resource is registered for the material.
        """
        try:
            return self._resources[material_id]
        except KeyError:
            raise UnknownMaterialError(f"No resource item registered for material {material_id}") from None
