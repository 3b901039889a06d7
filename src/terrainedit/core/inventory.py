"""
Inventory Ledger
================
Per-player mapping Item -> quantity with a capacity ceiling.

The capacity invariant (sum of quantities <= capacity) is enforced by every
mutating call: deposits are clamped to the remaining room and the excess is
dropped, there is no overflow storage. All mutations of one inventory are
serialized by its own lock; different inventories never coordinate.
"""
from __future__ import annotations

import logging
import math
import threading
from typing import Dict, Any, TYPE_CHECKING

from terrainedit import config
from terrainedit.core.errors import InventoryInvariantError

if TYPE_CHECKING:
    from terrainedit.core.item import Item

logger = logging.getLogger(__name__)

# relative slack for float round-off when re-checking the invariant
INVARIANT_TOLERANCE = 1e-9


def _check_amount(amt: float) -> float:
    amt = float(amt)
    if not math.isfinite(amt) or amt < 0:
        raise ValueError(f"Amount must be a finite non-negative number, got {amt}")
    return amt


class Inventory:
    def __init__(self, capacity: float = config.DEFAULT_CAPACITY) -> None:
        """
        Initialize an empty inventory.

        Args:
            capacity: Upper bound for the sum of all quantities.
        """
        self._lock = threading.Lock()
        self._quantities: Dict[Item, float] = {}
        self._capacity = _check_amount(capacity)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(total={self.total}, capacity={self._capacity})"

    def __contains__(self, item: Item) -> bool:
        return item in self._quantities

    def __len__(self) -> int:
        return len(self._quantities)

    @property
    def capacity(self) -> float:
        return self._capacity

    @capacity.setter
    def capacity(self, value: float) -> None:
        value = _check_amount(value)
        with self._lock:
            total = self._total()
            if value < total:
                raise ValueError(f"Capacity {value} is below the stored total {total}")
            self._capacity = value

    @property
    def total(self) -> float:
        with self._lock:
            return self._total()

    def _total(self) -> float:
        return math.fsum(self._quantities.values())

    def items(self) -> Dict[Item, float]:
        """Snapshot of the ledger."""
        with self._lock:
            return dict(self._quantities)

    def get_amt_of_item(self, item: Item) -> float:
        """Stored quantity of ``item``; 0.0 if it was never deposited."""
        with self._lock:
            return self._quantities.get(item, 0.0)

    def add_item(self, item: Item, amt: float) -> float:
        """
        Deposit up to ``amt`` of ``item``.

        Args:
            item: The item to store.
            amt: Requested amount (>= 0).

        Returns:
            The amount actually stored, min(amt, capacity - total).
        """
        amt = _check_amount(amt)
        with self._lock:
            room = max(self._capacity - self._total(), 0.0)
            stored = min(amt, room)
            self._quantities[item] = self._quantities.get(item, 0.0) + stored
            self._check_invariant()
        if stored < amt:
            logger.debug(f"Inventory full: dropped {amt - stored} of {item.name}")
        return stored

    def remove_item(self, item: Item, amt: float) -> bool:
        """
        Withdraw exactly ``amt`` of ``item``.

        Returns:
            False (and nothing changes) if less than ``amt`` is stored,
            True otherwise.
        """
        amt = _check_amount(amt)
        with self._lock:
            current = self._quantities.get(item, 0.0)
            if current < amt:
                return False
            if item in self._quantities:
                self._quantities[item] = current - amt
            self._check_invariant()
        return True

    def _check_invariant(self) -> None:
        total = self._total()
        if total > self._capacity * (1.0 + INVARIANT_TOLERANCE) + INVARIANT_TOLERANCE:
            raise InventoryInvariantError(
                f"Inventory total {total} exceeds capacity {self._capacity}"
            )

    def to_dict(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "capacity": self._capacity,
                "items": {item.id: amount for item, amount in self._quantities.items()},
            }
