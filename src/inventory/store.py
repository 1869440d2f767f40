"""
In-memory inventory store with a LIFO undo-of-delete stack.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

from models.errors import DuplicateIdError, NotFoundError
from models.inventory import InventoryItem


class InventoryStore:
    """
    Authoritative list of kept items plus the delete stack.

    A live item is in exactly one of the kept list or the delete stack.
    The kept list preserves insertion order, which is also the display order.
    ``remove`` is the only path that pushes onto the stack; ``undo`` pops the
    most recently deleted item and appends it at the end of the kept list.

    All mutations hold the store lock, so a failed call leaves both lists
    untouched and readers only ever see complete updates.
    """

    def __init__(self, max_undo: Optional[int] = None):
        if max_undo is not None and max_undo < 0:
            raise ValueError("max_undo must be non-negative")
        self.max_undo = max_undo
        self._items: List[InventoryItem] = []
        # Top of the stack is the end of the list
        self._deleted: List[InventoryItem] = []
        self._lock = threading.RLock()

    def add(self, item: InventoryItem) -> None:
        """
        Append ``item`` to the kept list.

        Reusing the id of a deleted item permanently discards that delete-stack
        entry, so an id is never both kept and pending undo.
        """
        with self._lock:
            if self._index_of(item.id) is not None:
                raise DuplicateIdError(item.id)
            shadowed = [entry for entry in self._deleted if entry.id == item.id]
            if shadowed:
                self._deleted = [entry for entry in self._deleted if entry.id != item.id]
            self._items.append(item)
        for entry in shadowed:
            logging.warning(f"Inventory: discarding deleted entry {entry.name!r}; id {item.id} was added again")
        logging.info(f"Inventory: added {item.name!r} (id={item.id})")

    def remove(self, item_id: str) -> InventoryItem:
        """Move a kept item onto the delete stack and return it."""
        with self._lock:
            idx = self._index_of(item_id)
            if idx is None:
                raise NotFoundError(item_id)
            item = self._items.pop(idx)
            self._deleted.append(item)
            self._enforce_undo_limit()
        logging.info(f"Inventory: removed {item.name!r} (id={item_id})")
        return item

    def undo(self) -> Optional[str]:
        """
        Restore the most recently deleted item and return its name.

        Returns None when there is nothing to restore.
        """
        with self._lock:
            if not self._deleted:
                return None
            item = self._deleted.pop()
            self._items.append(item)
        logging.info(f"Inventory: restored {item.name!r} (id={item.id})")
        return item.name

    def has_pending(self) -> bool:
        """True if there is at least one deletion that can be undone."""
        with self._lock:
            return bool(self._deleted)

    def items(self) -> Tuple[InventoryItem, ...]:
        """Snapshot of kept items in display order."""
        with self._lock:
            return tuple(self._items)

    def deleted(self) -> Tuple[InventoryItem, ...]:
        """Snapshot of the delete stack, most recently deleted first."""
        with self._lock:
            return tuple(reversed(self._deleted))

    def get(self, item_id: str) -> Optional[InventoryItem]:
        with self._lock:
            idx = self._index_of(item_id)
            return self._items[idx] if idx is not None else None

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._deleted.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, item_id: object) -> bool:
        with self._lock:
            return any(item.id == item_id for item in self._items)

    def _index_of(self, item_id: str) -> Optional[int]:
        for idx, item in enumerate(self._items):
            if item.id == item_id:
                return idx
        return None

    def _enforce_undo_limit(self) -> None:
        if self.max_undo is None:
            return
        overflow = len(self._deleted) - self.max_undo
        if overflow > 0:
            dropped = self._deleted[:overflow]
            del self._deleted[:overflow]
            logging.debug(f"Inventory: undo history full, dropped {len(dropped)} oldest entries")
