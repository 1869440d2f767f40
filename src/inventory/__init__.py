"""
Inventory state for the current session (in memory only).
"""

from .store import InventoryStore

__all__ = ["InventoryStore"]
