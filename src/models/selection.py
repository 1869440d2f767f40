"""
Outcome of resolving a selected box into an item draft.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Union

from .inventory import ItemDraft


class UnresolvedReason(str, Enum):
    UNKNOWN_BOX = "unknown_box"
    NOT_FOUND = "not_found"
    CONNECTION_ERROR = "connection_error"


@dataclass(frozen=True)
class Resolved:
    draft: ItemDraft
    box_id: str

    @property
    def ok(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"status": "resolved", "box_id": self.box_id, "draft": self.draft.to_dict()}


@dataclass(frozen=True)
class Unresolved:
    reason: UnresolvedReason
    box_id: str
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "unresolved",
            "box_id": self.box_id,
            "reason": self.reason.value,
            "detail": self.detail,
        }


SelectionOutcome = Union[Resolved, Unresolved]
