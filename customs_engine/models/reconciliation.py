"""Pydantic models for reconciliation results."""
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from customs_engine.models.matching import MatchSource
from customs_engine.models.records import DeclarationLine


class ChangeKind(str, Enum):
    """What the reconciler did to a declaration line."""
    UPDATED = "updated"
    APPENDED = "appended"


class Change(BaseModel):
    """One entry of the reconciliation diff.

    Attributes:
        index: Position of the line in the merged output
        kind: Updated in place or appended
        item_index: Order item that drove the change
        before: Changed fields before (empty for appended lines)
        after: Changed fields after
    """

    index: int = Field(..., ge=0)
    kind: ChangeKind
    item_index: int = Field(..., ge=0)
    before: Dict[str, Any] = Field(default_factory=dict)
    after: Dict[str, Any] = Field(default_factory=dict)


class ReconcileResult(BaseModel):
    """Merged declaration lines plus the diff that produced them."""

    merged: List[DeclarationLine] = Field(default_factory=list)
    diff: List[Change] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        """Returns True if anything was updated or appended."""
        return bool(self.diff)


class SkuSyncStatus(str, Enum):
    """Outcome of copying an item SKU onto a declaration line."""
    KEPT = "kept"
    FILLED = "filled"
    MISSING = "missing"


class SkuSyncEntry(BaseModel):
    """Plan entry for one declaration line."""

    index: int = Field(..., ge=0)
    description: str = ""
    before: Optional[str] = None
    after: Optional[str] = None
    status: SkuSyncStatus
    source: Optional[MatchSource] = None
    item_index: Optional[int] = None
    matched_name: Optional[str] = None
    confidence: Optional[float] = None


class SkuSyncResult(BaseModel):
    """Declaration lines with SKUs filled from their paired items."""

    lines: List[DeclarationLine] = Field(default_factory=list)
    plan: List[SkuSyncEntry] = Field(default_factory=list)
