"""Pydantic models for missing-SKU resolution against a product directory."""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from customs_engine.models.records import Item


class ResolutionSource(str, Enum):
    """Where an item's SKU came from."""
    KEPT = "kept"
    PRODUCT_ID = "product_id"
    EXACT_NAME = "exact_name"
    FUZZY_NAME = "fuzzy_name"
    MISSING = "missing"


class SkuResolution(BaseModel):
    """Resolution outcome for one order item.

    Attributes:
        index: Position of the item in the input list
        item_name: Item title
        before: SKU the item arrived with
        after: SKU after resolution (None when still missing)
        source: Lookup that produced the SKU
        matched_name: Directory product name the SKU was taken from
        confidence: 1.0 for id/exact hits, similarity score for fuzzy hits
    """

    index: int = Field(..., ge=0)
    item_name: str = ""
    before: Optional[str] = None
    after: Optional[str] = None
    source: ResolutionSource
    matched_name: Optional[str] = None
    confidence: Optional[float] = Field(default=None, ge=0, le=1)

    @property
    def changed(self) -> bool:
        """Returns True if resolution filled a SKU."""
        return self.after is not None and self.after != self.before


class SkuResolutionResult(BaseModel):
    """Items with resolved SKUs plus one resolution entry per item."""

    items: List[Item] = Field(default_factory=list)
    resolutions: List[SkuResolution] = Field(default_factory=list)

    @property
    def resolved_count(self) -> int:
        """Number of items that received a SKU."""
        return sum(1 for r in self.resolutions if r.changed)
