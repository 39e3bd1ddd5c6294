"""Pydantic models for declaration line / order item matching.

This module defines the data transfer objects produced by the
declaration matcher.
"""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class MatchSource(str, Enum):
    """Matcher tier that produced a pair.

    Tiers are tried in this order for every declaration line:
        - identifier: shared external id, product id or SKU
        - exact_name: normalized description equals normalized item name
        - fuzzy_name: token similarity at or above the fuzzy threshold
        - position: same index, only when both sides have equal counts
    """
    IDENTIFIER = "identifier"
    EXACT_NAME = "exact_name"
    FUZZY_NAME = "fuzzy_name"
    POSITION = "position"


class MatchCandidate(BaseModel):
    """A declaration line paired with an order item.

    Attributes:
        declaration_index: Index into the declaration line list
        item_index: Index into the order item list
        source: Matcher tier that produced the pair
        confidence: 0.0 - 1.0
    """

    declaration_index: int = Field(..., ge=0)
    item_index: int = Field(..., ge=0)
    source: MatchSource
    confidence: float = Field(..., ge=0, le=1)

    model_config = {
        "frozen": True,
        "json_schema_extra": {
            "example": {
                "declaration_index": 0,
                "item_index": 2,
                "source": "fuzzy_name",
                "confidence": 0.41,
            }
        },
    }


class MatchOutcome(BaseModel):
    """Exclusive pairing of declaration lines to order items.

    Attributes:
        pairs: Pairs in declaration order
        unmatched_declarations: Declaration indices without a counterpart
        unmatched_items: Item indices without a counterpart
    """

    pairs: List[MatchCandidate] = Field(default_factory=list)
    unmatched_declarations: List[int] = Field(default_factory=list)
    unmatched_items: List[int] = Field(default_factory=list)

    def item_for_declaration(self) -> Dict[int, MatchCandidate]:
        """Index pairs by declaration index."""
        return {p.declaration_index: p for p in self.pairs}

    def declaration_for_item(self) -> Dict[int, MatchCandidate]:
        """Index pairs by item index."""
        return {p.item_index: p for p in self.pairs}

    def pair_for_item(self, item_index: int) -> Optional[MatchCandidate]:
        """Pair that consumed the given item, if any."""
        return self.declaration_for_item().get(item_index)
