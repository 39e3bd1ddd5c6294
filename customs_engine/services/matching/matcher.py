"""Declaration line / order item matching.

Pairs each declaration line with at most one order item of the same order.
Tiers, tried per declaration line in input order against items not yet
consumed:

1. identifier: external id, then product id, then SKU (case-insensitive)
2. exact_name: normalized description == normalized item name
3. fuzzy_name: best token similarity >= fuzzy_threshold (ties -> lowest index)
4. position: same index, only when both sides have the same count

Example:
    matcher = DeclarationMatcher()
    outcome = matcher.match(lines, items)
    for pair in outcome.pairs:
        print(pair.declaration_index, pair.item_index, pair.source)
"""
from typing import Callable, List, Optional, Sequence, Set, Tuple

import structlog

from customs_engine.config import matching_settings
from customs_engine.errors import IntegrityViolationError
from customs_engine.models.matching import MatchCandidate, MatchOutcome, MatchSource
from customs_engine.models.records import DeclarationLine, Item
from customs_engine.services.matching.similarity import normalize_name, score_names

logger = structlog.get_logger(__name__)

_IDENTIFIER_FIELDS: Tuple[Tuple[str, Callable[[str], str]], ...] = (
    ("external_id", str),
    ("product_id", str),
    ("sku", str.lower),
)


class _Consumption:
    """Indices already used on each side of one match() call."""

    def __init__(self) -> None:
        self.declarations: Set[int] = set()
        self.items: Set[int] = set()

    def take(self, declaration_index: int, item_index: int) -> None:
        if declaration_index in self.declarations or item_index in self.items:
            logger.error(
                "double_assignment",
                declaration_index=declaration_index,
                item_index=item_index,
            )
            raise IntegrityViolationError(
                "Matcher attempted to assign an index twice",
                details={
                    "declaration_index": declaration_index,
                    "item_index": item_index,
                },
            )
        self.declarations.add(declaration_index)
        self.items.add(item_index)


class DeclarationMatcher:
    """Multi-tier exclusive matcher.

    Attributes:
        fuzzy_threshold: Minimum similarity for the fuzzy_name tier
        use_position: Whether the positional fallback tier is enabled
    """

    def __init__(
        self,
        fuzzy_threshold: float = matching_settings.fuzzy_threshold,
        use_position: bool = True,
    ):
        """Initialize matcher.

        Args:
            fuzzy_threshold: Minimum similarity (0-1) to accept a fuzzy pair
            use_position: Enable the index-aligned last-resort tier
        """
        if not 0.0 <= fuzzy_threshold <= 1.0:
            raise ValueError(f"fuzzy_threshold must be in [0, 1], got {fuzzy_threshold}")
        self.fuzzy_threshold = fuzzy_threshold
        self.use_position = use_position
        self._log = logger.bind(component="DeclarationMatcher")

    def match(
        self,
        lines: Sequence[DeclarationLine],
        items: Sequence[Item],
    ) -> MatchOutcome:
        """Pair declaration lines with order items.

        Args:
            lines: Declaration lines of one order
            items: Order items of the same order

        Returns:
            MatchOutcome with pairs in declaration order and the unmatched
            residue on both sides

        Raises:
            IntegrityViolationError: An index would be consumed twice
        """
        consumed = _Consumption()
        pairs: List[MatchCandidate] = []
        item_names = [normalize_name(item.name) for item in items]
        same_count = len(lines) == len(items)

        for d_idx, line in enumerate(lines):
            candidate = (
                self._by_identifier(d_idx, line, items, consumed)
                or self._by_exact_name(d_idx, line, item_names, consumed)
                or self._by_fuzzy_name(d_idx, line, items, consumed)
            )
            if candidate is None and self.use_position and same_count:
                candidate = self._by_position(d_idx, line, items, consumed)

            if candidate is None:
                self._log.debug(
                    "declaration_unmatched",
                    declaration_index=d_idx,
                    description=line.description[:50],
                )
                continue

            consumed.take(candidate.declaration_index, candidate.item_index)
            pairs.append(candidate)
            self._log.debug(
                "pair_found",
                declaration_index=d_idx,
                item_index=candidate.item_index,
                source=candidate.source.value,
                confidence=round(candidate.confidence, 4),
            )

        outcome = MatchOutcome(
            pairs=pairs,
            unmatched_declarations=[i for i in range(len(lines)) if i not in consumed.declarations],
            unmatched_items=[i for i in range(len(items)) if i not in consumed.items],
        )
        self._log.info(
            "match_completed",
            declarations=len(lines),
            items=len(items),
            pairs=len(pairs),
            unmatched_declarations=len(outcome.unmatched_declarations),
            unmatched_items=len(outcome.unmatched_items),
        )
        return outcome

    def _by_identifier(
        self,
        d_idx: int,
        line: DeclarationLine,
        items: Sequence[Item],
        consumed: _Consumption,
    ) -> Optional[MatchCandidate]:
        for field_name, canonical in _IDENTIFIER_FIELDS:
            value = getattr(line, field_name)
            if not value:
                continue
            wanted = canonical(value)
            for i_idx, item in enumerate(items):
                if i_idx in consumed.items:
                    continue
                other = getattr(item, field_name)
                if other and canonical(other) == wanted:
                    return MatchCandidate(
                        declaration_index=d_idx,
                        item_index=i_idx,
                        source=MatchSource.IDENTIFIER,
                        confidence=1.0,
                    )
        return None

    def _by_exact_name(
        self,
        d_idx: int,
        line: DeclarationLine,
        item_names: Sequence[str],
        consumed: _Consumption,
    ) -> Optional[MatchCandidate]:
        description = normalize_name(line.description)
        if not description:
            return None
        for i_idx, name in enumerate(item_names):
            if i_idx not in consumed.items and name == description:
                return MatchCandidate(
                    declaration_index=d_idx,
                    item_index=i_idx,
                    source=MatchSource.EXACT_NAME,
                    confidence=1.0,
                )
        return None

    def _by_fuzzy_name(
        self,
        d_idx: int,
        line: DeclarationLine,
        items: Sequence[Item],
        consumed: _Consumption,
    ) -> Optional[MatchCandidate]:
        best_index: Optional[int] = None
        best_score = -1.0
        for i_idx, item in enumerate(items):
            if i_idx in consumed.items:
                continue
            score = score_names(line.description, item.name).score
            # strict > keeps the lowest index on ties
            if score > best_score:
                best_index, best_score = i_idx, score

        if best_index is None or best_score < self.fuzzy_threshold:
            return None
        return MatchCandidate(
            declaration_index=d_idx,
            item_index=best_index,
            source=MatchSource.FUZZY_NAME,
            confidence=best_score,
        )

    def _by_position(
        self,
        d_idx: int,
        line: DeclarationLine,
        items: Sequence[Item],
        consumed: _Consumption,
    ) -> Optional[MatchCandidate]:
        if d_idx >= len(items) or d_idx in consumed.items:
            return None
        return MatchCandidate(
            declaration_index=d_idx,
            item_index=d_idx,
            source=MatchSource.POSITION,
            confidence=score_names(line.description, items[d_idx].name).score,
        )
