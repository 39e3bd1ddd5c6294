"""Declaration reconciliation.

Merges classifier output for matched and unmatched order items into an
existing set of declaration lines:

- matched item, classification differs from its line -> line updated in place
- classified item without a line -> new line appended (unless an identical
  line is already present)
- unknown classification -> nothing happens

Lines are never removed; a merge that would shrink the declaration raises
IntegrityViolationError.
"""
from typing import Any, Dict, List, Optional, Sequence, Set

import structlog

from customs_engine.config import reconcile_settings
from customs_engine.errors import IntegrityViolationError
from customs_engine.models.classification import Classification
from customs_engine.models.matching import MatchCandidate
from customs_engine.models.reconciliation import Change, ChangeKind, ReconcileResult
from customs_engine.models.records import DeclarationLine, Item
from customs_engine.services.classification.codes import clean_code, codes_equal
from customs_engine.services.matching.similarity import normalize_name

logger = structlog.get_logger(__name__)

SKU_SUFFIX_TEMPLATE = "{description} - SKU {sku}"


class DeclarationReconciler:
    """Applies classifications to declaration lines without losing lines.

    Attributes:
        append_sku_to_description: Suffix descriptions with " - SKU <sku>"
        description_max_length: Truncation bound for suffixed descriptions
    """

    def __init__(
        self,
        append_sku_to_description: bool = reconcile_settings.append_sku_to_description,
        description_max_length: int = reconcile_settings.description_max_length,
    ):
        self.append_sku_to_description = append_sku_to_description
        self.description_max_length = description_max_length
        self._log = logger.bind(component="DeclarationReconciler")

    def reconcile(
        self,
        lines: Sequence[DeclarationLine],
        items: Sequence[Item],
        classifications: Sequence[Classification],
        pairs: Sequence[MatchCandidate],
    ) -> ReconcileResult:
        """Merge classifications into the declaration.

        Args:
            lines: Existing declaration lines (not modified)
            items: Order items
            classifications: One classification per item, same order
            pairs: Exclusive declaration/item pairs from the matcher

        Returns:
            ReconcileResult with the merged lines and the change diff

        Raises:
            IntegrityViolationError: Pairs are not exclusive or out of range,
                classifications do not line up with items, or the merge
                would drop lines
        """
        self._validate(lines, items, classifications, pairs)

        merged: List[DeclarationLine] = list(lines)
        diff: List[Change] = []
        paired_items: Set[int] = set()

        for pair in sorted(pairs, key=lambda p: p.declaration_index):
            paired_items.add(pair.item_index)
            classification = classifications[pair.item_index]
            if classification.is_unknown:
                continue

            item = items[pair.item_index]
            line = merged[pair.declaration_index]
            update = self._line_update(line, item, classification)
            if not update:
                continue

            merged[pair.declaration_index] = line.model_copy(update=update)
            change = Change(
                index=pair.declaration_index,
                kind=ChangeKind.UPDATED,
                item_index=pair.item_index,
                before={name: getattr(line, name) for name in update},
                after=update,
            )
            diff.append(change)
            self._log.debug(
                "line_updated",
                index=pair.declaration_index,
                item_index=pair.item_index,
                fields=sorted(update),
            )

        for item_index, item in enumerate(items):
            if item_index in paired_items:
                continue
            classification = classifications[item_index]
            if classification.is_unknown:
                continue

            new_line = self._new_line(item, classification)
            if self._has_duplicate(merged, new_line):
                self._log.debug(
                    "line_append_suppressed",
                    item_index=item_index,
                    description=new_line.description[:50],
                )
                continue

            merged.append(new_line)
            diff.append(Change(
                index=len(merged) - 1,
                kind=ChangeKind.APPENDED,
                item_index=item_index,
                after=new_line.model_dump(exclude_none=True),
            ))
            self._log.debug(
                "line_appended",
                index=len(merged) - 1,
                item_index=item_index,
                description=new_line.description[:50],
            )

        if len(merged) < len(lines):
            self._log.error("declaration_shrunk", before=len(lines), after=len(merged))
            raise IntegrityViolationError(
                f"Declaration lines would decrease ({len(merged)} < {len(lines)})",
                details={"before": len(lines), "after": len(merged)},
            )

        self._log.info(
            "reconcile_completed",
            lines=len(lines),
            merged=len(merged),
            updated=sum(1 for c in diff if c.kind == ChangeKind.UPDATED),
            appended=sum(1 for c in diff if c.kind == ChangeKind.APPENDED),
        )
        return ReconcileResult(merged=merged, diff=diff)

    def format_description(self, description: str, sku: Optional[str]) -> str:
        """Customs description, optionally suffixed with the item SKU."""
        if not self.append_sku_to_description or not sku:
            return description
        out = SKU_SUFFIX_TEMPLATE.format(description=description, sku=sku)
        return out[: self.description_max_length]

    def _line_update(
        self,
        line: DeclarationLine,
        item: Item,
        classification: Classification,
    ) -> Dict[str, Any]:
        update: Dict[str, Any] = {}
        if classification.description:
            description = self.format_description(classification.description, item.sku)
            if line.description != description:
                update["description"] = description
        if classification.code and not codes_equal(line.code, classification.code):
            update["code"] = clean_code(classification.code)
        if classification.origin_country and line.origin_country != classification.origin_country:
            update["origin_country"] = classification.origin_country

        # fill identifiers the line lacks
        if update:
            if not line.external_id and item.external_id:
                update["external_id"] = item.external_id
            if not line.product_id and item.product_id:
                update["product_id"] = item.product_id
        return update

    def _new_line(self, item: Item, classification: Classification) -> DeclarationLine:
        return DeclarationLine(
            description=self.format_description(classification.description or item.name, item.sku),
            code=classification.code,
            quantity=item.quantity,
            value=item.line_value,
            origin_country=classification.origin_country,
            sku=item.sku,
            external_id=item.external_id,
            product_id=item.product_id,
        )

    @staticmethod
    def _has_duplicate(lines: Sequence[DeclarationLine], candidate: DeclarationLine) -> bool:
        description = normalize_name(candidate.description)
        return any(
            normalize_name(line.description) == description
            and codes_equal(line.code, candidate.code)
            and (line.origin_country or "") == (candidate.origin_country or "")
            and line.value == candidate.value
            and line.quantity == candidate.quantity
            for line in lines
        )

    def _validate(
        self,
        lines: Sequence[DeclarationLine],
        items: Sequence[Item],
        classifications: Sequence[Classification],
        pairs: Sequence[MatchCandidate],
    ) -> None:
        if len(classifications) != len(items):
            raise IntegrityViolationError(
                "Expected one classification per item",
                details={"items": len(items), "classifications": len(classifications)},
            )

        seen_declarations: Set[int] = set()
        seen_items: Set[int] = set()
        for pair in pairs:
            if pair.declaration_index >= len(lines) or pair.item_index >= len(items):
                self._log.error(
                    "pair_out_of_range",
                    declaration_index=pair.declaration_index,
                    item_index=pair.item_index,
                )
                raise IntegrityViolationError(
                    "Pair refers to a line or item that does not exist",
                    details={
                        "declaration_index": pair.declaration_index,
                        "item_index": pair.item_index,
                    },
                )
            if pair.declaration_index in seen_declarations or pair.item_index in seen_items:
                self._log.error(
                    "pair_not_exclusive",
                    declaration_index=pair.declaration_index,
                    item_index=pair.item_index,
                )
                raise IntegrityViolationError(
                    "Pairs assign a line or item more than once",
                    details={
                        "declaration_index": pair.declaration_index,
                        "item_index": pair.item_index,
                    },
                )
            seen_declarations.add(pair.declaration_index)
            seen_items.add(pair.item_index)
