"""Copy item SKUs onto declaration lines that lack one."""
from typing import Any, Dict, List, Sequence

import structlog

from customs_engine.models.matching import MatchOutcome
from customs_engine.models.reconciliation import SkuSyncEntry, SkuSyncResult, SkuSyncStatus
from customs_engine.models.records import DeclarationLine, Item

logger = structlog.get_logger(__name__)


def sync_line_skus(
    lines: Sequence[DeclarationLine],
    items: Sequence[Item],
    outcome: MatchOutcome,
) -> SkuSyncResult:
    """Fill declaration line SKUs from their paired items.

    A line that already carries a SKU keeps it. A line paired with an item
    that has a SKU gets that SKU, plus the item's external/product id where
    the line has none. Everything else is reported as missing.

    Args:
        lines: Declaration lines (not modified)
        items: Order items
        outcome: Matcher outcome for the same lines and items

    Returns:
        SkuSyncResult with patched lines and one plan entry per line
    """
    by_declaration = outcome.item_for_declaration()
    patched: List[DeclarationLine] = []
    plan: List[SkuSyncEntry] = []

    for index, line in enumerate(lines):
        pair = by_declaration.get(index)
        item = items[pair.item_index] if pair is not None else None
        update: Dict[str, Any] = {}

        if line.sku:
            status = SkuSyncStatus.KEPT
        elif item is not None and item.sku:
            status = SkuSyncStatus.FILLED
            update["sku"] = item.sku
            if not line.external_id and item.external_id:
                update["external_id"] = item.external_id
            if not line.product_id and item.product_id:
                update["product_id"] = item.product_id
        else:
            status = SkuSyncStatus.MISSING

        new_line = line.model_copy(update=update) if update else line
        patched.append(new_line)
        plan.append(SkuSyncEntry(
            index=index,
            description=line.description,
            before=line.sku,
            after=new_line.sku,
            status=status,
            source=pair.source if pair is not None else None,
            item_index=pair.item_index if pair is not None else None,
            matched_name=item.name if item is not None else None,
            confidence=round(pair.confidence, 2) if pair is not None else None,
        ))

    logger.debug(
        "sku_sync_completed",
        lines=len(lines),
        filled=sum(1 for e in plan if e.status == SkuSyncStatus.FILLED),
        missing=sum(1 for e in plan if e.status == SkuSyncStatus.MISSING),
    )
    return SkuSyncResult(lines=patched, plan=plan)
