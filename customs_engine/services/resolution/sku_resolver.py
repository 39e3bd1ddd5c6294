"""Fill missing order item SKUs from a product directory.

Lookup order per item without a SKU:
1. product id via ProductDirectory.lookup_by_id
2. directory search by name, exact normalized name
3. directory search over name variants, best similarity score
   (accepted >= accept_threshold, search stops once a variant reaches
   early_stop)

Items are resolved concurrently. A failing directory call is logged and
the item moves on to the next lookup; it never fails the batch.
"""
import asyncio
from typing import Dict, List, Optional, Sequence, Tuple

import structlog

from customs_engine.config import matching_settings
from customs_engine.errors import ProductDirectoryError
from customs_engine.models.records import Item
from customs_engine.models.resolution import (
    ResolutionSource,
    SkuResolution,
    SkuResolutionResult,
)
from customs_engine.services.matching.similarity import (
    name_variants,
    normalize_name,
    score_names,
)
from customs_engine.services.resolution.ports import ProductDirectory

logger = structlog.get_logger(__name__)


async def resolve_missing_skus(
    items: Sequence[Item],
    directory: ProductDirectory,
    accept_threshold: float = matching_settings.resolve_accept_threshold,
    early_stop: float = matching_settings.resolve_early_stop,
) -> SkuResolutionResult:
    """Resolve SKUs for items that arrived without one.

    Args:
        items: Order items (not modified)
        directory: Product directory collaborator
        accept_threshold: Minimum similarity for a fuzzy-name hit
        early_stop: Similarity at which variant search stops

    Returns:
        SkuResolutionResult with patched items and one entry per item
    """
    log = logger.bind(item_count=len(items))
    log.info("resolving_missing_skus")

    resolutions = await asyncio.gather(*(
        _resolve_one(index, item, directory, accept_threshold, early_stop)
        for index, item in enumerate(items)
    ))

    patched: List[Item] = []
    for item, resolution in zip(items, resolutions):
        if resolution.changed:
            patched.append(item.model_copy(update={"sku": resolution.after}))
        else:
            patched.append(item)

    result = SkuResolutionResult(items=patched, resolutions=list(resolutions))
    log.info(
        "missing_skus_resolved",
        resolved=result.resolved_count,
        missing=sum(1 for r in resolutions if r.source == ResolutionSource.MISSING),
    )
    return result


async def _resolve_one(
    index: int,
    item: Item,
    directory: ProductDirectory,
    accept_threshold: float,
    early_stop: float,
) -> SkuResolution:
    entry = {"index": index, "item_name": item.name, "before": item.sku}
    if item.sku:
        return SkuResolution(**entry, after=item.sku, source=ResolutionSource.KEPT)

    searches: Dict[str, List[Item]] = {}

    if item.product_id:
        try:
            product = await directory.lookup_by_id(item.product_id)
        except ProductDirectoryError as e:
            _log_directory_error("lookup_by_id", item.product_id, e)
            product = None
        if product is not None and product.sku:
            return SkuResolution(
                **entry,
                after=product.sku,
                source=ResolutionSource.PRODUCT_ID,
                matched_name=product.name,
                confidence=1.0,
            )

    if item.name:
        wanted = normalize_name(item.name)
        for product in await _search(directory, item.name, searches):
            if product.sku and normalize_name(product.name) == wanted:
                return SkuResolution(
                    **entry,
                    after=product.sku,
                    source=ResolutionSource.EXACT_NAME,
                    matched_name=product.name,
                    confidence=1.0,
                )

        best = _best_fuzzy(item.name, await _variant_products(directory, item.name, searches, early_stop))
        if best is not None:
            product, score = best
            if product.sku and score >= accept_threshold:
                return SkuResolution(
                    **entry,
                    after=product.sku,
                    source=ResolutionSource.FUZZY_NAME,
                    matched_name=product.name,
                    confidence=round(score, 2),
                )
            logger.debug(
                "fuzzy_sku_rejected",
                item_name=item.name[:50],
                best_name=product.name[:50],
                score=round(score, 4),
            )

    return SkuResolution(**entry, source=ResolutionSource.MISSING)


async def _variant_products(
    directory: ProductDirectory,
    name: str,
    searches: Dict[str, List[Item]],
    early_stop: float,
) -> List[Item]:
    """Collect directory hits over name variants until one scores early_stop."""
    products: List[Item] = []
    for variant in name_variants(name):
        products.extend(await _search(directory, variant, searches))
        best = _best_fuzzy(name, products)
        if best is not None and best[1] >= early_stop:
            break
    return products


def _best_fuzzy(name: str, products: Sequence[Item]) -> Optional[Tuple[Item, float]]:
    best: Optional[Tuple[Item, float]] = None
    for product in products:
        score = score_names(name, product.name).score
        if best is None or score > best[1]:
            best = (product, score)
    return best


async def _search(
    directory: ProductDirectory,
    text: str,
    searches: Dict[str, List[Item]],
) -> List[Item]:
    if text in searches:
        return searches[text]
    try:
        found = list(await directory.search_by_name(text) or [])
    except ProductDirectoryError as e:
        _log_directory_error("search_by_name", text, e)
        found = []
    searches[text] = found
    return found


def _log_directory_error(operation: str, key: str, error: ProductDirectoryError) -> None:
    logger.warning(
        "product_directory_failed",
        operation=operation,
        key=key,
        error=error.message,
        details=error.details,
    )
