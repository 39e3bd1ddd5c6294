"""One-call declaration update: match, classify, reconcile.

Example:
    pipeline = DeclarationPipeline()
    result = pipeline.run(lines, items)
    if result.reconciliation.has_changes:
        save(result.reconciliation.merged)
    for index in result.needs_review:
        flag(items[index])
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

import structlog

from customs_engine.models.classification import Classification
from customs_engine.models.matching import MatchOutcome
from customs_engine.models.reconciliation import ReconcileResult
from customs_engine.models.records import DeclarationLine, Item
from customs_engine.services.classification import CustomsClassifier
from customs_engine.services.matching import DeclarationMatcher
from customs_engine.services.reconciliation import DeclarationReconciler

logger = structlog.get_logger(__name__)


@dataclass
class PipelineResult:
    """Everything one pipeline run produced.

    Attributes:
        classifications: One per item, in item order
        outcome: Declaration/item pairing
        reconciliation: Merged lines and diff
    """
    classifications: List[Classification]
    outcome: MatchOutcome
    reconciliation: ReconcileResult
    needs_review: List[int] = field(default_factory=list)


class DeclarationPipeline:
    """Wires classifier, matcher and reconciler together."""

    def __init__(
        self,
        classifier: Optional[CustomsClassifier] = None,
        matcher: Optional[DeclarationMatcher] = None,
        reconciler: Optional[DeclarationReconciler] = None,
    ):
        self.classifier = classifier or CustomsClassifier()
        self.matcher = matcher or DeclarationMatcher()
        self.reconciler = reconciler or DeclarationReconciler()
        self._log = logger.bind(component="DeclarationPipeline")

    def run(
        self,
        lines: Sequence[DeclarationLine],
        items: Sequence[Item],
    ) -> PipelineResult:
        """Update a declaration from the order items it should describe.

        Items are matched first so each paired item is classified with the
        code its declaration line currently carries.

        Args:
            lines: Existing declaration lines
            items: Order items of the same order

        Returns:
            PipelineResult

        Raises:
            IntegrityViolationError: Matching or reconciliation broke an
                integrity rule
        """
        outcome = self.matcher.match(lines, items)
        by_item = outcome.declaration_for_item()

        classifications: List[Classification] = []
        for item_index, item in enumerate(items):
            pair = by_item.get(item_index)
            existing_code = lines[pair.declaration_index].code if pair is not None else None
            classifications.append(
                self.classifier.classify(item.name, item.category, existing_code)
            )

        reconciliation = self.reconciler.reconcile(lines, items, classifications, outcome.pairs)
        needs_review = [i for i, c in enumerate(classifications) if c.needs_review]

        self._log.info(
            "pipeline_completed",
            lines=len(lines),
            items=len(items),
            changes=len(reconciliation.diff),
            needs_review=len(needs_review),
        )
        return PipelineResult(
            classifications=classifications,
            outcome=outcome,
            reconciliation=reconciliation,
            needs_review=needs_review,
        )
