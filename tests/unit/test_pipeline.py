"""Unit tests for DeclarationPipeline."""
from decimal import Decimal

from customs_engine.models import ChangeKind, ClassificationMethod, Item, MatchSource
from customs_engine.services.pipeline import DeclarationPipeline
from customs_engine.services.reconciliation import DeclarationReconciler


class TestDeclarationPipeline:
    """Tests for the match, classify and reconcile run."""

    def test_order_update(self, declaration_lines, order_items):
        """Stale code is overridden and the unmatched item is appended."""
        result = DeclarationPipeline().run(declaration_lines, order_items)

        merged = result.reconciliation.merged
        assert len(merged) == 4
        assert merged[0].code == "4820102010"
        assert merged[0].description == "Planner agenda (bound diary)"
        assert merged[0].origin_country == "CA"
        assert merged[2].description == "Decorative tape for journaling"
        assert merged[3].description == "Paper sticker"

        kinds = [(c.index, c.kind) for c in result.reconciliation.diff]
        assert kinds == [
            (0, ChangeKind.UPDATED),
            (2, ChangeKind.UPDATED),
            (3, ChangeKind.APPENDED),
        ]
        assert result.needs_review == []

    def test_classifications_in_item_order(self, declaration_lines, order_items):
        """One classification per item, all by title rule."""
        result = DeclarationPipeline().run(declaration_lines, order_items)

        assert [c.rule_name for c in result.classifications] == [
            "planner", "notebook", "washi_tape", "sticker",
        ]
        assert all(c.method == ClassificationMethod.TITLE_RULE for c in result.classifications)
        assert result.outcome.unmatched_items == [3]

    def test_second_run_changes_nothing(self, declaration_lines, order_items):
        """Running again on the merged lines yields an empty diff."""
        pipeline = DeclarationPipeline()
        first = pipeline.run(declaration_lines, order_items)

        second = pipeline.run(first.reconciliation.merged, order_items)

        assert second.reconciliation.diff == []
        assert second.reconciliation.merged == first.reconciliation.merged
        assert second.outcome.unmatched_items == []
        assert {p.source for p in second.outcome.pairs} == {
            MatchSource.FUZZY_NAME, MatchSource.POSITION,
        }

    def test_unknown_item_flagged(self):
        """Items nothing classifies are listed for review and not appended."""
        items = [Item(name="Gift wrap", quantity=1, unit_price=Decimal("4.00"))]

        result = DeclarationPipeline().run([], items)

        assert result.needs_review == [0]
        assert result.reconciliation.merged == []
        assert not result.reconciliation.has_changes

    def test_injected_reconciler(self, order_items):
        """Collaborators can be swapped in."""
        pipeline = DeclarationPipeline(
            reconciler=DeclarationReconciler(append_sku_to_description=True),
        )
        items = [order_items[3].model_copy(update={"sku": "STK-TAB-WDL"})]

        result = pipeline.run([], items)

        assert result.reconciliation.merged[0].description == "Paper sticker - SKU STK-TAB-WDL"
        assert result.reconciliation.merged[0].sku == "STK-TAB-WDL"
