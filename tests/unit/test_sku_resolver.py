"""Unit tests for resolve_missing_skus.

Tests cover:
    - Items that already have a SKU
    - Product id lookup
    - Exact-name and fuzzy-name search over name variants
    - Acceptance threshold and early stop
    - Directory failures are tolerated
"""
import pytest
from unittest.mock import AsyncMock

from customs_engine.errors import ProductDirectoryError
from customs_engine.models import Item, ResolutionSource
from customs_engine.services.resolution import resolve_missing_skus


def _product(name, sku):
    return Item(name=name, quantity=1, sku=sku)


@pytest.fixture
def directory():
    """ProductDirectory mock that finds nothing."""
    mock = AsyncMock()
    mock.lookup_by_id = AsyncMock(return_value=None)
    mock.search_by_name = AsyncMock(return_value=[])
    return mock


class TestResolveMissingSkus:
    """Tests for resolve_missing_skus."""

    @pytest.mark.asyncio
    async def test_existing_sku_kept(self, directory):
        """Items with a SKU are not looked up."""
        items = [Item(name="A5 Dotted Notebook", quantity=1, sku="NTB-A5", product_id="551")]

        result = await resolve_missing_skus(items, directory)

        assert result.resolutions[0].source == ResolutionSource.KEPT
        assert result.items[0].sku == "NTB-A5"
        assert result.resolved_count == 0
        directory.lookup_by_id.assert_not_awaited()
        directory.search_by_name.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_by_product_id(self, directory):
        """A product id hit fills the SKU."""
        directory.lookup_by_id.return_value = _product("A5 Dotted Notebook - Wisteria", "NTB-A5-DOT-WIS")
        items = [Item(name="A5 Dotted Notebook", quantity=2, product_id="551")]

        result = await resolve_missing_skus(items, directory)

        resolution = result.resolutions[0]
        assert resolution.source == ResolutionSource.PRODUCT_ID
        assert resolution.after == "NTB-A5-DOT-WIS"
        assert resolution.confidence == 1.0
        assert result.items[0].sku == "NTB-A5-DOT-WIS"
        assert result.items[0].quantity == 2
        assert items[0].sku is None
        directory.lookup_by_id.assert_awaited_once_with("551")

    @pytest.mark.asyncio
    async def test_by_exact_name(self, directory):
        """A directory product with the same normalized name fills the SKU."""
        directory.search_by_name.return_value = [
            _product("Washi Tape Fog", "MT-WAS-FOG"),
            _product("washi tape: moss", "MT-WAS-MOS"),
        ]
        items = [Item(name="Washi Tape - Moss", quantity=1)]

        result = await resolve_missing_skus(items, directory)

        assert result.resolutions[0].source == ResolutionSource.EXACT_NAME
        assert result.items[0].sku == "MT-WAS-MOS"

    @pytest.mark.asyncio
    async def test_by_fuzzy_name_variant(self, directory):
        """A name variant finds the product; search stops at a strong hit."""
        async def search(text):
            if text == "Monthly Tabs":
                return [_product("Woodlands Monthly Sticker Sheet", "STK-TAB-WDL")]
            return []

        directory.search_by_name = AsyncMock(side_effect=search)
        items = [Item(name="Monthly Tabs - Woodlands", quantity=1)]

        result = await resolve_missing_skus(items, directory)

        resolution = result.resolutions[0]
        assert resolution.source == ResolutionSource.FUZZY_NAME
        assert resolution.after == "STK-TAB-WDL"
        assert resolution.matched_name == "Woodlands Monthly Sticker Sheet"
        assert resolution.confidence == 1.0
        assert [c.args[0] for c in directory.search_by_name.await_args_list] == [
            "Monthly Tabs - Woodlands",
            "Monthly Tabs",
        ]

    @pytest.mark.asyncio
    async def test_weak_fuzzy_rejected(self, directory):
        """A best candidate below the acceptance threshold is not used."""
        directory.search_by_name.return_value = [_product("Monthly Planner", "26-MLP")]
        items = [Item(name="Monthly Tabs - Woodlands", quantity=1)]

        result = await resolve_missing_skus(items, directory)

        assert result.resolutions[0].source == ResolutionSource.MISSING
        assert result.items[0].sku is None
        assert directory.search_by_name.await_count == 3

    @pytest.mark.asyncio
    async def test_lower_threshold_accepts(self, directory):
        """The acceptance threshold is configurable."""
        directory.search_by_name.return_value = [_product("Monthly Planner", "26-MLP")]
        items = [Item(name="Monthly Tabs - Woodlands", quantity=1)]

        result = await resolve_missing_skus(items, directory, accept_threshold=0.3)

        assert result.resolutions[0].source == ResolutionSource.FUZZY_NAME
        assert result.items[0].sku == "26-MLP"

    @pytest.mark.asyncio
    async def test_directory_errors_tolerated(self, directory):
        """A failing lookup falls through to the next strategy."""
        directory.lookup_by_id.side_effect = ProductDirectoryError("timeout", details={"status": 504})
        directory.search_by_name.return_value = [_product("Gel Pen - Black", "PEN-BLK")]
        items = [Item(name="Gel Pen - Black", quantity=1, product_id="42")]

        result = await resolve_missing_skus(items, directory)

        assert result.resolutions[0].source == ResolutionSource.EXACT_NAME
        assert result.items[0].sku == "PEN-BLK"

    @pytest.mark.asyncio
    async def test_all_lookups_failing(self, directory):
        """Total directory failure leaves the item unresolved."""
        directory.lookup_by_id.side_effect = ProductDirectoryError("down")
        directory.search_by_name.side_effect = ProductDirectoryError("down")
        items = [Item(name="Gel Pen - Black", quantity=1, product_id="42")]

        result = await resolve_missing_skus(items, directory)

        assert result.resolutions[0].source == ResolutionSource.MISSING
        assert result.resolved_count == 0

    @pytest.mark.asyncio
    async def test_order_preserved(self, directory):
        """Results line up with the input items."""
        directory.search_by_name.return_value = [_product("Gel Pen", "PEN")]
        items = [
            Item(name="A5 Dotted Notebook", quantity=1, sku="NTB-A5"),
            Item(name="Gel Pen", quantity=1),
            Item(name="Gift wrap", quantity=1),
        ]

        result = await resolve_missing_skus(items, directory)

        assert [r.index for r in result.resolutions] == [0, 1, 2]
        assert [i.sku for i in result.items] == ["NTB-A5", "PEN", None]
        assert result.resolved_count == 1
