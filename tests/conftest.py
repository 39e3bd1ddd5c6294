"""Pytest configuration and fixtures for test suite.

This is the root-level conftest.py that provides:
- Python path setup (so we can import customs_engine without installing)
- Basic environment variable defaults
- Shared record fixtures
"""
import os
import sys
from decimal import Decimal
from pathlib import Path

import pytest

# Project root is the parent of tests/
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

os.environ.setdefault("CUSTOMS_LOG_LEVEL", "WARNING")
os.environ.setdefault("CUSTOMS_LOG_JSON", "false")

from customs_engine.models import DeclarationLine, Item  # noqa: E402


@pytest.fixture
def order_items():
    """Four order items of one order, no identifiers shared with the declaration."""
    return [
        Item(name="2026 Daily Planner - Hardcover", quantity=1, unit_price=Decimal("48.00")),
        Item(name="A5 Dotted Notebook", quantity=2, unit_price=Decimal("28.00")),
        Item(name="Washi Tape - Moss", quantity=3, unit_price=Decimal("6.50")),
        Item(name="Monthly Tabs - Woodlands", quantity=1, unit_price=Decimal("9.00")),
    ]


@pytest.fixture
def declaration_lines():
    """Three declaration lines covering the first three order items."""
    return [
        DeclarationLine(
            description="Daily Planner Hardcover 2026",
            code="4820.10.2099",
            quantity=1,
            value=Decimal("48.00"),
            origin_country="Canada",
            declaration_id="90817263",
        ),
        DeclarationLine(
            description="Notebook (bound journal)",
            code="4820.10.2060",
            quantity=2,
            value=Decimal("56.00"),
            origin_country="CA",
            declaration_id="90817264",
        ),
        DeclarationLine(
            description="Washi Tape Moss",
            code="4811.41.2100",
            quantity=3,
            value=Decimal("19.50"),
            origin_country="JP",
            declaration_id="90817265",
        ),
    ]
