"""Missing-SKU resolution against an external product directory.

Key Components:
    - ProductDirectory: Protocol the host application implements
    - resolve_missing_skus: Concurrent id / exact name / fuzzy name lookup
"""
from customs_engine.services.resolution.ports import ProductDirectory
from customs_engine.services.resolution.sku_resolver import resolve_missing_skus

__all__ = [
    "ProductDirectory",
    "resolve_missing_skus",
]
