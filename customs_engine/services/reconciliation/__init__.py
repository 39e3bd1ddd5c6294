"""Declaration reconciliation service.

Key Components:
    - DeclarationReconciler: In-place updates and de-duplicated appends
    - sync_line_skus: Copy paired item SKUs onto declaration lines
"""
from customs_engine.services.reconciliation.reconciler import DeclarationReconciler
from customs_engine.services.reconciliation.sku_sync import sync_line_skus

__all__ = [
    "DeclarationReconciler",
    "sync_line_skus",
]
