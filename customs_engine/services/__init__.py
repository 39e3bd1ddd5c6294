"""Customs engine services."""
from customs_engine.services.classification import CustomsClassifier
from customs_engine.services.matching import DeclarationMatcher, score_names
from customs_engine.services.pipeline import DeclarationPipeline, PipelineResult
from customs_engine.services.reconciliation import DeclarationReconciler, sync_line_skus
from customs_engine.services.resolution import ProductDirectory, resolve_missing_skus
from customs_engine.services.sku import SkuAttributes, SkuGenerator

__all__ = [
    "CustomsClassifier",
    "DeclarationMatcher",
    "score_names",
    "DeclarationPipeline",
    "PipelineResult",
    "DeclarationReconciler",
    "sync_line_skus",
    "ProductDirectory",
    "resolve_missing_skus",
    "SkuAttributes",
    "SkuGenerator",
]
