"""SKU synthesis service.

Key Components:
    - SkuGenerator: Facet lookup, length budget and uniqueness suffixes
    - SkuAttributes: Product/variant text a SKU is derived from
    - CodeRuleSet: Facet dictionaries and the fallback token generator
"""
from customs_engine.services.sku.generator import SkuAttributes, SkuGenerator
from customs_engine.services.sku.rules import BrandPattern, CodeRuleSet, fallback_token

__all__ = [
    "SkuAttributes",
    "SkuGenerator",
    "BrandPattern",
    "CodeRuleSet",
    "fallback_token",
]
