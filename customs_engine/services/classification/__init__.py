"""Customs classification service.

This module maps free-text item titles (plus optional category and stored
code) to a canonical HS code, customs description and country of origin.

Key Components:
    - CustomsClassifier: Precedence-ordered rule cascade with code fallback
    - ClassificationRule: Rule data (keywords / regexes / categories)
    - codes: Digit-wise comparison and structural repair of HS codes
"""
from customs_engine.services.classification.classifier import (
    CustomsClassifier,
    normalize_text,
)
from customs_engine.services.classification.codes import (
    clean_code,
    codes_equal,
    format_code,
    repair_code,
)
from customs_engine.services.classification.rules import (
    ClassificationRule,
    CodeEntry,
    DescriptionVariant,
)

__all__ = [
    "CustomsClassifier",
    "normalize_text",
    "clean_code",
    "codes_equal",
    "format_code",
    "repair_code",
    "ClassificationRule",
    "CodeEntry",
    "DescriptionVariant",
]
