"""Declaration line / order item matching service.

Key Components:
    - DeclarationMatcher: Identifier -> exact name -> fuzzy name -> position cascade
    - score_names: Token coverage/overlap similarity between two names
"""
from customs_engine.services.matching.matcher import DeclarationMatcher
from customs_engine.services.matching.similarity import (
    SimilarityScore,
    name_variants,
    normalize_name,
    score_names,
    tokenize,
)

__all__ = [
    "DeclarationMatcher",
    "SimilarityScore",
    "name_variants",
    "normalize_name",
    "score_names",
    "tokenize",
]
