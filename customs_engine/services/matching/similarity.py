"""Token similarity between two free-text product names.

    score = min(1, 0.7 * coverage + 0.25 * overlap + 0.05 * shared distinctive terms)

where coverage is the fraction of the query's tokens found in the candidate
and overlap is the Jaccard index of both token sets. Tokens are canonicalized
first so pluralization and naming variants of one word count as equal.
"""
import re
from dataclasses import dataclass
from typing import FrozenSet, List, Mapping, Optional

COVERAGE_WEIGHT = 0.7
OVERLAP_WEIGHT = 0.25
DISTINCTIVE_BONUS = 0.05

DEFAULT_TOKEN_SYNONYMS: Mapping[str, str] = {
    "tab": "sticker",
    "tabs": "sticker",
    "sticker": "sticker",
    "stickers": "sticker",
    "wildflowers": "wildflower",
    "botanicals": "botanical",
    "notebooks": "notebook",
    "journal": "notebook",
    "journals": "notebook",
}

DEFAULT_DISTINCTIVE_TERMS: FrozenSet[str] = frozenset(
    {"woodlands", "enchanted", "forest", "botanical", "sticker", "monthly"}
)

_NON_ALNUM_RE = re.compile(r"[^a-z0-9\s]")
_SPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class SimilarityScore:
    """Similarity of a query name to a candidate name."""
    score: float
    coverage: float
    overlap: float


def normalize_name(name: Optional[str]) -> str:
    """Lowercase, "&" -> "and", strip non-alphanumerics, collapse whitespace."""
    if not name:
        return ""
    text = str(name).lower().replace("&", " and ")
    text = _NON_ALNUM_RE.sub(" ", text)
    return _SPACE_RE.sub(" ", text).strip()


def tokenize(
    name: Optional[str],
    synonyms: Mapping[str, str] = DEFAULT_TOKEN_SYNONYMS,
) -> List[str]:
    """Split a normalized name into canonical tokens."""
    return [synonyms.get(tok, tok) for tok in normalize_name(name).split(" ") if tok]


def score_names(
    query: Optional[str],
    candidate: Optional[str],
    synonyms: Mapping[str, str] = DEFAULT_TOKEN_SYNONYMS,
    distinctive_terms: FrozenSet[str] = DEFAULT_DISTINCTIVE_TERMS,
) -> SimilarityScore:
    """Score how well `candidate` covers `query`.

    Args:
        query: Name being looked up (coverage is measured against its tokens)
        candidate: Name being compared
        synonyms: Token canonicalization table
        distinctive_terms: Tokens that earn a bonus when both names share them

    Returns:
        SimilarityScore with score, coverage and overlap in [0, 1]
    """
    query_tokens = set(tokenize(query, synonyms))
    candidate_tokens = set(tokenize(candidate, synonyms))
    if not query_tokens or not candidate_tokens:
        return SimilarityScore(score=0.0, coverage=0.0, overlap=0.0)

    shared = query_tokens & candidate_tokens
    coverage = len(shared) / len(query_tokens)
    overlap = len(shared) / len(query_tokens | candidate_tokens)
    bonus = DISTINCTIVE_BONUS * len(shared & distinctive_terms)

    score = min(1.0, COVERAGE_WEIGHT * coverage + OVERLAP_WEIGHT * overlap + bonus)
    return SimilarityScore(score=score, coverage=coverage, overlap=overlap)


def name_variants(name: Optional[str]) -> List[str]:
    """Search variants of a product name, original first.

    "Monthly Tabs - Woodlands" -> also "Monthly Tabs", and the tab/sticker
    spellings, so a directory search by name has more chances to hit.
    """
    if not name:
        return []
    variants: List[str] = [name]

    def add(value: str) -> None:
        if value and value not in variants:
            variants.append(value)

    before_dash = name.split(" - ")[0]
    if len(before_dash) >= 4:
        add(before_dash)
    add(re.sub(r"tabs?", "sticker", name, flags=re.IGNORECASE))
    add(re.sub(r"stickers?", "sticker", name, flags=re.IGNORECASE))
    return variants
