"""Customs classifier: free text -> canonical HS code, description, origin.

Strategy:
1. Title/category rules in descending precedence (first match wins and
   overrides whatever code the record already carries)
2. Existing code looked up in the exact code table
3. Existing code looked up by progressively shorter prefixes
4. Unknown -> manual review

Example:
    classifier = CustomsClassifier()
    result = classifier.classify("2026 Daily Planner - Hardcover", existing_code="4820.10.2099")
    # result.code = "4820102010"
    # result.description = "Planner agenda (bound diary)"
    # result.method = ClassificationMethod.TITLE_RULE
"""
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import structlog
from rapidfuzz import fuzz, process

from customs_engine.config import classification_settings
from customs_engine.errors import RuleConfigurationError
from customs_engine.models.classification import Classification, ClassificationMethod
from customs_engine.services.classification.codes import clean_code, repair_code
from customs_engine.services.classification.rules import (
    DEFAULT_CATEGORY_SYNONYMS,
    DEFAULT_CODE_TABLE,
    DEFAULT_PREFIX_TABLE,
    DEFAULT_RULES,
    ClassificationRule,
    CodeEntry,
)

logger = structlog.get_logger(__name__)

_PUNCT_RE = re.compile(r"[^a-z0-9\s]")
_SPACE_RE = re.compile(r"\s+")

MIN_PREFIX_LENGTH = 4


def normalize_text(text: Optional[str]) -> str:
    """Lowercase, punctuation to whitespace, collapse whitespace."""
    if not text:
        return ""
    lowered = _PUNCT_RE.sub(" ", str(text).lower())
    return _SPACE_RE.sub(" ", lowered).strip()


def keyword_pattern(keyword: str) -> re.Pattern:
    """Word-boundary regex for a keyword, accepting a plural suffix."""
    return re.compile(r"(?<![a-z0-9])" + re.escape(normalize_text(keyword)) + r"(?:s|es)?(?![a-z0-9])")


@dataclass(frozen=True)
class _CompiledRule:
    rule: ClassificationRule
    keywords: Tuple[re.Pattern, ...]
    patterns: Tuple[re.Pattern, ...]
    categories: frozenset

    def match(self, title: str, category_key: Optional[str]) -> Optional[ClassificationMethod]:
        if title and (
            any(k.search(title) for k in self.keywords)
            or any(p.search(title) for p in self.patterns)
        ):
            return ClassificationMethod.TITLE_RULE
        if category_key is not None and category_key in self.categories:
            return ClassificationMethod.CATEGORY
        return None


def _compile_rule(rule: ClassificationRule) -> _CompiledRule:
    if not (rule.keywords or rule.patterns or rule.categories):
        raise RuleConfigurationError(
            f"Rule '{rule.name}' has no predicate",
            details={"rule": rule.name},
        )
    try:
        patterns = tuple(re.compile(p) for p in rule.patterns)
    except re.error as e:
        raise RuleConfigurationError(
            f"Rule '{rule.name}' has an invalid pattern: {e}",
            details={"rule": rule.name},
        ) from e
    return _CompiledRule(
        rule=rule,
        keywords=tuple(keyword_pattern(k) for k in rule.keywords),
        patterns=patterns,
        categories=frozenset(rule.categories),
    )


class CustomsClassifier:
    """Rule-based customs classifier.

    Holds only the rule tables it was constructed with; classify() is a
    pure function of its arguments and those tables.

    Attributes:
        rules: Rules sorted by descending precedence
        code_table: Exact 10-digit code -> CodeEntry
        prefix_table: Code prefix -> CodeEntry
        category_synonyms: Normalized raw category -> canonical category key
        category_fuzzy_threshold: RapidFuzz cutoff (0-100) for near-miss
            category names, None for exact synonyms only
    """

    def __init__(
        self,
        rules: Optional[Iterable[ClassificationRule]] = None,
        code_table: Optional[Mapping[str, CodeEntry]] = None,
        prefix_table: Optional[Mapping[str, CodeEntry]] = None,
        category_synonyms: Optional[Mapping[str, str]] = None,
        category_fuzzy_threshold: Optional[float] = classification_settings.category_fuzzy_threshold,
    ):
        """Initialize classifier with rule tables.

        Args:
            rules: Classification rules (default: stationery/jewellery table)
            code_table: Exact code table
            prefix_table: Prefix code table
            category_synonyms: Raw category synonyms
            category_fuzzy_threshold: Near-miss cutoff for category names

        Raises:
            RuleConfigurationError: Two rules share a precedence, a rule has
                no predicate, or a pattern does not compile
        """
        rule_list = list(DEFAULT_RULES if rules is None else rules)
        precedences: Dict[int, str] = {}
        for rule in rule_list:
            if rule.precedence in precedences:
                raise RuleConfigurationError(
                    f"Rules '{precedences[rule.precedence]}' and '{rule.name}' "
                    f"share precedence {rule.precedence}",
                    details={"precedence": rule.precedence},
                )
            precedences[rule.precedence] = rule.name

        rule_list.sort(key=lambda r: r.precedence, reverse=True)
        self.rules: List[ClassificationRule] = rule_list
        self._compiled = [_compile_rule(r) for r in rule_list]

        self.code_table: Dict[str, CodeEntry] = dict(
            DEFAULT_CODE_TABLE if code_table is None else code_table
        )
        self.prefix_table: Dict[str, CodeEntry] = dict(
            DEFAULT_PREFIX_TABLE if prefix_table is None else prefix_table
        )
        synonyms = DEFAULT_CATEGORY_SYNONYMS if category_synonyms is None else category_synonyms
        self.category_synonyms: Dict[str, str] = {
            normalize_text(k): v for k, v in synonyms.items()
        }
        self._category_keys = frozenset(
            key for r in rule_list for key in r.categories
        ) | frozenset(self.category_synonyms.values())
        self.category_fuzzy_threshold = category_fuzzy_threshold

        self._log = logger.bind(component="CustomsClassifier")

    def classify(
        self,
        title: Optional[str],
        category: Optional[str] = None,
        existing_code: Optional[str] = None,
    ) -> Classification:
        """Classify an item.

        Args:
            title: Item/product title
            category: Optional raw storefront category
            existing_code: Code currently stored on the record, possibly stale
                or malformed

        Returns:
            Classification; method UNKNOWN when nothing resolved
        """
        title_norm = normalize_text(title)
        category_key = self.normalize_category(category)

        for compiled in self._compiled:
            method = compiled.match(title_norm, category_key)
            if method is not None:
                rule = compiled.rule
                self._log.debug(
                    "classified_by_rule",
                    title=(title or "")[:50],
                    rule=rule.name,
                    method=method.value,
                    code=rule.code,
                    overrode_code=bool(existing_code) and clean_code(existing_code) != rule.code,
                )
                return Classification(
                    code=clean_code(rule.code),
                    description=rule.description,
                    origin_country=rule.origin_country,
                    method=method,
                    rule_name=rule.name,
                )

        if existing_code:
            result = self.describe_code(existing_code, title)
            if result is not None:
                return result

        self._log.debug(
            "classification_unknown",
            title=(title or "")[:50],
            category=category,
            existing_code=existing_code,
        )
        return Classification.unknown(repaired_code=repair_code(existing_code))

    def describe_code(
        self,
        code: Optional[str],
        title: Optional[str] = None,
    ) -> Optional[Classification]:
        """Resolve a stored code via the exact table, then by prefix.

        The code is structurally repaired first; a code that cannot be
        repaired, or that does not decode after repair, returns None.

        Args:
            code: Raw code as stored on the record
            title: Title used to pick title-dependent descriptions

        Returns:
            Classification or None
        """
        repaired = repair_code(code)
        if repaired is None:
            self._log.debug("code_unrepairable", code=code)
            return None

        title_norm = normalize_text(title)

        entry = self.code_table.get(repaired)
        if entry is not None:
            return self._from_entry(repaired, repaired, entry, title_norm, ClassificationMethod.EXACT_CODE)

        for length in range(len(repaired), MIN_PREFIX_LENGTH - 1, -1):
            prefix = repaired[:length]
            entry = self.prefix_table.get(prefix)
            if entry is not None:
                return self._from_entry(repaired, prefix, entry, title_norm, ClassificationMethod.CODE_PREFIX)

        return None

    def normalize_category(self, category: Optional[str]) -> Optional[str]:
        """Map a raw category to its canonical key.

        Exact synonym first, then the bare key itself ("planner_inserts"),
        then a RapidFuzz near-miss over the synonym table.

        Returns:
            Canonical category key, or None
        """
        normalized = normalize_text(category)
        if not normalized:
            return None

        key = self.category_synonyms.get(normalized)
        if key:
            return key

        as_key = normalized.replace(" ", "_")
        if as_key in self._category_keys:
            return as_key

        if self.category_fuzzy_threshold is None or not self.category_synonyms:
            return None

        best = process.extractOne(
            normalized,
            list(self.category_synonyms.keys()),
            scorer=fuzz.token_sort_ratio,
            score_cutoff=self.category_fuzzy_threshold,
        )
        if best is None:
            return None

        synonym, score, _ = best
        self._log.debug(
            "category_fuzzy_match",
            category=category,
            synonym=synonym,
            score=round(score, 2),
        )
        return self.category_synonyms[synonym]

    def get_all_codes(self) -> List[str]:
        """Get all codes the rule and code tables can produce."""
        codes = {clean_code(r.code) for r in self.rules}
        codes.update(self.code_table.keys())
        return sorted(codes)

    def _from_entry(
        self,
        code: str,
        key: str,
        entry: CodeEntry,
        title_norm: str,
        method: ClassificationMethod,
    ) -> Classification:
        description = entry.description
        origin = entry.origin_country
        for variant in entry.variants:
            if any(keyword_pattern(k).search(title_norm) for k in variant.keywords):
                description = variant.description
                origin = variant.origin_country or origin
                break

        self._log.debug(
            "classified_by_code",
            code=code,
            table_key=key,
            method=method.value,
            description=description,
        )
        return Classification(
            code=code,
            description=description,
            origin_country=origin,
            method=method,
            rule_name=key,
            repaired_code=code,
        )
