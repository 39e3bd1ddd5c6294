"""SKU synthesis from product and variant titles.

Segments are derived per facet by dictionary lookup, composed by product
family, fitted into a length budget and finally made unique against the
caller's used-code predicate:

    brand (MT washi)   MT-WAS-<color>
    jewelry            JWL-<motif|color>-<type>-<pack>-<material>
    gift card          GFT-<amount>
    undated notebook   NTB-<size>-<subtype>-<collection>-<color>[-IM]
    inserts/refills    INS|RFL-<size>-<subtype>-<collection>-<color>[-IM]
    everything else    <year>-<type>-<subtype>-<collection>-<size>-<color>[-IM]

Example:
    generator = SkuGenerator()
    used = {"NTB-A5-DOT-WIS"}
    sku = generator.generate(
        SkuAttributes("A5 Dotted Notebook", "Wisteria"), used.__contains__
    )
    # sku = "NTB-A5-DOT-WIS-AA"
"""
import re
import string
import time
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Mapping, Optional, Sequence, Set

import structlog

from customs_engine.config import sku_settings
from customs_engine.services.sku.rules import CodeRuleSet

logger = structlog.get_logger(__name__)

SEPARATOR = "-"
DEFAULT_BASE = "SKU"
PACK_SEGMENT_RE = re.compile(r"^(SN|PR|S\d)$", re.IGNORECASE)
DROPPABLE_SEGMENTS = ("LMN", "BLNK", "DOT", "LIN", "GRD")
PLAIN_SIZE_RE = re.compile(r"(^|\s)(A5|B5|TN)(\s|$)", re.IGNORECASE)
NUMERIC_ONLY_RE = re.compile(r"^\s*[$€£]?\s*\d+(\.\d{2})?\s*$")
GENERIC_VARIANT_RE = re.compile(r"^(default( title)?|standard|regular)$", re.IGNORECASE)
GIFT_CARD_RE = re.compile(r"gift\s*card", re.IGNORECASE)
GIFT_AMOUNT_RE = re.compile(r"([$€£]?\s*)(\d{1,4})(?:\.\d{2})?")

_BASE36_DIGITS = string.digits + string.ascii_uppercase


def _to_base36(number: int) -> str:
    if number <= 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36_DIGITS[rem])
    return "".join(reversed(digits))


@dataclass(frozen=True)
class SkuAttributes:
    """Text a SKU is derived from.

    Attributes:
        product_title: Product title ("A5 Dotted Notebook")
        variant_title: Variant title ("Wisteria / Imperfect")
        options: Variant option values, checked before the titles
    """
    product_title: str = ""
    variant_title: str = ""
    options: Sequence[str] = field(default_factory=tuple)


class SkuGenerator:
    """Length-bounded, collision-free SKU generator.

    The generator holds no used-code state; uniqueness is checked through
    the predicate passed to each call.
    """

    def __init__(
        self,
        rules: Optional[CodeRuleSet] = None,
        max_length: int = sku_settings.max_length,
        imperfect_code: str = sku_settings.imperfect_code,
        clock: Callable[[], float] = time.time,
    ):
        """Initialize generator.

        Args:
            rules: Facet dictionaries (default: shipped catalog tables)
            max_length: Upper bound on SKU length
            imperfect_code: Token appended last for imperfect goods
            clock: Seconds-since-epoch source for the last-resort suffix
        """
        if max_length < 4:
            raise ValueError(f"max_length must be at least 4, got {max_length}")
        self.rules = rules or CodeRuleSet()
        self.max_length = max_length
        self.imperfect_code = imperfect_code
        self._clock = clock
        self._log = logger.bind(component="SkuGenerator")

    # ---------- main ----------

    def generate(self, attributes: SkuAttributes, is_used: Callable[[str], bool]) -> str:
        """Synthesize a SKU not accepted by `is_used`.

        Args:
            attributes: Product/variant text
            is_used: Returns True for codes already taken

        Returns:
            Non-empty upper-case SKU of at most max_length characters
        """
        pt = attributes.product_title or ""
        vt = attributes.variant_title or ""
        options = [o for o in attributes.options if o]
        hay = f"{pt} {vt}".strip()
        fallback = self.rules.fallback_token

        brand = next((b for b in self.rules.brands if b.pattern.search(pt)), None)
        if brand is not None:
            color = self._find_color(pt, vt, options) or fallback(vt or pt)
            base = self._join_and_trim([brand.code, self.rules.washi_type, color])
            return self._uniqueify(base, is_used, family="brand")

        jewelry_type = self._pick_word(pt, self.rules.jewelry_types)
        if jewelry_type:
            motif = (
                self._pick(f"{pt} {vt}", self.rules.motifs)
                or self._find_color(pt, vt, options)
                or fallback(pt)
            )
            pack = self._pick_first(options + [hay], self.rules.packs)
            material = self._pick_first(options + [hay], self.rules.materials)
            base = self._join_and_trim(["JWL", motif, jewelry_type, pack, material])
            return self._uniqueify(base, is_used, family="jewelry")

        year = self._find_year(hay)
        product_type = self._pick(pt, self.rules.product_types)
        subtype = self._pick(hay, self.rules.subtypes)
        collection = self._pick(pt, self.rules.collections)
        size = self._find_size(options, pt, vt)
        color = self._find_color(pt, vt, options)
        imperfect = any(self.rules.imperfect_re.search(p) for p in (pt, vt) if p)

        if product_type == "GFT" or GIFT_CARD_RE.search(pt):
            amount = self._gift_amount(pt, vt)
            base = self._join_and_trim(["GFT", amount or fallback(vt or pt)])
            return self._uniqueify(base, is_used, family="gift_card")

        if not year and product_type == "NTB":
            family = "undated_notebook"
            parts = [product_type, size, subtype, collection, color]
        elif product_type in ("INS", "RFL"):
            family = "insert"
            parts = [product_type, size, subtype, collection, color]
        else:
            family = "general"
            parts = [year, product_type, subtype, collection, size, color]

        if family != "undated_notebook" and len([p for p in parts if p]) < 2:
            parts.append(fallback(vt or pt))
        if imperfect:
            parts.append(self.imperfect_code)

        base = self._join_and_trim(parts)
        if not base:
            token = fallback(vt or pt)
            base = self._join_and_trim([product_type or collection or token, token]) or token
        return self._uniqueify(base, is_used, family=family)

    def generate_batch(
        self,
        attributes_list: Iterable[SkuAttributes],
        used_codes: Iterable[str] = (),
    ) -> List[str]:
        """Synthesize SKUs for several items, unique among themselves.

        The batch works on a private copy of `used_codes`; the caller's
        collection is never modified.

        Args:
            attributes_list: One SkuAttributes per item
            used_codes: Codes already taken before the batch

        Returns:
            SKUs in input order
        """
        used: Set[str] = {code.upper() for code in used_codes}
        skus: List[str] = []
        for attributes in attributes_list:
            sku = self.generate(attributes, lambda code: code.upper() in used)
            used.add(sku)
            skus.append(sku)
        self._log.info("sku_batch_generated", count=len(skus))
        return skus

    # ---------- finders ----------

    @staticmethod
    def _pick(text: Optional[str], table: Mapping[str, str]) -> str:
        """Case-insensitive substring lookup, longer keys first."""
        if not text or not table:
            return ""
        haystack = str(text).lower()
        for key in sorted(table, key=len, reverse=True):
            if key.lower() in haystack:
                return table[key]
        return ""

    @staticmethod
    def _pick_word(text: Optional[str], table: Mapping[str, str]) -> str:
        """Like _pick, but keys must match whole words ("ring" not in "spring")."""
        if not text or not table:
            return ""
        for key in sorted(table, key=len, reverse=True):
            if re.search(rf"\b{re.escape(key)}\b", text, re.IGNORECASE):
                return table[key]
        return ""

    def _pick_first(self, sources: Iterable[str], table: Mapping[str, str]) -> str:
        for source in sources:
            token = self._pick(source, table)
            if token:
                return token
        return ""

    def _find_year(self, text: str) -> str:
        match = self.rules.year_re.search(text or "")
        return match.group(1)[2:] if match else ""

    def _find_color(self, pt: str, vt: str, options: List[str]) -> str:
        token = self._pick_first(options + [vt, pt], self.rules.colors)
        if token:
            return token
        if vt and not NUMERIC_ONLY_RE.match(vt) and not GENERIC_VARIANT_RE.match(vt.strip()):
            return self.rules.fallback_token(vt)
        return ""

    def _find_size(self, options: List[str], pt: str, vt: str) -> str:
        token = self._pick_first(options + [vt, pt], self.rules.sizes)
        if token:
            return token
        match = PLAIN_SIZE_RE.search(f"{pt} {vt}")
        return match.group(2).upper() if match else ""

    @staticmethod
    def _gift_amount(pt: str, vt: str) -> str:
        for text in (vt, pt):
            match = GIFT_AMOUNT_RE.search(text or "")
            if match:
                return match.group(2)
        return ""

    # ---------- length budget & uniqueness ----------

    def _join_and_trim(self, parts: Iterable[Optional[str]]) -> str:
        """Join segments and fit them into max_length.

        Shortening order: drop a pack segment, drop droppable subtype
        segments from the end, remove separators and truncate.
        """
        sku = SEPARATOR.join(p for p in parts if p).upper()
        if len(sku) <= self.max_length:
            return sku

        segments = sku.split(SEPARATOR)
        for i, segment in enumerate(segments):
            if PACK_SEGMENT_RE.match(segment):
                del segments[i]
                sku = SEPARATOR.join(segments)
                if len(sku) <= self.max_length:
                    return sku
                break

        for i in range(len(segments) - 1, -1, -1):
            if len(sku) <= self.max_length:
                break
            if segments[i] in DROPPABLE_SEGMENTS:
                del segments[i]
                sku = SEPARATOR.join(segments)
        if len(sku) <= self.max_length:
            return sku

        return sku.replace(SEPARATOR, "")[: self.max_length]

    def _append_suffix(self, base: str, suffix: str) -> str:
        hyphenated = f"{base}{SEPARATOR}{suffix}"
        if len(hyphenated) <= self.max_length:
            return hyphenated
        tight = f"{base}{suffix}"
        if len(tight) <= self.max_length:
            return tight
        compact = base.replace(SEPARATOR, "")[: max(0, self.max_length - len(suffix))]
        return f"{compact}{suffix}".upper()

    def _uniqueify(self, base: str, is_used: Callable[[str], bool], family: str) -> str:
        base = base or DEFAULT_BASE
        if not is_used(base):
            self._log.debug("sku_generated", sku=base, family=family)
            return base

        letters = string.ascii_uppercase
        for first in letters:
            for second in letters:
                candidate = self._append_suffix(base, first + second)
                if not is_used(candidate):
                    self._log.debug("sku_generated", sku=candidate, family=family, suffixed=True)
                    return candidate

        candidate = base
        stamp = int(self._clock() * 1000)
        for width in range(2, self.max_length):
            for offset in range(len(_BASE36_DIGITS) ** 2):
                suffix = _to_base36(stamp + offset)[-width:]
                candidate = self._append_suffix(base, suffix)[: self.max_length]
                if not is_used(candidate):
                    self._log.warning("sku_time_suffix_used", sku=candidate, base=base)
                    return candidate

        self._log.error("sku_space_exhausted", base=base, sku=candidate)
        return candidate
