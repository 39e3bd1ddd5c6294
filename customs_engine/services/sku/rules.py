"""Per-facet dictionaries used to compose SKUs.

Keys are lowercase substrings looked up in product/variant text (longest key
first), values are the short tokens that end up in the SKU.
"""
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List

_NON_TOKEN_RE = re.compile(r"[^A-Z0-9\s]")

FALLBACK_WIDTH = 3


def fallback_token(text: str) -> str:
    """Compact token for text no dictionary recognizes.

    First three characters of the first word, upper-cased and padded with X
    ("Midnight Stars" -> "MID", "" -> "XXX").
    """
    words = _NON_TOKEN_RE.sub(" ", (text or "").upper()).split()
    if not words:
        return "X" * FALLBACK_WIDTH
    return words[0][:FALLBACK_WIDTH].ljust(FALLBACK_WIDTH, "X")


@dataclass(frozen=True)
class BrandPattern:
    """Brand detected by regex on the product title."""
    pattern: re.Pattern
    code: str


PRODUCT_TYPES: Dict[str, str] = {
    "daily planner": "DLP", "daily": "DLP",
    "weekly planner": "WKP", "weekly": "WKP",
    "horizontal planner": "HLP", "horizontal": "HLP",
    "insert": "INS", "inserts": "INS",
    "refill": "RFL", "refills": "RFL",
    "notebook": "NTB", "notebooks": "NTB",
    "journal": "NTB",
    "stickers": "STK",
    "gift card": "GFT",
}

SUBTYPES: Dict[str, str] = {
    "blank": "BLNK",
    "dotted": "DOT",
    "dot grid": "DOT",
    "graph": "GRD", "grid": "GRD",
    "lined": "LIN",
    "weekly inserts": "WKL", "horizontal inserts": "HNL",
}

COLLECTIONS: Dict[str, str] = {
    "jewlry": "JWL", "jewellery": "JWL",
    "undated": "UND",
    "minimalist": "MIN",
    "square bullets": "SQB",
    "square bullet": "SQB",
    "time management": "TMG",
    "monthly tab": "TAB",
    "wellness": "WLN",
    "decorative": "DCR",
    "highlight": "HLT",
    "charm": "CHRM",
    "bundle": "BNDL",
    "signature planner bundle": "PLNR-BNDL",
    "clip band elastics": "CLP-ELS",
    "printable": "PRNT",
    "finance": "FIN",
}

JEWELRY_TYPES: Dict[str, str] = {
    "earring": "EAR", "earrings": "EAR", "stud": "EAR", "studs": "EAR",
    "bracelet": "BRC", "bracelets": "BRC",
    "pendant": "PND", "pendants": "PND",
    "necklace": "NCK", "necklaces": "NCK",
    "ring": "RNG", "rings": "RNG",
}

MATERIALS: Dict[str, str] = {
    "gold": "GLD", "14k gold": "GLD-14", "18k gold": "GLD-18", "gold-plated": "GLD",
    "silver": "SLV", "sterling silver": "SLV",
    "rose gold": "RGL", "brass": "BRS", "steel": "STL",
}

PACKS: Dict[str, str] = {
    "single": "SN", "one": "SN",
    "pair": "PR", "pairs": "PR",
}

SIZES: Dict[str, str] = {
    "a5": "A5",
    "b5": "B5",
    "tn": "TN",
    "half letter": "HL",
    "classic": "CL",
    "classic hp": "CL",
    "discbound - half letter": "DB-HL",
    "disc-bound classic hp": "DB-CL",
}

BRANDS: List[BrandPattern] = [
    BrandPattern(re.compile(r"mt\s*washi", re.IGNORECASE), "MT"),
    BrandPattern(re.compile(r"(^|\s)mt(\s|$)", re.IGNORECASE), "MT"),
]

WASHI_TYPE = "WAS"

COLORS: Dict[str, str] = {
    "charbon": "CHB", "witching hour": "WCH", "willow": "WIL", "wild orchid": "WOR",
    "pacific": "PAC", "juniper": "JUN", "deep aster": "DAH", "aster": "AST", "slate": "SLA",
    "moss": "MOS", "rivière": "RIV", "riviere": "RIV", "light riviere": "LRV",
    "enchanted forest": "ECF", "autumnal": "AUT", "blossomfield": "BLO", "fawn": "FWN",
    "elderberry": "ELD", "lilac": "LIL", "secret garden": "SCG", "rosewood": "RWO",
    "wisteria": "WIS", "marigold": "MRG", "white oak": "WOK", "oak": "OAK", "nimbus": "NIM",
    "toile de lin": "TDL", "deep forest": "DPF", "deep oak": "DPO",
    # tapes, stickers, prints
    "washi": "WSH", "pink": "PNK", "pink dots": "PND", "glacial": "GLC",
    "pastel cream": "PCR", "mocha": "MOC", "evergreen": "EVG", "empress blue": "EMB",
    "aqua": "AQA", "matte white": "MWH", "fog": "FOG", "lichen": "LIC", "sweet almond": "SWA",
    "dahlia": "DAH", "hyacinth": "HYA", "matte purple": "MAP", "dusty mint": "DUM",
    "moonflower": "MNF", "oasis": "OAS", "pewter": "PEW", "heart spot": "HSP",
    "pink bubbles": "PKB", "pink star": "PKS", "gold star": "GST", "red star": "RST",
    "pink mini dots": "PMD", "red mini dots": "RMD", "pink waves": "PW", "teal waves": "TW",
    "diamond mini grid": "DMG", "gold square graph": "GSG", "blue square graph grid": "BSG",
    "cyan square grid": "CSG", "milk tea dots": "MTD", "navy mini dots": "NVM",
    "silver dots": "SLD", "navy blue stripes": "NBS", "light blue stripes": "LBS",
    "peony": "PNY", "light earth": "LTE", "meadow": "MDW", "sea to sky": "STS",
    "life in pastels": "LFP", "foxberry": "FXB", "matte black": "MTB", "summer solstice": "SMT",
    "spring neutrals": "SPN", "hydrangea": "HDR", "lakeside": "LKS", "poplar": "PLR",
    "clove": "CLV", "mulberry": "MLB", "lavande": "LVD", "matte gold": "MAG",
    "buttercup": "BTR", "snapdragon": "SNP", "woodlands": "WDL", "wild indigo": "WIN",
    "plum grove": "PLG",
}

MOTIFS: Dict[str, str] = {
    "lunar": "LNR",
    "lumine": "LUM",
    "solstice": "SOL",
    "rabbit": "RBT",
    "heart of the forest": "HOF",
    "mushroom": "MSH",
    "hummingbird": "HUM",
    "jardin": "JAR",
    "floriculture": "FLC",
    "monarque": "MON",
    "blank": "BLNK",
    "heart of the forest lined notebook": "HOF",
    "heart of the forest dotted notebook": "HOF",
}

IMPERFECT_RE = re.compile(r"\bimperfect|imperfections?\b", re.IGNORECASE)
YEAR_RE = re.compile(r"\b(20\d{2})\b")


@dataclass
class CodeRuleSet:
    """Dictionaries and patterns the SKU generator composes codes from.

    Every field defaults to the shipped stationery/jewellery tables; pass
    replacements to adapt the generator to another catalog.
    """
    product_types: Dict[str, str] = field(default_factory=lambda: dict(PRODUCT_TYPES))
    subtypes: Dict[str, str] = field(default_factory=lambda: dict(SUBTYPES))
    collections: Dict[str, str] = field(default_factory=lambda: dict(COLLECTIONS))
    jewelry_types: Dict[str, str] = field(default_factory=lambda: dict(JEWELRY_TYPES))
    materials: Dict[str, str] = field(default_factory=lambda: dict(MATERIALS))
    packs: Dict[str, str] = field(default_factory=lambda: dict(PACKS))
    sizes: Dict[str, str] = field(default_factory=lambda: dict(SIZES))
    colors: Dict[str, str] = field(default_factory=lambda: dict(COLORS))
    motifs: Dict[str, str] = field(default_factory=lambda: dict(MOTIFS))
    brands: List[BrandPattern] = field(default_factory=lambda: list(BRANDS))
    washi_type: str = WASHI_TYPE
    imperfect_re: re.Pattern = IMPERFECT_RE
    year_re: re.Pattern = YEAR_RE
    fallback_token: Callable[[str], str] = fallback_token
