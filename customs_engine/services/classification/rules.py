"""Default customs rule tables.

Rules are plain data: a predicate (keywords, regexes over the normalized
title, or canonical category keys) and the classification it yields. The
classifier evaluates them in descending precedence and the first match wins.

Precedence, highest first:
    pen refills > paper pockets > planner charms > sticky notepads >
    stickers > planner inserts > washi tape > planners > B5 notebooks >
    notebooks > notebook elastics > notepads > pens > paper clips > jewellery
    > category rules

"insert" outranks "notebook" and "planner" regardless of size tokens: an
"A5 Weekly Planner Insert" is a loose refill, not a bound notebook.

Keywords are matched on word boundaries against the normalized title
(lowercase, punctuation as spaces) and accept a trailing plural "s"/"es".
Regexes are searched against the same normalized title.
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class ClassificationRule:
    """A customs classification rule."""
    name: str
    code: str
    description: str
    origin_country: str
    precedence: int
    keywords: Tuple[str, ...] = ()
    patterns: Tuple[str, ...] = ()
    categories: Tuple[str, ...] = ()


@dataclass(frozen=True)
class DescriptionVariant:
    """Title-dependent description for a shared code (e.g. notepad vs sticky)."""
    description: str
    keywords: Tuple[str, ...]
    origin_country: Optional[str] = None


@dataclass(frozen=True)
class CodeEntry:
    """Description/origin looked up by code when no rule matched the title."""
    description: str
    origin_country: str
    variants: Tuple[DescriptionVariant, ...] = ()


# Descriptions
PLANNER = "Planner agenda (bound diary)"
NOTEBOOK = "Notebook (bound journal)"
NOTEBOOK_B5 = "Notebook (sewn journal, B5 size)"
NOTEPAD = "Notepad"
STICKY_NOTEPAD = "Sticky notepad"
STICKER = "Paper sticker"
GEL_PEN = "Gel ink pen"
PEN_REFILL = "Refills for ballpoint pen"
INSERTS = "Planner inserts (loose refills)"
PAPER_CLIPS = "Office paper clips"
ELASTIC = "Elastic for notebook"
RIBBON_CHARM = "Charm for notebook ribbon"
PAPER_POCKET = "Paper pocket for notebook"
WASHI_TAPE = "Decorative tape for journaling"
JEWELLERY = "Sterling silver jewellery"


DEFAULT_TITLE_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="pen_refill", code="9608600000", description=PEN_REFILL,
        origin_country="JP", precedence=1000,
        keywords=("pen refill", "ink refill", "cartridge"),
        patterns=(r"\brefills?\b.*\bpens?\b",),
    ),
    ClassificationRule(
        name="paper_pocket", code="4811412100", description=PAPER_POCKET,
        origin_country="CN", precedence=990,
        keywords=("planner pocket", "notebook pocket", "folder insert", "pocket insert"),
    ),
    ClassificationRule(
        name="planner_charm", code="7117909000", description=RIBBON_CHARM,
        origin_country="CN", precedence=980,
        keywords=("planner charm", "bookmark charm", "ribbon charm"),
    ),
    ClassificationRule(
        name="sticky_notepad", code="4820102020", description=STICKY_NOTEPAD,
        origin_country="US", precedence=960,
        keywords=("sticky note", "sticky pad", "post it", "stickies", "adhesive note"),
    ),
    # Sticker sheets are sold under family names that never say "sticker"
    ClassificationRule(
        name="sticker", code="4911998000", description=STICKER,
        origin_country="CA", precedence=950,
        keywords=("sticker", "decal", "monthly tab", "time management",
                  "square bullet", "finance", "wildflower"),
    ),
    ClassificationRule(
        name="planner_insert", code="4820900000", description=INSERTS,
        origin_country="CA", precedence=940,
        keywords=("insert", "refill", "loose", "looseleaf", "pages only",
                  "disc bound", "discbound"),
    ),
    ClassificationRule(
        name="washi_tape", code="4811412100", description=WASHI_TAPE,
        origin_country="JP", precedence=930,
        keywords=("washi", "decorative tape", "masking tape", "craft tape"),
    ),
    ClassificationRule(
        name="planner", code="4820102010", description=PLANNER,
        origin_country="CA", precedence=920,
        keywords=("planner", "agenda", "diary"),
    ),
    ClassificationRule(
        name="b5_notebook", code="4820102030", description=NOTEBOOK_B5,
        origin_country="CA", precedence=910,
        patterns=(r"\bb5\b.*\b(notebook|journal)s?\b",
                  r"\b(notebook|journal)s?\b.*\bb5\b"),
    ),
    ClassificationRule(
        name="notebook", code="4820102060", description=NOTEBOOK,
        origin_country="CA", precedence=900,
        keywords=("notebook", "journal"),
    ),
    # A planner or notebook "with elastic closure" is still the planner/notebook
    ClassificationRule(
        name="notebook_elastic", code="6307909800", description=ELASTIC,
        origin_country="CN", precedence=895,
        keywords=("elastic band", "elastic closure", "notebook elastic",
                  "planner elastic"),
        patterns=(r"\bclip ?bands?\b",),
    ),
    ClassificationRule(
        name="notepad", code="4820102020", description=NOTEPAD,
        origin_country="CA", precedence=890,
        keywords=("notepad", "note pad", "memo pad", "writing pad", "tracker"),
    ),
    ClassificationRule(
        name="pen", code="9608100000", description=GEL_PEN,
        origin_country="CA", precedence=880,
        keywords=("pen", "gel pen", "ballpoint", "rollerball", "fountain pen"),
    ),
    ClassificationRule(
        name="paper_clip", code="8305903010", description=PAPER_CLIPS,
        origin_country="CN", precedence=870,
        keywords=("paper clip", "paperclip", "binder clip"),
    ),
    ClassificationRule(
        name="jewellery_bracelet", code="7113115000",
        description="Sterling silver jewellery bracelets",
        origin_country="CA", precedence=860, keywords=("bracelet",),
    ),
    ClassificationRule(
        name="jewellery_pendant", code="7113115000",
        description="Sterling silver jewellery pendants",
        origin_country="CA", precedence=850, keywords=("pendant", "necklace"),
    ),
    ClassificationRule(
        name="jewellery_stud", code="7113115000",
        description="Sterling silver jewellery studs",
        origin_country="CA", precedence=840, keywords=("stud",),
    ),
    ClassificationRule(
        name="jewellery_earring", code="7113115000",
        description="Sterling silver jewellery earrings",
        origin_country="CA", precedence=830, keywords=("earring",),
    ),
    ClassificationRule(
        name="jewellery_charm", code="7113115000",
        description="Sterling silver jewellery charms",
        origin_country="CA", precedence=820, keywords=("charm", "dangle"),
    ),
    ClassificationRule(
        name="jewellery", code="7113115000", description=JEWELLERY,
        origin_country="CA", precedence=810,
        keywords=("jewelry", "jewellery", "sterling", "silver"),
    ),
)


# Category rules rank below every title rule.
DEFAULT_CATEGORY_RULES: Tuple[ClassificationRule, ...] = (
    ClassificationRule(
        name="category_planners", code="4820102010", description=PLANNER,
        origin_country="CA", precedence=100, categories=("planners",),
    ),
    ClassificationRule(
        name="category_b5_notebooks", code="4820102030", description=NOTEBOOK_B5,
        origin_country="CA", precedence=90, categories=("b5_notebooks",),
    ),
    ClassificationRule(
        name="category_notebooks", code="4820102060", description=NOTEBOOK,
        origin_country="CA", precedence=80, categories=("a5_notebooks", "tn_notebooks"),
    ),
    ClassificationRule(
        name="category_planner_inserts", code="4820900000", description=INSERTS,
        origin_country="CA", precedence=70, categories=("planner_inserts",),
    ),
    ClassificationRule(
        name="category_stickers", code="4911998000", description=STICKER,
        origin_country="CA", precedence=60, categories=("stickers",),
    ),
    ClassificationRule(
        name="category_washi_tape", code="4811412100", description=WASHI_TAPE,
        origin_country="JP", precedence=50, categories=("washi_tape",),
    ),
    ClassificationRule(
        name="category_planner_charms", code="7117909000", description=RIBBON_CHARM,
        origin_country="CN", precedence=40, categories=("planner_charms",),
    ),
    ClassificationRule(
        name="category_planner_elastic", code="6307909800", description=ELASTIC,
        origin_country="CN", precedence=30, categories=("planner_elastic",),
    ),
    ClassificationRule(
        name="category_notepad", code="4820102020", description=NOTEPAD,
        origin_country="CA", precedence=20, categories=("notepad",),
    ),
    ClassificationRule(
        name="category_sticky_notepad", code="4820102020", description=STICKY_NOTEPAD,
        origin_country="US", precedence=10, categories=("sticky_notepad",),
    ),
)


DEFAULT_RULES: Tuple[ClassificationRule, ...] = DEFAULT_TITLE_RULES + DEFAULT_CATEGORY_RULES


# Raw storefront category (normalized) -> canonical category key
DEFAULT_CATEGORY_SYNONYMS: Dict[str, str] = {
    "2025 planners": "planners",
    "2026 planners": "planners",
    "2026 planners hardcover": "planners",
    "2026 planners cloth flex": "planners",
    "2026 planners paper flex": "planners",
    "undated planner": "planners",
    "undated planners": "planners",
    "a5 notebooks": "a5_notebooks",
    "b5 notebooks": "b5_notebooks",
    "tn notebooks": "tn_notebooks",
    "planner inserts": "planner_inserts",
    "stickers": "stickers",
    "accessories washi tape": "washi_tape",
    "washi tape": "washi_tape",
    "planner charms": "planner_charms",
    "planner elastic": "planner_elastic",
    "notepads": "notepad",
    "sticky notes": "sticky_notepad",
}


_JEWELLERY_VARIANTS = (
    DescriptionVariant("Sterling silver jewellery bracelets", ("bracelet",)),
    DescriptionVariant("Sterling silver jewellery pendants", ("pendant",)),
    DescriptionVariant("Sterling silver jewellery studs", ("stud",)),
    DescriptionVariant("Sterling silver jewellery earrings", ("earring",)),
)

_NOTEPAD_VARIANTS = (
    DescriptionVariant(STICKY_NOTEPAD, ("sticky", "stickies"), origin_country="US"),
)

_TAPE_VARIANTS = (
    DescriptionVariant(PAPER_POCKET, ("pocket",), origin_country="CN"),
)


# Exact 10-digit code -> description
DEFAULT_CODE_TABLE: Dict[str, CodeEntry] = {
    "4820102010": CodeEntry(PLANNER, "CA"),
    "4820102060": CodeEntry(NOTEBOOK, "CA"),
    "4820102030": CodeEntry(NOTEBOOK_B5, "CA"),
    "4820102020": CodeEntry(NOTEPAD, "CA", _NOTEPAD_VARIANTS),
    "4911998000": CodeEntry(STICKER, "CA"),
    "9608100000": CodeEntry(GEL_PEN, "CA"),
    "4820900000": CodeEntry(INSERTS, "CA"),
    "8305903010": CodeEntry(PAPER_CLIPS, "CN"),
    "6307909800": CodeEntry(ELASTIC, "CN"),
    "7117909000": CodeEntry(RIBBON_CHARM, "CN"),
    "9608600000": CodeEntry(PEN_REFILL, "JP"),
    "4811412100": CodeEntry(WASHI_TAPE, "JP", _TAPE_VARIANTS),
    "7113115000": CodeEntry(JEWELLERY, "CA", _JEWELLERY_VARIANTS),
}


# Code prefix -> description, tried longest prefix first
DEFAULT_PREFIX_TABLE: Dict[str, CodeEntry] = {
    "48201020": CodeEntry(NOTEBOOK, "CA"),
    "4911": CodeEntry(STICKER, "CA"),
    "960810": CodeEntry(GEL_PEN, "CA"),
    "960860": CodeEntry(PEN_REFILL, "JP"),
    "8305": CodeEntry(PAPER_CLIPS, "CN"),
    "630790": CodeEntry(ELASTIC, "CN"),
    "481141": CodeEntry(WASHI_TAPE, "JP", _TAPE_VARIANTS),
    "711311": CodeEntry(JEWELLERY, "CA", _JEWELLERY_VARIANTS),
    "7117": CodeEntry(RIBBON_CHARM, "CN"),
}
