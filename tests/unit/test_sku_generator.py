"""Unit tests for SkuGenerator.

Tests cover:
- Composition per product family (notebook, dated goods, inserts, gift
  cards, MT washi, jewelry, general fallback)
- Length budget (pack drop, droppable segments, compaction)
- Uniqueness (AA..ZZ suffixes, time-derived suffix)
- Batches against a private used-code set
"""
import pytest

from customs_engine.services.sku import SkuAttributes, SkuGenerator, fallback_token


def _never_used(code):
    return False


@pytest.fixture
def generator():
    """Generator with default rules and a fixed clock."""
    return SkuGenerator(clock=lambda: 1.0)


class TestFallbackToken:
    """Tests for fallback_token."""

    @pytest.mark.parametrize("text,expected", [
        ("Midnight Stars", "MID"),
        ("ab", "ABX"),
        ("", "XXX"),
        ("!!!", "XXX"),
    ])
    def test_fallback(self, text, expected):
        """First word, three characters, padded with X."""
        assert fallback_token(text) == expected


class TestComposition:
    """Tests for family-specific composition."""

    def test_undated_notebook(self, generator):
        """Size goes right after the type segment."""
        sku = generator.generate(SkuAttributes("A5 Dotted Notebook", "Wisteria"), _never_used)

        assert sku == "NTB-A5-DOT-WIS"

    def test_imperfect_suffix(self, generator):
        """Imperfect goods end with the imperfect token."""
        sku = generator.generate(
            SkuAttributes("A5 Dotted Notebook", "Wisteria / Imperfect"), _never_used
        )

        assert sku == "NTB-A5-DOT-WIS-IM"

    def test_dated_planner(self, generator):
        """Dated goods lead with the two-digit year."""
        sku = generator.generate(SkuAttributes("2026 Daily Planner", "Rosewood"), _never_used)

        assert sku == "26-DLP-RWO"

    def test_inserts(self, generator):
        """Inserts carry type, size, subtype and color."""
        sku = generator.generate(SkuAttributes("A5 Weekly Inserts", "Lilac"), _never_used)

        assert sku == "INS-A5-WKL-LIL"

    def test_gift_card(self, generator):
        """Gift cards use the amount."""
        sku = generator.generate(SkuAttributes("Gift Card", "$50.00"), _never_used)

        assert sku == "GFT-50"

    def test_mt_washi(self, generator):
        """MT washi is brand, washi type and color."""
        sku = generator.generate(SkuAttributes("MT Washi Tape", "Moss"), _never_used)

        assert sku == "MT-WAS-MOS"

    def test_jewelry(self, generator):
        """Jewelry is motif, type, pack and material."""
        sku = generator.generate(
            SkuAttributes("Lunar Sterling Silver Stud Earrings", "Pair"), _never_used
        )

        assert sku == "JWL-LNR-EAR-PR-SLV"

    def test_jewelry_type_needs_whole_word(self, generator):
        """'Spring' does not contain the jewelry type 'ring'."""
        sku = generator.generate(SkuAttributes("Spring Planner 2026", "Wisteria"), _never_used)

        assert not sku.startswith("JWL")

    def test_ring_is_jewelry(self, generator):
        """A whole-word jewelry type still routes to the jewelry family."""
        sku = generator.generate(SkuAttributes("Sterling Silver Ring", "Single"), _never_used)

        assert sku.startswith("JWL-")
        assert "-RNG-" in sku

    def test_single_segment_gets_fallback(self, generator):
        """One informative segment is padded with a fallback token."""
        sku = generator.generate(
            SkuAttributes("Clip Band Elastics", "Default Title"), _never_used
        )

        assert sku == "CLP-ELS-DEF"

    def test_options_checked_first(self, generator):
        """Option values win over the variant title."""
        sku = generator.generate(
            SkuAttributes("A5 Dotted Notebook", "Default Title", options=("Lilac",)),
            _never_used,
        )

        assert sku == "NTB-A5-DOT-LIL"

    def test_empty_attributes(self, generator):
        """No text at all still yields a non-empty code."""
        sku = generator.generate(SkuAttributes(), _never_used)

        assert sku == "XXX"

    def test_deterministic(self, generator):
        """Identical input and used set yield the identical code."""
        attrs = SkuAttributes("2026 Daily Planner", "Rosewood")

        assert generator.generate(attrs, _never_used) == generator.generate(attrs, _never_used)


class TestLengthBudget:
    """Tests for the length budget."""

    def test_pack_dropped_first(self):
        """Pack segments go first when over budget."""
        generator = SkuGenerator(max_length=16)

        sku = generator.generate(
            SkuAttributes("Lunar Sterling Silver Stud Earrings", "Pair"), _never_used
        )

        assert sku == "JWL-LNR-EAR-SLV"

    def test_droppable_segment(self):
        """Subtype segments are dropped from the end next."""
        generator = SkuGenerator(max_length=12)

        sku = generator.generate(SkuAttributes("A5 Dotted Notebook", "Wisteria"), _never_used)

        assert sku == "NTB-A5-WIS"

    def test_compacted_and_truncated(self):
        """Separators are removed as a last resort."""
        generator = SkuGenerator(max_length=8)

        sku = generator.generate(SkuAttributes("A5 Dotted Notebook", "Wisteria"), _never_used)

        assert sku == "NTBA5WIS"

    def test_max_length_validated(self):
        """Budgets too small for a suffix are rejected."""
        with pytest.raises(ValueError):
            SkuGenerator(max_length=3)


class TestUniqueness:
    """Tests for collision handling."""

    def test_two_letter_suffix(self, generator):
        """A taken code gets the first free two-letter suffix."""
        used = {"NTB-A5-DOT-WIS", "NTB-A5-DOT-WIS-AA"}

        sku = generator.generate(SkuAttributes("A5 Dotted Notebook", "Wisteria"), used.__contains__)

        assert sku == "NTB-A5-DOT-WIS-AB"

    def test_suffix_refits_budget(self):
        """The suffixed code is compacted to stay within budget."""
        generator = SkuGenerator(max_length=14)
        used = {"NTB-A5-DOT-WIS"}

        sku = generator.generate(SkuAttributes("A5 Dotted Notebook", "Wisteria"), used.__contains__)

        assert sku == "NTBA5DOTWISAA"
        assert len(sku) <= 14

    def test_time_suffix_after_exhaustion(self, generator):
        """When AA..ZZ are all taken a clock-derived suffix is used."""
        base = "NTB-A5-DOT-WIS"

        def is_used(code):
            suffix = code[len(base) + 1:]
            return code == base or (
                code.startswith(base + "-") and len(suffix) == 2 and suffix.isalpha()
            )

        sku = generator.generate(SkuAttributes("A5 Dotted Notebook", "Wisteria"), is_used)

        # clock 1.0s -> 1000ms; base36 "RS".."RZ" are letters, 1008 -> "S0"
        assert sku == "NTB-A5-DOT-WIS-S0"
        assert not is_used(sku)


class TestGenerateBatch:
    """Tests for generate_batch."""

    def test_identical_attributes_distinct_codes(self, generator):
        """Two identical items get distinct codes, the second suffixed."""
        attrs = SkuAttributes("A5 Dotted Notebook", "Wisteria")

        skus = generator.generate_batch([attrs, attrs])

        assert skus == ["NTB-A5-DOT-WIS", "NTB-A5-DOT-WIS-AA"]

    def test_caller_set_not_mutated(self, generator):
        """The caller's used set is left untouched."""
        used = {"NTB-A5-DOT-WIS"}

        skus = generator.generate_batch([SkuAttributes("A5 Dotted Notebook", "Wisteria")], used)

        assert skus == ["NTB-A5-DOT-WIS-AA"]
        assert used == {"NTB-A5-DOT-WIS"}

    def test_used_codes_case_insensitive(self, generator):
        """Used codes are compared upper-cased."""
        skus = generator.generate_batch(
            [SkuAttributes("A5 Dotted Notebook", "Wisteria")], ["ntb-a5-dot-wis"]
        )

        assert skus == ["NTB-A5-DOT-WIS-AA"]

    @pytest.mark.parametrize("max_length", [8, 12, 20])
    def test_code_bound(self, max_length):
        """Every code fits the budget and is unique in the batch."""
        generator = SkuGenerator(max_length=max_length, clock=lambda: 1.0)
        attrs = [
            SkuAttributes("A5 Dotted Notebook", "Wisteria"),
            SkuAttributes("A5 Dotted Notebook", "Wisteria"),
            SkuAttributes("Signature Planner Bundle", "Enchanted Forest / Imperfect"),
            SkuAttributes("Lunar Sterling Silver Stud Earrings", "Pair"),
            SkuAttributes("Gift Card", "$100.00"),
            SkuAttributes("", ""),
        ] * 3
        used = {"NTB-A5-DOT-WIS"}

        skus = generator.generate_batch(attrs, used)

        assert len(set(skus)) == len(skus)
        assert all(0 < len(sku) <= max_length for sku in skus)
        assert not used & set(skus)
