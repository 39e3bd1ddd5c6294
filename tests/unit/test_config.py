"""Unit tests for settings loaded from the environment."""
import pytest
from pydantic import ValidationError

from customs_engine.config import (
    ClassificationSettings,
    MatchingSettings,
    ReconcileSettings,
    SkuSettings,
)


class TestSettings:
    """Tests for per-concern settings."""

    def test_defaults(self, monkeypatch):
        """Defaults apply when no variables are set."""
        for name in ("MATCH_FUZZY_THRESHOLD", "SKU_MAX_LENGTH", "RECONCILE_APPEND_SKU_TO_DESCRIPTION"):
            monkeypatch.delenv(name, raising=False)

        assert MatchingSettings().fuzzy_threshold == 0.34
        assert MatchingSettings().strict_threshold == 0.45
        assert SkuSettings().max_length == 20
        assert SkuSettings().imperfect_code == "IM"
        assert ReconcileSettings().append_sku_to_description is False

    def test_env_override(self, monkeypatch):
        """Prefixed variables override defaults."""
        monkeypatch.setenv("MATCH_FUZZY_THRESHOLD", "0.45")
        monkeypatch.setenv("SKU_MAX_LENGTH", "24")
        monkeypatch.setenv("RECONCILE_APPEND_SKU_TO_DESCRIPTION", "true")

        assert MatchingSettings().fuzzy_threshold == 0.45
        assert SkuSettings().max_length == 24
        assert ReconcileSettings().append_sku_to_description is True

    def test_out_of_range_rejected(self, monkeypatch):
        """Invalid values fail validation."""
        monkeypatch.setenv("CLASSIFY_CATEGORY_FUZZY_THRESHOLD", "150")

        with pytest.raises(ValidationError):
            ClassificationSettings()
