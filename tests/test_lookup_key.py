"""Tests for the lookup key function."""

import pytest

from betnorm.normalization.lookup_key import to_lookup_key


class TestToLookupKey:
    """Tests for to_lookup_key."""

    @pytest.mark.parametrize(
        "raw",
        [
            "Phoenix Suns",
            "  Phoenix Suns  ",
            "PHOENIX   SUNS",
            "phoenix\tsuns",
            "Phoenix\u00a0Suns",
            "\nPhoenix \u202fSuns\n",
        ],
    )
    def test_whitespace_and_case_variants_share_a_key(self, raw):
        """Test that spacing, case and no-break spaces collapse to one key."""
        assert to_lookup_key(raw) == "phoenix suns"

    def test_smart_punctuation_folds_to_ascii(self):
        """Test that typographic quotes and dashes fold."""
        assert to_lookup_key("De’Aaron Fox") == "de'aaron fox"
        assert to_lookup_key("“King” James") == '"king" james'
        assert to_lookup_key("Smith–Njigba") == "smith-njigba"
        assert to_lookup_key("Smith—Njigba") == to_lookup_key("Smith-Njigba")

    def test_accents_survive(self):
        """Test that accented names stay distinct from their ASCII spelling."""
        assert to_lookup_key("José Ramírez") == "josé ramírez"
        assert to_lookup_key("José") != to_lookup_key("Jose")

    def test_composed_and_decomposed_forms_match(self):
        """Test that NFD input yields the NFC key."""
        assert to_lookup_key("Jose\u0301") == to_lookup_key("José")

    def test_ascii_punctuation_is_kept(self):
        assert to_lookup_key("St. Louis Blues") == "st. louis blues"

    @pytest.mark.parametrize("raw", [None, "", "   ", "\u00a0\t"])
    def test_empty_input_gives_empty_key(self, raw):
        assert to_lookup_key(raw) == ""

    @pytest.mark.parametrize(
        "raw",
        ["LeBron James", "  De’Aaron\u00a0FOX ", "İstanbul", "Jose\u0301 Ramírez", "A  —  B"],
    )
    def test_idempotent(self, raw):
        """Test that the key of a key is itself."""
        key = to_lookup_key(raw)
        assert to_lookup_key(key) == key
