"""Tests for slug derivation."""

import pytest

from shopcart.core.slug import is_valid_slug, slugify


class TestSlugify:
    @pytest.mark.parametrize("name,expected", [
        ("Fresh Vegetables", "fresh-vegetables"),
        ("  Dairy & Eggs  ", "dairy-and-eggs"),
        ("Fruits & Vegetables", "fruits-and-vegetables"),
        ("50% Off $5 Deals", "50percent-off-dollar5-deals"),
        ("Salt | Pepper", "salt-or-pepper"),
        ("Café €", "cafe-euro"),
        ("Bits # Pieces", "bits-pieces"),
        ("Ben's (Best) Cookies!", "bens-best-cookies"),
        ("Crème Brûlée", "creme-brulee"),
        ("snake_case__name", "snake-case-name"),
        ("Fish--and---Chips", "fish-and-chips"),
        ("5.5kg Bag", "55kg-bag"),
        ("email@home: now", "emailhome-now"),
    ])
    def test_slugify(self, name, expected):
        assert slugify(name) == expected

    @pytest.mark.parametrize("name", [
        "Fresh Vegetables", "Crème Brûlée", "--a__b  c--", "Ben's (Best) Cookies!", "ÅÄÖ 123",
        "Fruits & Vegetables", "50% <> 100%",
    ])
    def test_idempotent(self, name):
        once = slugify(name)
        assert slugify(once) == once

    def test_result_matches_slug_pattern(self):
        assert is_valid_slug(slugify("Organic Baby Spinach 250g"))

    def test_symbols_only_gives_empty_slug(self):
        assert slugify("!!! ***") == ""

    def test_pattern_rejects_uppercase(self):
        assert not is_valid_slug("Fresh-Vegetables")
        assert not is_valid_slug("")
