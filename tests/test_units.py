"""Unit tests for unit normalization and conversion."""

import pytest

from budget_meals.units import conversion_ratio, get_unit_type, normalize_unit, to_base_amount


class TestNormalizeUnit:
    """Tests for normalize_unit function."""

    @pytest.mark.parametrize(
        "unit,expected",
        [
            ("cup", "cups"),
            ("Tablespoons", "tbsp"),
            ("teaspoon", "tsp"),
            ("lb", "lbs"),
            ("pounds", "lbs"),
            ("ounce", "oz"),
            ("can", "cans"),
            ("each", "whole"),
            (" clove ", "cloves"),
        ],
    )
    def test_synonyms(self, unit, expected):
        assert normalize_unit(unit) == expected

    def test_unknown_unit_lowercased(self):
        assert normalize_unit("Sprigs") == "sprigs"

    def test_empty(self):
        assert normalize_unit(None) == ""
        assert normalize_unit("") == ""


class TestGetUnitType:
    """Tests for get_unit_type function."""

    def test_weight(self):
        assert get_unit_type("lb") == "weight"
        assert get_unit_type("oz") == "weight"

    def test_volume(self):
        assert get_unit_type("cup") == "volume"
        assert get_unit_type("tsp") == "volume"
        assert get_unit_type("gallon") == "volume"

    def test_package(self):
        assert get_unit_type("can") == "package"
        assert get_unit_type("dozen") == "package"

    def test_unknown(self):
        assert get_unit_type("pinch") == "unknown"


class TestConversionRatio:
    """Tests for conversion_ratio function."""

    def test_package_table(self):
        assert conversion_ratio("gallon", "cups") == 16
        assert conversion_ratio("dozen", "whole") == 12
        assert conversion_ratio("head", "cloves") == 10

    def test_ingredient_specific_ratio_wins(self):
        assert conversion_ratio("5lb", "cups", "all-purpose flour") == 20
        assert conversion_ratio("5lb", "cups", "white rice") == 11

    def test_weight_to_weight(self):
        assert conversion_ratio("lb", "oz") == 16

    def test_volume_to_volume(self):
        assert conversion_ratio("cups", "tbsp") == 16

    def test_unknown_pair(self):
        assert conversion_ratio("bunch", "oz") is None


class TestToBaseAmount:
    """Tests for to_base_amount function."""

    def test_cups_of_milk_in_gallons(self):
        assert to_base_amount(2, "cups", "gallon") == pytest.approx(0.125)

    def test_cloves_in_heads(self):
        assert to_base_amount(4, "cloves", "head") == pytest.approx(0.4)

    def test_same_unit(self):
        assert to_base_amount(3, "lbs", "lb") == 3

    def test_unknown_pair_is_unitless(self):
        assert to_base_amount(3, "peppers", "each") == 3

    def test_spice_teaspoons(self):
        assert to_base_amount(1, "tsp", "container") == pytest.approx(1 / 24)
