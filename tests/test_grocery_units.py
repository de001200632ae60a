"""Tests for grocery-sized purchase descriptions."""

import pytest

from budget_meals.grocery_units import GroceryItem, format_grocery_item


class TestGroceryItem:
    def test_count_rounds_up(self):
        assert GroceryItem("black beans", 1.5, "cans", "pantry").count == 2

    def test_count_at_least_one(self):
        assert GroceryItem("salt", 0.25, "tsp", "pantry").count == 1


class TestFormatGroceryItem:
    """Tests for format_grocery_item rule table."""

    @pytest.mark.parametrize(
        "name,amount,unit,category,expected",
        [
            ("milk", 2, "cups", "dairy", "1 gallon milk"),
            ("butter", 3, "tbsp", "dairy", "1 lb butter"),
            ("olive oil", 2, "tbsp", "pantry", "1 bottle cooking oil"),
            ("chicken broth", 6, "cups", "pantry", "2 cartons broth (32oz each)"),
            ("chicken broth", 4, "cups", "pantry", "1 carton broth (32oz)"),
            ("cumin", 1, "tsp", "spices", "1 container cumin"),
            ("white rice", 3, "cups", "pantry", "1 bag rice (5lbs)"),
        ],
    )
    def test_unit_rules(self, name, amount, unit, category, expected):
        assert format_grocery_item(name, amount, unit, category) == expected

    @pytest.mark.parametrize(
        "name,amount,unit,category,expected",
        [
            ("potatoes", 3.2, "lbs", "produce", "1 bag Russet Potatoes (5lbs)"),
            ("onion", 2, "whole", "produce", "1 bag Yellow Onions (3lbs)"),
            ("red onion", 1, "whole", "produce", "1 Large Red Onion"),
            ("red onion", 4, "whole", "produce", "1 bag Red Onions (2lbs)"),
            ("bell pepper", 3, "whole", "produce", "3 Bell Peppers (mixed colors)"),
            ("garlic", 6, "cloves", "produce", "1 head Fresh Garlic"),
            ("diced tomatoes", 2, "cans", "produce", "2 cans diced tomatoes"),
        ],
    )
    def test_produce_rules(self, name, amount, unit, category, expected):
        assert format_grocery_item(name, amount, unit, category) == expected

    def test_black_beans_cans(self):
        assert (
            format_grocery_item("black beans", 1.5, "cans", "pantry")
            == "2 cans Black Beans (15oz each)"
        )

    def test_single_can(self):
        assert (
            format_grocery_item("kidney beans", 1, "cans", "pantry")
            == "1 can Kidney Beans (15oz)"
        )

    def test_meat_rules(self):
        assert (
            format_grocery_item("ground beef", 2, "lbs", "meat")
            == "2 packages Ground Beef 80/20 (1lb each)"
        )
        assert (
            format_grocery_item("chicken breast", 3, "lbs", "meat")
            == "1 family pack Chicken Breasts (3lbs)"
        )
        assert (
            format_grocery_item("chicken thighs", 1.5, "lbs", "meat")
            == "1 package Chicken Thighs (1.5lbs)"
        )

    def test_dairy_rules(self):
        assert format_grocery_item("eggs", 3, "whole", "dairy") == "1 dozen Large Eggs"
        assert (
            format_grocery_item("cheddar cheese", 2, "oz", "dairy")
            == "1 package cheddar cheese (8oz)"
        )

    def test_frozen_rules(self):
        assert (
            format_grocery_item("mixed vegetables", 2, "cups", "frozen")
            == "2 bags Frozen Mixed Vegetables (12oz each)"
        )

    def test_generic_fallback(self):
        assert (
            format_grocery_item("tofu", 1, "lbs", "pantry")
            == "1 package/container tofu (standard size)"
        )
        assert (
            format_grocery_item("tofu", 2, "lbs", "pantry")
            == "2 packages/containers tofu (standard size each)"
        )

    def test_deterministic(self):
        first = format_grocery_item("cheddar cheese", 1.5, "cups", "dairy")
        assert first == format_grocery_item("cheddar cheese", 1.5, "cups", "dairy")
