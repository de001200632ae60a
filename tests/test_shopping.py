"""Tests for shopping list consolidation."""

import pytest

from budget_meals.pricing import RecipePricing
from budget_meals.recipes import Ingredient
from budget_meals.scaler import ScaledIngredient, scale_meal
from budget_meals.scoring import score_recipe
from budget_meals.shopping import (
    CATEGORY_LABELS,
    ConsolidatedItem,
    build_shopping_list,
    categorize,
    check_bulk_deal,
    consolidate_ingredients,
    normalize_ingredient_name,
    sort_by_shopping_flow,
)


def scaled(name, amount, unit, category="pantry", store_unit=None):
    return ScaledIngredient(Ingredient(name, amount, unit, category, store_unit), amount)


def item(name, amount=1.0, unit="lbs", category="pantry", price=0.0):
    return ConsolidatedItem(name=name, amount=amount, unit=unit, category=category, price=price)


class TestNormalizeIngredientName:
    @pytest.mark.parametrize(
        "name,expected",
        [
            ("Yellow Onions", "yellow onion"),
            ("  Eggs ", "egg"),
            ("chicken thighs", "chicken thigh"),
            ("white rice", "white rice"),
            ("", ""),
        ],
    )
    def test_normalize(self, name, expected):
        assert normalize_ingredient_name(name) == expected


class TestConsolidateIngredients:
    """Tests for consolidate_ingredients function."""

    def test_merges_by_max_not_sum(self):
        items = consolidate_ingredients(
            [
                (scaled("onion", 1, "whole", "produce"), "Chili"),
                (scaled("Onions", 2, "whole", "produce"), "Soup"),
                (scaled("onion", 1.5, "whole", "produce"), "Stir-Fry"),
            ]
        )

        assert len(items) == 1
        assert items[0].amount == 2
        assert items[0].used_in_meals == ["Chili", "Soup", "Stir-Fry"]

    def test_meal_recorded_once(self):
        items = consolidate_ingredients(
            [
                (scaled("garlic", 2, "cloves", "produce"), "Chili"),
                (scaled("garlic", 3, "cloves", "produce"), "Chili"),
            ]
        )
        assert items[0].used_in_meals == ["Chili"]
        assert items[0].amount == 3

    def test_different_units_kept_apart(self):
        items = consolidate_ingredients(
            [
                (scaled("milk", 2, "cups", "dairy"), "Oatmeal"),
                (scaled("milk", 1, "gallon", "dairy"), "Soup"),
            ]
        )
        assert len(items) == 2

    def test_unit_synonyms_merge(self):
        items = consolidate_ingredients(
            [
                (scaled("milk", 2, "cup", "dairy"), "Oatmeal"),
                (scaled("milk", 3, "cups", "dairy"), "Soup"),
            ]
        )
        assert len(items) == 1
        assert items[0].amount == 3

    def test_store_unit_follows_largest(self):
        items = consolidate_ingredients(
            [
                (scaled("tuna", 1, "cans", "meat", "1 can tuna"), "Salad"),
                (scaled("tuna", 3, "cans", "meat", "3 cans tuna"), "Casserole"),
            ]
        )
        assert items[0].grocery_description == "3 cans tuna"


class TestCategorize:
    def test_store_order_and_empty_omitted(self):
        groups = categorize(
            [item("frozen peas", category="frozen"), item("onion", category="produce")]
        )
        assert list(groups) == ["produce", "frozen"]
        assert groups["produce"].label == CATEGORY_LABELS["produce"]

    def test_shopping_flow_order(self):
        ordered = sort_by_shopping_flow(
            [item("banana"), item("zucchini"), item("garlic"), item("onion")], "produce"
        )
        assert [i.name for i in ordered] == ["onion", "garlic", "banana", "zucchini"]


class TestCheckBulkDeal:
    """Tests for check_bulk_deal function."""

    def test_recommended_when_enough_weight(self):
        option = check_bulk_deal(item("ground beef", amount=2.5, unit="lbs", price=12.45))
        assert option is not None
        assert option.bulk_size == 3
        assert option.bulk_price == pytest.approx(10.58, abs=0.01)
        assert option.savings == pytest.approx(1.87, abs=0.01)
        assert option.recommended is True

    def test_below_threshold(self):
        assert check_bulk_deal(item("ground beef", amount=1, price=4.98)) is None

    def test_ounces_converted(self):
        option = check_bulk_deal(item("ground beef", amount=40, unit="oz", price=12.45))
        assert option is not None

    def test_non_weight_unit(self):
        assert check_bulk_deal(item("white rice", amount=30, unit="cups", price=7.0)) is None

    def test_keyword_must_end_name(self):
        assert check_bulk_deal(item("onion powder", amount=5, price=3.0)) is None

    def test_small_savings_not_recommended(self):
        option = check_bulk_deal(item("onion", amount=3, price=3.84))
        assert option is not None
        assert option.recommended is False


class TestBuildShoppingList:
    """Tests for build_shopping_list function."""

    @pytest.fixture
    def meals(self, rice_and_beans, cheesy_pasta):
        meals = []
        for recipe in (rice_and_beans, cheesy_pasta):
            pricing = RecipePricing(total_cost=4.0, cost_per_serving=1.0)
            meals.append(scale_meal(score_recipe(recipe, pricing, 10.0, 4), 4))
        return meals

    def test_consolidates_and_prices(self, meals, resolver):
        shopping = build_shopping_list(meals, resolver)

        names = [i.name for i in shopping.items]
        assert names.count("onion") == 1
        onion = next(i for i in shopping.items if i.name == "onion")
        assert onion.used_in_meals == ["Black Beans & Rice", "Cheesy Pasta"]
        assert all(i.price > 0 for i in shopping.items)
        assert shopping.meal_count == 2

    def test_totals(self, meals, resolver):
        shopping = build_shopping_list(meals, resolver)
        totals = shopping.totals

        assert totals.total_items == len(shopping.items)
        assert totals.total_cost == pytest.approx(sum(i.price for i in shopping.items))
        assert sum(totals.category_totals.values()) == pytest.approx(totals.total_cost)
        assert totals.average_per_item == round(totals.total_cost / totals.total_items, 2)

    def test_milk_priced_from_table(self, meals, resolver):
        shopping = build_shopping_list(meals, resolver)
        milk = next(i for i in shopping.items if i.name == "milk")
        assert milk.price == 0.23
        assert milk.grocery_description == "1 gallon milk"

    def test_empty(self, resolver):
        shopping = build_shopping_list([], resolver)
        assert shopping.items == []
        assert shopping.totals.total_cost == 0
        assert shopping.totals.average_per_item == 0

    def test_to_dict(self, meals, resolver):
        data = build_shopping_list(meals, resolver, "10001").to_dict()
        assert data["location"] == "10001"
        assert list(data["categories"]) == ["produce", "dairy", "pantry"]
        first = data["categories"]["produce"]["items"][0]
        assert {"name", "storeUnit", "price", "usedInMeals", "bulkOption"} <= set(first)
