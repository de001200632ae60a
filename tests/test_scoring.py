"""Tests for recipe scoring."""

import pytest

from budget_meals.pricing import RecipePricing
from budget_meals.recipes import Ingredient, Nutrition
from budget_meals.scoring import (
    STAPLE_INGREDIENTS,
    budget_score,
    common_ingredients_score,
    nutrition_score,
    score_recipe,
    score_recipes,
    versatility_score,
)


class TestBudgetScore:
    """Tests for budget_score thresholds."""

    @pytest.mark.parametrize(
        "cost,expected",
        [
            (5.0, 1.0),
            (7.0, 1.0),
            (7.01, 0.8),
            (10.0, 0.8),
            (12.0, 0.5),
            (12.01, 0.2),
            (30.0, 0.2),
        ],
    )
    def test_thresholds(self, cost, expected):
        assert budget_score(cost, 10.0) == expected

    def test_zero_budget(self):
        assert budget_score(5.0, 0) == 0.2


class TestNutritionScore:
    def test_high_protein_moderate_calories(self, make_recipe):
        recipe = make_recipe(nutrition=Nutrition(calories=400, protein=25))
        assert nutrition_score(recipe) == 1.0

    def test_bands(self, make_recipe):
        assert nutrition_score(make_recipe(nutrition=Nutrition(protein=16))) == pytest.approx(0.7)
        assert nutrition_score(make_recipe(nutrition=Nutrition(protein=10))) == pytest.approx(0.6)
        assert nutrition_score(make_recipe()) == 0.5


class TestVersatilityScore:
    def test_capped_at_one(self, make_recipe):
        recipe = make_recipe(tags=("kid-friendly",), prep_time=10, servings=6)
        assert versatility_score(recipe) == 1.0

    def test_hard_long_recipe(self, make_recipe):
        recipe = make_recipe(difficulty="Hard", prep_time=45, servings=2)
        assert versatility_score(recipe) == 0.5


class TestCommonIngredientsScore:
    def test_declared_and_staples(self, make_recipe):
        recipe = make_recipe(
            ingredients=[Ingredient(name, 1, "whole") for name in STAPLE_INGREDIENTS],
            common_ingredients=("onion",),
        )
        assert common_ingredients_score(recipe) == pytest.approx(0.8)

    def test_nothing_common(self, make_recipe):
        recipe = make_recipe(ingredients=[Ingredient("tofu", 1, "lbs")])
        assert common_ingredients_score(recipe) == pytest.approx(0.3)


class TestScoreRecipe:
    def test_weighted_total(self, rice_and_beans):
        pricing = RecipePricing(total_cost=4.0, cost_per_serving=1.0)
        scored = score_recipe(rice_and_beans, pricing, budget_per_meal=20.0, people=4)

        expected = (
            0.4 * scored.budget_score
            + 0.2 * scored.nutrition_score
            + 0.2 * scored.versatility_score
            + 0.2 * scored.common_ingredients_score
        )
        assert scored.score == pytest.approx(expected, abs=1e-4)
        assert scored.scaled_cost == 4.0
        assert scored.budget_score == 1.0
        assert 0 <= scored.score <= 1

    def test_scaled_cost_uses_headcount(self, rice_and_beans):
        pricing = RecipePricing(total_cost=4.0, cost_per_serving=1.0)
        scored = score_recipe(rice_and_beans, pricing, budget_per_meal=20.0, people=6)
        assert scored.scaled_cost == 6.0


class TestScoreRecipes:
    def test_sorted_best_first(self, sample_recipes, resolver):
        scored = score_recipes(
            sample_recipes, budget=100, meals_count=3, people=4, resolver=resolver
        )
        scores = [s.score for s in scored]
        assert scores == sorted(scores, reverse=True)
        assert len(scored) == 3

    def test_no_meals(self, sample_recipes, resolver):
        assert score_recipes(sample_recipes, 100, 0, 4, resolver) == []
