"""Multi-factor desirability scoring of recipes."""

import logging
from dataclasses import dataclass

from .pricing import PricingResolver, RecipePricing
from .recipes import Recipe

logger = logging.getLogger(__name__)

BUDGET_WEIGHT = 0.4
NUTRITION_WEIGHT = 0.2
VERSATILITY_WEIGHT = 0.2
COMMON_WEIGHT = 0.2

STAPLE_INGREDIENTS = ("onion", "garlic", "oil", "salt", "pepper", "flour", "rice")


@dataclass(frozen=True)
class ScoredRecipe:
    """A recipe with its pricing and score breakdown."""

    recipe: Recipe
    pricing: RecipePricing
    scaled_cost: float
    score: float
    budget_score: float
    nutrition_score: float
    versatility_score: float
    common_ingredients_score: float

    @property
    def name(self) -> str:
        return self.recipe.name


def budget_score(scaled_cost: float, budget_per_meal: float) -> float:
    """Score a meal's cost relative to its share of the budget."""
    if budget_per_meal <= 0:
        return 0.2
    ratio = scaled_cost / budget_per_meal
    if ratio <= 0.7:
        return 1.0
    if ratio <= 1.0:
        return 0.8
    if ratio <= 1.2:
        return 0.5
    return 0.2


def nutrition_score(recipe: Recipe) -> float:
    score = 0.5
    protein = recipe.nutrition.protein
    if protein >= 20:
        score += 0.3
    elif protein >= 15:
        score += 0.2
    elif protein >= 10:
        score += 0.1

    if 300 <= recipe.nutrition.calories <= 500:
        score += 0.2
    return min(score, 1.0)


def versatility_score(recipe: Recipe) -> float:
    score = 0.5
    if "kid-friendly" in recipe.tags:
        score += 0.3
    if recipe.difficulty == "Easy":
        score += 0.2
    if recipe.prep_time <= 15:
        score += 0.1
    if recipe.servings >= 6:
        score += 0.1
    return min(score, 1.0)


def common_ingredients_score(recipe: Recipe) -> float:
    """Reward recipes built from pantry staples the family likely has."""
    score = 0.5 if recipe.common_ingredients else 0.3
    names = [ing.name.lower() for ing in recipe.ingredients]
    present = sum(1 for staple in STAPLE_INGREDIENTS if any(staple in n for n in names))
    score += 0.3 * present / len(STAPLE_INGREDIENTS)
    return min(score, 1.0)


def scaled_cost_for(pricing: RecipePricing, servings: int, people: float) -> float:
    return pricing.total_cost * people / servings


def score_recipe(
    recipe: Recipe,
    pricing: RecipePricing,
    budget_per_meal: float,
    people: float,
) -> ScoredRecipe:
    """
    Score one recipe.

    Args:
        recipe: Recipe to score
        pricing: Its cost at the stated servings
        budget_per_meal: Weekly budget divided by the number of meals
        people: Number of people the meal is scaled to

    Returns:
        ScoredRecipe with a total score in [0, 1]
    """
    scaled_cost = scaled_cost_for(pricing, recipe.servings, people)
    b = budget_score(scaled_cost, budget_per_meal)
    n = nutrition_score(recipe)
    v = versatility_score(recipe)
    c = common_ingredients_score(recipe)
    total = BUDGET_WEIGHT * b + NUTRITION_WEIGHT * n + VERSATILITY_WEIGHT * v + COMMON_WEIGHT * c

    return ScoredRecipe(
        recipe=recipe,
        pricing=pricing,
        scaled_cost=round(scaled_cost, 2),
        score=round(total, 4),
        budget_score=b,
        nutrition_score=n,
        versatility_score=v,
        common_ingredients_score=c,
    )


def score_recipes(
    recipes: list[Recipe],
    budget: float,
    meals_count: int,
    people: float,
    resolver: PricingResolver,
    location: str | None = None,
) -> list[ScoredRecipe]:
    """Price and score recipes, best first; ties keep catalog order."""
    if meals_count <= 0:
        return []
    budget_per_meal = budget / meals_count

    scored = [
        score_recipe(recipe, resolver.price_recipe(recipe, location), budget_per_meal, people)
        for recipe in recipes
    ]
    scored.sort(key=lambda s: s.score, reverse=True)
    logger.debug("Scored %d recipes (budget per meal $%.2f)", len(scored), budget_per_meal)
    return scored
