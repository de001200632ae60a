"""Portion math: child weights, family portions, and meal scaling."""

import math
from dataclasses import dataclass

from .pricing import RecipePricing
from .recipes import Ingredient
from .scoring import ScoredRecipe

ADULT_PORTION = 1.0


def child_portion_weight(age: int) -> float:
    """
    Portion weight of a child relative to an adult.

    Examples:
        child_portion_weight(4) -> 0.5
        child_portion_weight(8) -> 0.7
        child_portion_weight(12) -> 0.9
    """
    if age <= 5:
        return 0.5
    if age <= 10:
        return 0.7
    return 0.9


def calculate_total_portions(total_people: int, child_ages: list[int]) -> float:
    """
    Adult-equivalent portions for a family.

    Args:
        total_people: Adults plus kids
        child_ages: Ages of the kids

    Returns:
        Adults at full weight plus each child's weight
    """
    adults = total_people - len(child_ages)
    total = adults * ADULT_PORTION + sum(child_portion_weight(age) for age in child_ages)
    return round(total, 2)


@dataclass(frozen=True)
class ScaledIngredient:
    """An ingredient with scaled amount."""

    original: Ingredient
    amount: float

    @property
    def name(self) -> str:
        return self.original.name

    @property
    def unit(self) -> str:
        return self.original.unit

    @property
    def category(self) -> str:
        return self.original.category

    def __str__(self) -> str:
        qty = self.amount
        if qty == int(qty):
            qty_text = str(int(qty))
        else:
            qty_text = f"{qty:.2f}".rstrip("0").rstrip(".")
        return f"{qty_text} {self.unit} {self.name}"


@dataclass(frozen=True)
class ScaledMeal:
    """A selected recipe scaled to the family's portions."""

    scored: ScoredRecipe
    ingredients: tuple[ScaledIngredient, ...]
    scale_factor: float
    total_portions: float
    scaled_servings: int
    pricing: RecipePricing

    @property
    def recipe(self):
        return self.scored.recipe

    @property
    def name(self) -> str:
        return self.scored.recipe.name

    @property
    def total_cost(self) -> float:
        return self.pricing.total_cost


def scale_meal(scored: ScoredRecipe, total_portions: float) -> ScaledMeal:
    """
    Scale a scored recipe to a number of adult-equivalent portions.

    Ingredient amounts and cost are multiplied by
    ``total_portions / servings``; the original recipe is untouched.

    Raises:
        ValueError: If total_portions is not positive
    """
    if total_portions <= 0:
        raise ValueError(f"Total portions must be positive, got {total_portions}")

    recipe = scored.recipe
    scale_factor = total_portions / recipe.servings
    # Absorb float error from summed child weights
    scaled_servings = math.ceil(round(total_portions, 6))

    ingredients = tuple(
        ScaledIngredient(original=ing, amount=round(ing.amount * scale_factor, 2))
        for ing in recipe.ingredients
    )

    return ScaledMeal(
        scored=scored,
        ingredients=ingredients,
        scale_factor=scale_factor,
        total_portions=total_portions,
        scaled_servings=scaled_servings,
        pricing=scored.pricing.scaled(scale_factor, scaled_servings),
    )


def format_scale_info(meal: ScaledMeal) -> str:
    """Human-readable summary of how a meal was scaled."""
    original = meal.recipe.servings
    if abs(meal.scale_factor - 1.0) < 0.001:
        return f"{original} servings (original)"
    return (
        f"{original} → {meal.scaled_servings} servings "
        f"({meal.total_portions:g} portions, ×{meal.scale_factor:.2f})"
    )
