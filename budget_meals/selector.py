"""Choose a week of meals that fits the budget and shares ingredients."""

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .filters import filter_recipes
from .pricing import PricingResolver
from .recipes import Recipe
from .scaler import ScaledMeal, calculate_total_portions, scale_meal
from .scoring import ScoredRecipe, score_recipes

if TYPE_CHECKING:
    from .planner import FamilyParams
    from .sources import RecipeSource

logger = logging.getLogger(__name__)

# The overlap pass only runs while this share of the budget is still unspent
OVERLAP_PASS_THRESHOLD = 0.9


@dataclass
class Selection:
    """Result of optimizing a selection."""

    meals: list[ScoredRecipe] = field(default_factory=list)
    total_cost: float = 0.0
    warnings: list[str] = field(default_factory=list)


def calculate_scaled_cost(scored: ScoredRecipe, people: float) -> float:
    """Cost of a recipe scaled from its servings to ``people``."""
    return scored.pricing.total_cost * people / scored.recipe.servings


def _ingredient_keys(recipe: Recipe) -> list[str]:
    return [ing.name.lower() for ing in recipe.ingredients]


def optimize_selection(
    scored: list[ScoredRecipe],
    budget: float,
    meals_count: int,
    people: float,
) -> Selection:
    """
    Pick up to ``meals_count`` recipes within ``budget``.

    Three passes: best score first, then recipes that reuse ingredients
    already on the list (per dollar), then the cheapest remaining recipes.
    If nothing fits at all, the single cheapest recipe is taken anyway and
    a warning is recorded.

    Args:
        scored: Scored recipes, best first
        budget: Total budget for all meals
        meals_count: Number of meals wanted
        people: Headcount the costs are scaled to

    Returns:
        Selection with meals in the order they were chosen
    """
    result = Selection()
    if meals_count <= 0 or not scored:
        return result

    costs = {id(s): calculate_scaled_cost(s, people) for s in scored}
    chosen: set[int] = set()

    def add(s: ScoredRecipe) -> None:
        result.meals.append(s)
        result.total_cost += costs[id(s)]
        chosen.add(id(s))

    def fits(s: ScoredRecipe) -> bool:
        return result.total_cost + costs[id(s)] <= budget

    # Pass 1: by score
    for s in sorted(scored, key=lambda s: s.score, reverse=True):
        if len(result.meals) >= meals_count:
            break
        if fits(s):
            add(s)

    # Pass 2: ingredient overlap per dollar
    if len(result.meals) < meals_count and result.total_cost <= budget * OVERLAP_PASS_THRESHOLD:
        used = Counter(key for s in result.meals for key in _ingredient_keys(s.recipe))

        def efficiency(s: ScoredRecipe) -> float:
            overlap = sum(used[key] for key in _ingredient_keys(s.recipe))
            cost = costs[id(s)]
            return overlap / cost if cost > 0 else float(overlap)

        remaining = [s for s in scored if id(s) not in chosen]
        for s in sorted(remaining, key=efficiency, reverse=True):
            if len(result.meals) >= meals_count:
                break
            if fits(s):
                add(s)
                used.update(_ingredient_keys(s.recipe))

    # Pass 3: cheapest first
    if len(result.meals) < meals_count:
        remaining = [s for s in scored if id(s) not in chosen]
        for s in sorted(remaining, key=lambda s: costs[id(s)]):
            if len(result.meals) >= meals_count:
                break
            if fits(s):
                add(s)

    if not result.meals:
        cheapest = min(scored, key=lambda s: costs[id(s)])
        add(cheapest)
        message = (
            f"No meal fits the ${budget:.2f} budget; including the cheapest option "
            f"({cheapest.name}, ${costs[id(cheapest)]:.2f})"
        )
        logger.warning(message)
        result.warnings.append(message)

    result.total_cost = round(result.total_cost, 2)
    logger.info(
        "Selected %d of %d meals for $%.2f (budget $%.2f)",
        len(result.meals),
        meals_count,
        result.total_cost,
        budget,
    )
    return result


class MealSelector:
    """Runs filter, score, optimize, and scale over a recipe source."""

    def __init__(self, source: "RecipeSource", resolver: PricingResolver):
        self.source = source
        self.resolver = resolver
        self.meals: list[ScaledMeal] = []
        self.warnings: list[str] = []
        self.candidate_count = 0

    def candidates(self, params: "FamilyParams") -> list[ScoredRecipe]:
        """Fetch, filter, and score the recipes available for a family."""
        recipes = self.source.get_recipes(
            family_size=params.total_people,
            budget=params.weekly_budget,
            zip_code=params.zip_code,
            dietary_restrictions=params.allergies,
        )
        recipes = filter_recipes(recipes, params.allergies)
        return score_recipes(
            recipes,
            params.weekly_budget,
            params.meals_count,
            params.total_people,
            self.resolver,
            params.location,
        )

    def select_meals(self, params: "FamilyParams") -> list[ScaledMeal]:
        """Choose and scale meals for a family, remembering the selection."""
        scored = self.candidates(params)
        self.candidate_count = len(scored)
        selection = optimize_selection(
            scored, params.weekly_budget, params.meals_count, params.total_people
        )
        portions = calculate_total_portions(params.total_people, params.child_ages)
        self.meals = [scale_meal(s, portions) for s in selection.meals]
        self.warnings = list(selection.warnings)
        return self.meals

    def regenerate_meal(self, index: int, params: "FamilyParams") -> ScaledMeal | None:
        """
        Replace one selected meal with the best-scoring alternative.

        The replacement is never the meal being replaced nor any meal already
        in the plan.

        Returns:
            The new meal, or None for a bad index or when nothing is left
        """
        if index < 0 or index >= len(self.meals):
            return None

        taken = {meal.recipe.id for meal in self.meals}
        alternatives = [s for s in self.candidates(params) if s.recipe.id not in taken]
        if not alternatives:
            logger.info("No alternative recipe available for slot %d", index + 1)
            return None

        portions = calculate_total_portions(params.total_people, params.child_ages)
        replacement = scale_meal(alternatives[0], portions)
        logger.info("Replaced %s with %s", self.meals[index].name, replacement.name)
        self.meals[index] = replacement
        return replacement
