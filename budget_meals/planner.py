"""Meal planning: validate a family's request, select meals, and build the shopping list."""

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from .config import DEFAULT_MEALS_COUNT, MIN_WEEKLY_BUDGET, Settings, load_settings
from .errors import InvalidInputError
from .pricing import PricingResolver, build_default_resolver
from .scaler import ScaledMeal, format_scale_info
from .selector import MealSelector
from .shopping import ShoppingList, build_shopping_list
from .sources import CatalogRecipeSource, RecipeSource

logger = logging.getLogger(__name__)

ZIP_CODE_RE = re.compile(r"^\d{5}$")


@dataclass
class FamilyParams:
    """Who is eating, how often, and for how much."""

    weekly_budget: float
    adults: int
    kids: int = 0
    kid_ages: list[int] = field(default_factory=list)
    zip_code: str | None = None
    meals_count: int = DEFAULT_MEALS_COUNT
    allergies: str | None = None

    @property
    def total_people(self) -> int:
        return self.adults + self.kids

    @property
    def child_ages(self) -> list[int]:
        """Ages of the kids actually counted (extra ages are ignored)."""
        return self.kid_ages[: self.kids]

    @property
    def location(self) -> str | None:
        return self.zip_code or None


def parse_kid_ages(text: str | None) -> list[int]:
    """
    Parse comma-separated kid ages.

    Examples:
        "4, 8" -> [4, 8]

    Raises:
        InvalidInputError: If an age is not a whole number
    """
    if not text:
        return []
    ages = []
    for token in text.split(","):
        token = token.strip()
        if not token:
            continue
        try:
            ages.append(int(token))
        except ValueError:
            raise InvalidInputError(f"Invalid kid age: {token!r}") from None
    return ages


def validate_params(params: FamilyParams) -> None:
    """
    Reject unusable family parameters before any work is done.

    Raises:
        InvalidInputError: Describing the first problem found
    """
    if params.weekly_budget < MIN_WEEKLY_BUDGET:
        raise InvalidInputError(
            f"Weekly budget must be at least ${MIN_WEEKLY_BUDGET:.0f} "
            f"(got ${params.weekly_budget:.2f})"
        )
    if params.adults < 1:
        raise InvalidInputError("At least one adult is required")
    if params.kids < 0:
        raise InvalidInputError("Number of kids cannot be negative")
    if params.kids > 0 and len(params.kid_ages) < params.kids:
        raise InvalidInputError(
            f"Expected {params.kids} kid ages, got {len(params.kid_ages)}"
        )
    if any(age < 0 for age in params.child_ages):
        raise InvalidInputError("Kid ages cannot be negative")
    if params.meals_count < 0:
        raise InvalidInputError("Number of meals cannot be negative")
    if params.zip_code and not ZIP_CODE_RE.match(params.zip_code):
        raise InvalidInputError(f"ZIP code must be 5 digits (got {params.zip_code!r})")


@dataclass
class MealPlan:
    """A week of meals with its shopping list."""

    meals: list[ScaledMeal]
    shopping_list: ShoppingList
    budget: float
    warnings: list[str] = field(default_factory=list)

    @property
    def total_cost(self) -> float:
        """Sum of the scaled meal costs."""
        return round(sum(meal.total_cost for meal in self.meals), 2)

    @property
    def is_empty(self) -> bool:
        return not self.meals

    @property
    def within_budget(self) -> bool:
        return self.total_cost <= self.budget

    def to_dict(self) -> dict[str, Any]:
        return {
            "budget": self.budget,
            "totalCost": self.total_cost,
            "warnings": list(self.warnings),
            "meals": [
                {
                    "id": meal.recipe.id,
                    "name": meal.name,
                    "servings": meal.scaled_servings,
                    "scale": format_scale_info(meal),
                    "totalCost": meal.pricing.total_cost,
                    "costPerServing": meal.pricing.cost_per_serving,
                    "score": meal.scored.score,
                    "ingredients": [str(ing) for ing in meal.ingredients],
                }
                for meal in self.meals
            ],
            "shoppingList": self.shopping_list.to_dict(),
        }


class MealPlanner:
    """Plans meals for a family from a recipe source and a price resolver."""

    def __init__(self, source: RecipeSource, resolver: PricingResolver):
        self.source = source
        self.resolver = resolver
        self.selector = MealSelector(source, resolver)
        self.plan: MealPlan | None = None
        self.params: FamilyParams | None = None

    def plan_meals(self, params: FamilyParams) -> MealPlan:
        """
        Build a meal plan for a family.

        Args:
            params: Family, budget, and location

        Returns:
            MealPlan; ``is_empty`` is true when no recipe survived filtering
            or selection, with the reason in ``warnings``

        Raises:
            InvalidInputError: If the parameters are rejected
        """
        validate_params(params)
        logger.info(
            "Planning %d meals for %d people on $%.2f",
            params.meals_count,
            params.total_people,
            params.weekly_budget,
        )

        meals = self.selector.select_meals(params)
        warnings = list(self.selector.warnings)

        if not meals:
            if params.meals_count == 0:
                reason = "No meals were requested"
            elif self.selector.candidate_count == 0:
                reason = "No recipes are available after applying allergies and restrictions"
            else:
                reason = "No meals could be selected"
            logger.warning(reason)
            warnings.append(reason)
        elif len(meals) < params.meals_count:
            warnings.append(
                f"Only {len(meals)} of {params.meals_count} meals fit the budget"
            )

        self.params = params
        self.plan = MealPlan(
            meals=meals,
            shopping_list=build_shopping_list(meals, self.resolver, params.location),
            budget=params.weekly_budget,
            warnings=warnings,
        )
        return self.plan

    def regenerate_meal(self, index: int, params: FamilyParams | None = None) -> ScaledMeal | None:
        """
        Swap one meal of the current plan and rebuild the shopping list.

        Args:
            index: Zero-based position of the meal to replace
            params: Family parameters; defaults to those of the last plan

        Returns:
            The new meal, or None when the index is invalid or no
            alternative exists
        """
        params = params or self.params
        if self.plan is None or params is None:
            return None

        replacement = self.selector.regenerate_meal(index, params)
        if replacement is None:
            return None

        self.plan.meals = list(self.selector.meals)
        self.plan.shopping_list = build_shopping_list(
            self.plan.meals, self.resolver, params.location
        )
        return replacement


def plan_meals(
    params: FamilyParams,
    source: RecipeSource | None = None,
    resolver: PricingResolver | None = None,
    settings: Settings | None = None,
) -> MealPlan:
    """
    Plan meals with the configured catalog and pricing unless others are given.

    A resolver built here is closed before returning; a passed-in one is left open.
    """
    settings = settings or load_settings()
    source = source or CatalogRecipeSource(settings.catalog_path)
    if resolver is not None:
        return MealPlanner(source, resolver).plan_meals(params)

    with build_default_resolver(settings) as owned:
        return MealPlanner(source, owned).plan_meals(params)
