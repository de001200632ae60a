"""Budget Meals - weekly family meal planning within a grocery budget."""

__version__ = "1.0.0"

from .errors import (
    BudgetMealsError,
    InvalidInputError,
    LLMError,
    NoViableMealsError,
    PricingUnavailableError,
    RecipeDataError,
)
from .planner import FamilyParams, MealPlan, MealPlanner, plan_meals, validate_params
from .pricing import PriceQuote, PricingResolver, build_default_resolver
from .recipes import Ingredient, Nutrition, Recipe, load_catalog
from .shopping import ShoppingList, build_shopping_list
from .sources import AIRecipeSource, CatalogRecipeSource

__all__ = [
    "BudgetMealsError",
    "InvalidInputError",
    "NoViableMealsError",
    "RecipeDataError",
    "PricingUnavailableError",
    "LLMError",
    "FamilyParams",
    "MealPlan",
    "MealPlanner",
    "plan_meals",
    "validate_params",
    "PriceQuote",
    "PricingResolver",
    "build_default_resolver",
    "Ingredient",
    "Nutrition",
    "Recipe",
    "load_catalog",
    "ShoppingList",
    "build_shopping_list",
    "AIRecipeSource",
    "CatalogRecipeSource",
]
