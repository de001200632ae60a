"""Shared fixtures for budget-meals tests."""

import pytest
import respx
from click.testing import CliRunner

from budget_meals.pricing import BasePriceTable, PriceCache, PricingResolver
from budget_meals.recipes import Ingredient, Nutrition, Recipe


@pytest.fixture
def mock_httpx():
    """Activate respx mock for HTTP requests."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


@pytest.fixture
def runner():
    """Create a CLI runner for testing."""
    return CliRunner()


@pytest.fixture
def resolver():
    """Offline resolver: regional estimate, then the base price table."""
    return PricingResolver(max_workers=1)


@pytest.fixture
def table_resolver():
    """Resolver that only consults the base price table."""
    base = BasePriceTable()
    return PricingResolver([base], base_table=base, cache=PriceCache(), max_workers=1)


@pytest.fixture
def make_recipe():
    """Factory for small recipes with sensible defaults."""

    def _make(
        id="recipe-1",
        name="Test Recipe",
        ingredients=None,
        servings=4,
        **kwargs,
    ) -> Recipe:
        if ingredients is None:
            ingredients = [Ingredient("white rice", 2, "cups")]
        return Recipe(
            id=id,
            name=name,
            ingredients=tuple(ingredients),
            servings=servings,
            **kwargs,
        )

    return _make


@pytest.fixture
def rice_and_beans(make_recipe):
    return make_recipe(
        id="rice-beans",
        name="Black Beans & Rice",
        servings=4,
        ingredients=[
            Ingredient("white rice", 2, "cups", "pantry"),
            Ingredient("black beans", 2, "cans", "pantry"),
            Ingredient("onion", 1, "whole", "produce"),
        ],
        nutrition=Nutrition(calories=410, protein=14),
        tags=("vegan",),
        common_ingredients=("onion", "rice"),
    )


@pytest.fixture
def cheesy_pasta(make_recipe):
    return make_recipe(
        id="cheesy-pasta",
        name="Cheesy Pasta",
        servings=4,
        ingredients=[
            Ingredient("spaghetti pasta", 1, "lbs", "pantry"),
            Ingredient("cheddar cheese", 1, "cups", "dairy"),
            Ingredient("milk", 1, "cups", "dairy"),
            Ingredient("onion", 1, "whole", "produce"),
        ],
        nutrition=Nutrition(calories=520, protein=22),
        tags=("kid-friendly",),
        allergens=("dairy", "gluten"),
    )


@pytest.fixture
def pb_toast(make_recipe):
    return make_recipe(
        id="pb-toast",
        name="Peanut Butter Toast",
        servings=4,
        ingredients=[
            Ingredient("bread", 8, "slices", "pantry"),
            Ingredient("peanut butter", 4, "tbsp", "pantry"),
        ],
        nutrition=Nutrition(calories=350, protein=12),
        allergens=("peanut", "gluten"),
    )


@pytest.fixture
def sample_recipes(rice_and_beans, cheesy_pasta, pb_toast):
    return [rice_and_beans, cheesy_pasta, pb_toast]


class StaticSource:
    """Recipe source returning a fixed list."""

    def __init__(self, recipes):
        self.recipes = list(recipes)
        self.calls = 0

    def get_recipes(self, family_size, budget, zip_code=None, dietary_restrictions=None):
        self.calls += 1
        return list(self.recipes)


@pytest.fixture
def static_source(sample_recipes):
    return StaticSource(sample_recipes)


@pytest.fixture
def make_source():
    return StaticSource
