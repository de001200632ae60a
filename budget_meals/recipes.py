"""Recipe data model, validated ingestion, and catalog loading."""

import json
import logging
import math
import re
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any

from .errors import RecipeDataError

logger = logging.getLogger(__name__)

CATEGORIES = ("produce", "meat", "dairy", "pantry", "frozen", "spices")
DIFFICULTIES = ("Easy", "Medium", "Hard")

DEFAULT_CATEGORY = "pantry"
DEFAULT_DIFFICULTY = "Easy"
DEFAULT_SERVINGS = 4
DEFAULT_PREP_TIME = 15
DEFAULT_COOK_TIME = 30
DEFAULT_UNIT = "item"

BUNDLED_CATALOG = "recipes.json"


@dataclass(frozen=True)
class Ingredient:
    """One ingredient line of a recipe."""

    name: str
    amount: float
    unit: str
    category: str = DEFAULT_CATEGORY
    store_unit: str | None = None  # e.g., "42oz container"
    search_term: str | None = None

    def __str__(self) -> str:
        amount = self.amount
        qty = str(int(amount)) if amount == int(amount) else f"{amount:.2f}".rstrip("0")
        return f"{qty} {self.unit} {self.name}".strip()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "category": self.category,
        }
        if self.store_unit:
            data["storeUnit"] = self.store_unit
        if self.search_term:
            data["searchTerm"] = self.search_term
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Ingredient":
        """
        Create an ingredient from catalog or AI data, applying defaults.

        Raises:
            RecipeDataError: If the name is missing or the amount is not positive
        """
        if not isinstance(data, dict):
            raise RecipeDataError(f"Ingredient must be an object, got {type(data).__name__}")

        name = str(data.get("name") or "").strip()
        if not name:
            raise RecipeDataError("Ingredient is missing a name")

        amount = _to_number(data.get("amount"), default=1.0, field_name=f"{name} amount")
        if amount <= 0:
            raise RecipeDataError(f"Ingredient '{name}' has non-positive amount {amount}")

        category = str(data.get("category") or DEFAULT_CATEGORY).lower().strip()
        if category not in CATEGORIES:
            category = DEFAULT_CATEGORY

        search_term = data.get("searchTerm") or data.get("walmartSearchTerm")

        return cls(
            name=name,
            amount=amount,
            unit=str(data.get("unit") or DEFAULT_UNIT).strip(),
            category=category,
            store_unit=data.get("storeUnit") or None,
            search_term=str(search_term) if search_term else None,
        )


@dataclass(frozen=True)
class Nutrition:
    """Per-serving nutrition facts."""

    calories: float = 0
    protein: float = 0
    carbs: float = 0
    fat: float = 0
    fiber: float = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> "Nutrition":
        data = data if isinstance(data, dict) else {}
        return cls(
            **{
                key: _leading_number(data.get(key), default=0.0)
                for key in ("calories", "protein", "carbs", "fat", "fiber")
            }
        )


@dataclass(frozen=True)
class Recipe:
    """A recipe as loaded from a catalog or an AI response."""

    id: str
    name: str
    ingredients: tuple[Ingredient, ...]
    servings: int = DEFAULT_SERVINGS
    description: str = ""
    prep_time: int = DEFAULT_PREP_TIME
    cook_time: int = DEFAULT_COOK_TIME
    difficulty: str = DEFAULT_DIFFICULTY
    instructions: tuple[str, ...] = ()
    nutrition: Nutrition = field(default_factory=Nutrition)
    tags: tuple[str, ...] = ()
    allergens: tuple[str, ...] = ()
    common_ingredients: tuple[str, ...] = ()
    meal_type: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert recipe to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "servings": self.servings,
            "prepTime": self.prep_time,
            "cookTime": self.cook_time,
            "difficulty": self.difficulty,
            "ingredients": [ing.to_dict() for ing in self.ingredients],
            "instructions": list(self.instructions),
            "nutrition": {
                "calories": self.nutrition.calories,
                "protein": self.nutrition.protein,
                "carbs": self.nutrition.carbs,
                "fat": self.nutrition.fat,
                "fiber": self.nutrition.fiber,
            },
            "tags": list(self.tags),
            "allergens": list(self.allergens),
            "commonIngredients": list(self.common_ingredients),
            "mealType": self.meal_type,
        }

    @classmethod
    def from_dict(
        cls,
        data: dict[str, Any],
        *,
        position: int = 0,
        default_servings: int | None = None,
        meal_type: str | None = None,
    ) -> "Recipe":
        """
        Create a recipe from a dictionary, applying ingestion defaults.

        Every optional field is defaulted here so downstream code never has
        to guess: missing difficulty becomes "Easy", missing servings falls
        back to ``default_servings`` (or 4), missing times to 15/30 minutes.

        Args:
            data: Raw recipe data (catalog entry or AI output)
            position: Index of the recipe in its source, used for fallback ids
            default_servings: Servings to assume when the data has none
            meal_type: Catalog section the recipe came from

        Raises:
            RecipeDataError: If the recipe cannot be used
        """
        if not isinstance(data, dict):
            raise RecipeDataError(f"Recipe must be an object, got {type(data).__name__}")

        name = str(data.get("name") or f"Recipe {position + 1}").strip()

        raw_servings = data.get("servings")
        if raw_servings is None:
            servings = default_servings or DEFAULT_SERVINGS
        else:
            servings = int(_to_number(raw_servings, default=0, field_name=f"{name} servings"))
        if servings <= 0:
            raise RecipeDataError(f"Recipe '{name}' has invalid servings {raw_servings!r}")

        raw_ingredients = data.get("ingredients") or []
        if not isinstance(raw_ingredients, list) or not raw_ingredients:
            raise RecipeDataError(f"Recipe '{name}' has no ingredients")
        ingredients = tuple(Ingredient.from_dict(ing) for ing in raw_ingredients)

        difficulty = str(data.get("difficulty") or DEFAULT_DIFFICULTY).strip().capitalize()
        if difficulty not in DIFFICULTIES:
            difficulty = DEFAULT_DIFFICULTY

        return cls(
            id=str(data.get("id") or f"{slugify(name)}-{position + 1}"),
            name=name,
            description=str(data.get("description") or ""),
            servings=servings,
            prep_time=_to_minutes(data.get("prepTime"), DEFAULT_PREP_TIME),
            cook_time=_to_minutes(data.get("cookTime"), DEFAULT_COOK_TIME),
            difficulty=difficulty,
            ingredients=ingredients,
            instructions=_str_list(data.get("instructions"), f"{name} instructions"),
            nutrition=Nutrition.from_dict(data.get("nutrition")),
            tags=_str_list(data.get("tags"), f"{name} tags"),
            allergens=_str_list(data.get("allergens"), f"{name} allergens"),
            common_ingredients=_str_list(
                data.get("commonIngredients"), f"{name} commonIngredients"
            ),
            meal_type=data.get("mealType") or meal_type,
        )


def _to_number(value: Any, default: float, field_name: str) -> float:
    if value is None or value == "":
        return float(default)
    if isinstance(value, bool):
        raise RecipeDataError(f"Field '{field_name}' must be a number, got {value!r}")
    try:
        number = float(value)
    except (TypeError, ValueError) as e:
        raise RecipeDataError(f"Field '{field_name}' must be a number, got {value!r}") from e
    if not math.isfinite(number):
        raise RecipeDataError(f"Field '{field_name}' must be finite, got {value!r}")
    return number


def _str_list(value: Any, field_name: str) -> tuple[str, ...]:
    """Read a list of strings; a bare string counts as a one-item list."""
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise RecipeDataError(
            f"Field '{field_name}' must be a list, got {type(value).__name__}"
        )
    return tuple(str(item) for item in value)


def _leading_number(value: Any, default: float) -> float:
    """Read values like ``20``, ``"20"``, or ``"20 minutes"``; anything else is the default."""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value) if math.isfinite(value) else float(default)
    match = re.match(r"\s*(\d+(?:\.\d+)?)", str(value or ""))
    return float(match.group(1)) if match else float(default)


def _to_minutes(value: Any, default: int) -> int:
    return int(_leading_number(value, default))


def slugify(text: str) -> str:
    """Turn a recipe name into an id-friendly slug."""
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "recipe"


def recipes_from_data(
    entries: list[Any],
    *,
    default_servings: int | None = None,
    meal_type: str | None = None,
) -> list[Recipe]:
    """
    Ingest a list of raw recipe entries, skipping the malformed ones.

    Args:
        entries: Raw recipe dictionaries
        default_servings: Servings to assume when an entry has none
        meal_type: Catalog section the entries came from

    Returns:
        Successfully ingested recipes, in input order
    """
    recipes: list[Recipe] = []
    for position, entry in enumerate(entries):
        try:
            recipes.append(
                Recipe.from_dict(
                    entry,
                    position=position,
                    default_servings=default_servings,
                    meal_type=meal_type,
                )
            )
        except RecipeDataError as e:
            logger.warning("Skipping malformed recipe #%d: %s", position + 1, e)
    return recipes


def parse_catalog(data: Any, default_servings: int | None = None) -> list[Recipe]:
    """
    Parse catalog data into recipes.

    Accepts either a flat list of recipes or an object mapping meal types
    (breakfast, lunch, dinner, ...) to lists of recipes.
    """
    if isinstance(data, list):
        return recipes_from_data(data, default_servings=default_servings)

    if isinstance(data, dict):
        recipes: list[Recipe] = []
        for section, entries in data.items():
            if not isinstance(entries, list):
                logger.debug("Skipping catalog section %r: not a list", section)
                continue
            recipes.extend(
                recipes_from_data(entries, default_servings=default_servings, meal_type=section)
            )
        return recipes

    raise RecipeDataError(f"Catalog must be a list or an object, got {type(data).__name__}")


def load_catalog(path: str | Path | None = None) -> list[Recipe]:
    """
    Load recipes from a JSON catalog file.

    Args:
        path: Catalog file; the bundled catalog is used when None

    Returns:
        List of recipes

    Raises:
        RecipeDataError: If the file is missing or not valid JSON
    """
    try:
        if path is None:
            text = resources.files("budget_meals.data").joinpath(BUNDLED_CATALOG).read_text(
                encoding="utf-8"
            )
        else:
            text = Path(path).read_text(encoding="utf-8")
        data = json.loads(text)
    except OSError as e:
        raise RecipeDataError(f"Cannot read catalog {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise RecipeDataError(f"Catalog {path or BUNDLED_CATALOG} is not valid JSON: {e}") from e

    return parse_catalog(data)


def extract_json_array(text: str) -> list[Any]:
    """
    Pull the outermost JSON array out of free-form model output.

    Raises:
        RecipeDataError: If no parseable array is present
    """
    start = text.find("[")
    end = text.rfind("]")
    if start == -1 or end <= start:
        raise RecipeDataError("No JSON array found in response")

    try:
        data = json.loads(text[start : end + 1])
    except json.JSONDecodeError as e:
        raise RecipeDataError(f"Response array is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise RecipeDataError("Response JSON is not an array")
    return data


def parse_ai_recipes(text: str, family_size: int | None = None) -> list[Recipe]:
    """
    Parse a language model's meal plan reply into recipes.

    The reply may be a JSON object keyed by meal type, a JSON array, or
    either of those wrapped in prose or a Markdown code fence.

    Args:
        text: Raw reply text
        family_size: Servings to assume for recipes that state none

    Raises:
        RecipeDataError: If no recipe data can be found
    """
    cleaned = re.sub(r"^```(?:json)?\s*|\s*```$", "", text.strip())

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start and (cleaned.find("[") == -1 or start < cleaned.find("[")):
        try:
            return parse_catalog(json.loads(cleaned[start : end + 1]), family_size)
        except json.JSONDecodeError:
            logger.debug("Reply object is not valid JSON, looking for an array")

    return parse_catalog(extract_json_array(cleaned), family_size)
