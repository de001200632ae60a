"""Recipe sources: the static catalog and the language-model generator."""

import logging
from pathlib import Path
from typing import Protocol

from .errors import LLMError, RecipeDataError
from .llm import LLMClient
from .recipes import Recipe, load_catalog, parse_ai_recipes

logger = logging.getLogger(__name__)


class RecipeSource(Protocol):
    """Anything that can supply candidate recipes for a family."""

    def get_recipes(
        self,
        family_size: int,
        budget: float,
        zip_code: str | None = None,
        dietary_restrictions: str | None = None,
    ) -> list[Recipe]: ...


class CatalogRecipeSource:
    """Recipes from the bundled catalog or a user-supplied JSON file."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path) if path is not None else None
        self._recipes: list[Recipe] | None = None

    @property
    def recipes(self) -> list[Recipe]:
        if self._recipes is None:
            self._recipes = load_catalog(self.path)
            logger.info(
                "Loaded %d recipes from %s", len(self._recipes), self.path or "bundled catalog"
            )
        return self._recipes

    def get_recipes(
        self,
        family_size: int,
        budget: float,
        zip_code: str | None = None,
        dietary_restrictions: str | None = None,
    ) -> list[Recipe]:
        return list(self.recipes)


class AIRecipeSource:
    """Recipes generated on demand by a language model."""

    SYSTEM_PROMPT = (
        "You are a professional nutritionist and meal planner who specializes in "
        "budget-conscious family recipes. Always respond with valid JSON."
    )

    def __init__(self, llm: LLMClient, meals_count: int = 7):
        self.llm = llm
        self.meals_count = meals_count

    def build_prompt(
        self,
        family_size: int,
        budget: float,
        zip_code: str | None,
        dietary_restrictions: str | None,
    ) -> str:
        per_meal = budget / self.meals_count if self.meals_count else budget
        restrictions = (
            f"Dietary restrictions: {dietary_restrictions}." if dietary_restrictions else ""
        )
        location = f"Location: ZIP {zip_code} (consider regional preferences)." if zip_code else ""
        # Ask for a few spare recipes so the selector has room to optimize
        count = self.meals_count + 3

        return f"""Generate {count} budget-friendly dinner recipes for a family of {family_size}.

FAMILY DETAILS:
- Total weekly budget: ${budget:.2f} (${per_meal:.2f} per meal)
- {location}
- {restrictions}

REQUIREMENTS:
- Nutritious, whole foods with good protein, vegetables, and whole grains
- Share ingredients across meals to minimize waste
- Use common grocery items with specific store sizes

FORMAT: Return a JSON object {{"dinners": [...]}} where each recipe is:
{{
  "name": "Recipe Name",
  "description": "Short description",
  "servings": {family_size},
  "prepTime": 15,
  "cookTime": 30,
  "difficulty": "Easy|Medium|Hard",
  "ingredients": [
    {{
      "name": "ingredient name",
      "amount": 1,
      "unit": "cups|lbs|cans|etc",
      "storeUnit": "1 package Specific Product (1lb)",
      "category": "produce|meat|dairy|pantry|frozen|spices",
      "searchTerm": "product to search for"
    }}
  ],
  "instructions": ["step 1", "step 2"],
  "nutrition": {{"calories": 400, "protein": 20, "carbs": 40, "fat": 12, "fiber": 6}},
  "tags": ["kid-friendly"],
  "allergens": ["dairy"]
}}"""

    def get_recipes(
        self,
        family_size: int,
        budget: float,
        zip_code: str | None = None,
        dietary_restrictions: str | None = None,
    ) -> list[Recipe]:
        """
        Generate recipes; any failure yields an empty list.

        An empty list leads the planner to report that no meals were found.
        """
        prompt = self.build_prompt(family_size, budget, zip_code, dietary_restrictions)
        try:
            reply = self.llm.chat(
                [
                    {"role": "system", "content": self.SYSTEM_PROMPT},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.9,
                max_tokens=4000,
            )
            recipes = parse_ai_recipes(reply, family_size)
        except (LLMError, RecipeDataError) as e:
            logger.warning("AI recipe generation failed: %s", e)
            return []

        logger.info("Generated %d recipes with %s", len(recipes), self.llm.model)
        return recipes
