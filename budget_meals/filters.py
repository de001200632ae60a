"""Exclude recipes that conflict with a family's allergies and dislikes."""

import logging

from .recipes import Recipe

logger = logging.getLogger(__name__)


def parse_allergy_text(text: str | None) -> list[str]:
    """
    Split free-form allergy text into lowercase tokens.

    Examples:
        "Dairy, peanut ,," -> ["dairy", "peanut"]
    """
    if not text:
        return []
    return [token.strip().lower() for token in text.split(",") if token.strip()]


def recipe_conflicts(recipe: Recipe, tokens: list[str]) -> str | None:
    """Return the first token that rules out a recipe, or None."""
    allergens = [a.lower() for a in recipe.allergens]
    ingredient_names = [ing.name.lower() for ing in recipe.ingredients]
    name = recipe.name.lower()
    description = recipe.description.lower()

    for token in tokens:
        for candidate in allergens + ingredient_names:
            if token in candidate or candidate in token:
                return token
        if token in name or token in description:
            return token
    return None


def filter_recipes(recipes: list[Recipe], allergy_text: str | None) -> list[Recipe]:
    """
    Drop recipes matching any allergy or dislike.

    A token matches when it is a substring of a declared allergen or an
    ingredient name (or the other way round), or appears in the recipe's
    name or description. Blank text returns the input unchanged.
    """
    tokens = parse_allergy_text(allergy_text)
    if not tokens:
        return list(recipes)

    kept = []
    for recipe in recipes:
        token = recipe_conflicts(recipe, tokens)
        if token is None:
            kept.append(recipe)
        else:
            logger.debug("Excluding %s (matches %r)", recipe.name, token)

    logger.info("Allergy filter kept %d of %d recipes", len(kept), len(recipes))
    return kept
