"""Exception types raised by budget-meals."""


class BudgetMealsError(Exception):
    """Base class for budget-meals errors."""

    pass


class InvalidInputError(BudgetMealsError):
    """Raised when family parameters are rejected before planning starts."""

    pass


class NoViableMealsError(BudgetMealsError):
    """Raised when a plan ends up with no meals at all."""

    pass


class RecipeDataError(BudgetMealsError):
    """Raised for recipe data that cannot be ingested."""

    pass


class PricingUnavailableError(BudgetMealsError):
    """Raised by a pricing strategy that cannot produce a price."""

    pass


class LLMError(BudgetMealsError):
    """Raised for failed or unusable language-model responses."""

    pass
