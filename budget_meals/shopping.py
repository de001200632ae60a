"""Shopping list consolidation: merge, categorize, price, and total."""

import logging
from dataclasses import dataclass, field
from typing import Any

from .grocery_units import format_grocery_item
from .pricing import PriceRequest, PricingResolver
from .scaler import ScaledIngredient, ScaledMeal
from .units import WEIGHT_IN_LBS, normalize_unit

logger = logging.getLogger(__name__)

# Category key -> display label, in store walking order
CATEGORY_LABELS: dict[str, str] = {
    "produce": "Fresh Produce",
    "meat": "Meat & Seafood",
    "dairy": "Dairy & Eggs",
    "pantry": "Pantry Staples",
    "frozen": "Frozen Foods",
    "spices": "Spices & Seasonings",
}
DEFAULT_CATEGORY = "pantry"

# Within a category, items matching earlier keywords come first
SHOPPING_FLOW: dict[str, list[str]] = {
    "produce": ["onion", "garlic", "potato", "carrot", "celery", "bell pepper", "banana"],
    "meat": ["ground beef", "chicken breast", "chicken thigh", "tuna"],
    "dairy": ["milk", "eggs", "butter", "cheese"],
    "pantry": ["oil", "flour", "rice", "pasta", "beans", "sauce", "broth", "sugar"],
    "frozen": ["vegetables", "peas"],
    "spices": ["salt", "pepper", "garlic powder", "onion powder"],
}

# Last-word plural folding for consolidation keys
PLURAL_MAPPINGS: dict[str, str] = {
    "onions": "onion",
    "tomatoes": "tomato",
    "potatoes": "potato",
    "carrots": "carrot",
    "eggs": "egg",
    "cloves": "clove",
    "lemons": "lemon",
    "limes": "lime",
    "apples": "apple",
    "bananas": "banana",
    "mushrooms": "mushroom",
    "peppers": "pepper",
    "breasts": "breast",
    "thighs": "thigh",
    "noodles": "noodle",
    "leaves": "leaf",
}


@dataclass(frozen=True)
class BulkDeal:
    bulk_size: float  # in pounds
    savings_rate: float


BULK_DEALS: dict[str, BulkDeal] = {
    "ground beef": BulkDeal(3, 0.15),
    "chicken breast": BulkDeal(5, 0.20),
    "chicken thigh": BulkDeal(5, 0.18),
    "rice": BulkDeal(10, 0.25),
    "flour": BulkDeal(10, 0.20),
    "pasta": BulkDeal(5, 0.15),
    "potato": BulkDeal(5, 0.12),
    "onion": BulkDeal(3, 0.10),
}

# Share of the bulk size a list must already need before the deal is offered
BULK_THRESHOLD = 0.7
BULK_RECOMMEND_SAVINGS = 1.00


@dataclass(frozen=True)
class BulkOption:
    """A cheaper bulk package for an item on the list."""

    bulk_size: float
    bulk_unit: str
    bulk_price: float
    savings: float
    recommended: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "bulkSize": self.bulk_size,
            "bulkUnit": self.bulk_unit,
            "bulkPrice": self.bulk_price,
            "savings": self.savings,
            "recommended": self.recommended,
        }


@dataclass
class ConsolidatedItem:
    """One line of the shopping list, merged across meals."""

    name: str
    amount: float
    unit: str
    category: str
    used_in_meals: list[str] = field(default_factory=list)
    store_unit: str | None = None
    price: float = 0.0
    source: str = ""
    confidence: str = ""
    search_term: str | None = None
    bulk_option: BulkOption | None = None

    @property
    def grocery_description(self) -> str:
        """What to pick off the shelf."""
        if self.store_unit:
            return self.store_unit
        return format_grocery_item(self.name, self.amount, self.unit, self.category)

    def __str__(self) -> str:
        qty = self.amount
        qty_text = str(int(qty)) if qty == int(qty) else f"{qty:.2f}".rstrip("0").rstrip(".")
        return f"{qty_text} {self.unit} {self.name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "amount": self.amount,
            "unit": self.unit,
            "category": self.category,
            "storeUnit": self.grocery_description,
            "price": self.price,
            "source": self.source,
            "confidence": self.confidence,
            "usedInMeals": list(self.used_in_meals),
            "bulkOption": self.bulk_option.to_dict() if self.bulk_option else None,
        }


@dataclass
class CategoryGroup:
    key: str
    label: str
    items: list[ConsolidatedItem] = field(default_factory=list)

    @property
    def total(self) -> float:
        return round(sum(item.price for item in self.items), 2)


@dataclass(frozen=True)
class ShoppingTotals:
    total_cost: float
    total_items: int
    average_per_item: float
    potential_savings: float
    category_totals: dict[str, float]

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalCost": self.total_cost,
            "totalItems": self.total_items,
            "averagePerItem": self.average_per_item,
            "potentialSavings": self.potential_savings,
            "categoryTotals": dict(self.category_totals),
        }


@dataclass
class ShoppingList:
    """Categorized, priced shopping list derived from a set of meals."""

    categories: dict[str, CategoryGroup]
    totals: ShoppingTotals
    location: str | None = None
    meal_count: int = 0

    @property
    def items(self) -> list[ConsolidatedItem]:
        return [item for group in self.categories.values() for item in group.items]

    def to_dict(self) -> dict[str, Any]:
        return {
            "categories": {
                key: {
                    "name": group.label,
                    "total": group.total,
                    "items": [item.to_dict() for item in group.items],
                }
                for key, group in self.categories.items()
            },
            "totals": self.totals.to_dict(),
            "location": self.location,
            "mealCount": self.meal_count,
        }


def normalize_ingredient_name(name: str) -> str:
    """
    Normalize ingredient name for grouping.

    Lowercases, trims, and folds a plural last word ("Yellow Onions" ->
    "yellow onion").
    """
    words = name.lower().strip().split()
    if not words:
        return ""
    words[-1] = PLURAL_MAPPINGS.get(words[-1], words[-1])
    return " ".join(words)


def ingredient_key(name: str, unit: str) -> tuple[str, str]:
    return normalize_ingredient_name(name), normalize_unit(unit)


def consolidate_ingredients(
    scaled_ingredients: list[tuple[ScaledIngredient, str]],
) -> list[ConsolidatedItem]:
    """
    Merge ingredients from multiple meals.

    Ingredients with the same normalized name and unit become one item whose
    amount is the largest single amount (leftovers from one meal cover the
    next); each contributing meal is recorded once.

    Args:
        scaled_ingredients: List of (ScaledIngredient, meal_name) tuples

    Returns:
        Consolidated items in first-seen order
    """
    merged: dict[tuple[str, str], ConsolidatedItem] = {}

    for ingredient, meal_name in scaled_ingredients:
        key = ingredient_key(ingredient.name, ingredient.unit)
        existing = merged.get(key)

        if existing is None:
            category = ingredient.category
            merged[key] = ConsolidatedItem(
                name=ingredient.name,
                amount=ingredient.amount,
                unit=ingredient.unit,
                category=category if category in CATEGORY_LABELS else DEFAULT_CATEGORY,
                used_in_meals=[meal_name],
                store_unit=ingredient.original.store_unit,
                search_term=ingredient.original.search_term,
            )
            continue

        if ingredient.amount > existing.amount:
            existing.amount = ingredient.amount
            existing.store_unit = ingredient.original.store_unit
        if meal_name not in existing.used_in_meals:
            existing.used_in_meals.append(meal_name)

    return list(merged.values())


def sort_by_shopping_flow(items: list[ConsolidatedItem], category: str) -> list[ConsolidatedItem]:
    """Order items by the category's aisle keywords, then alphabetically."""
    flow = SHOPPING_FLOW.get(category, [])

    def sort_key(item: ConsolidatedItem) -> tuple[int, str]:
        name = item.name.lower()
        for index, keyword in enumerate(flow):
            if keyword in name:
                return index, name
        return len(flow), name

    return sorted(items, key=sort_key)


def categorize(items: list[ConsolidatedItem]) -> dict[str, CategoryGroup]:
    """Group items by category in store order, omitting empty categories."""
    groups: dict[str, CategoryGroup] = {}
    for key, label in CATEGORY_LABELS.items():
        members = [item for item in items if item.category == key]
        if members:
            groups[key] = CategoryGroup(key, label, sort_by_shopping_flow(members, key))
    return groups


def _bulk_deal_for(name: str) -> BulkDeal | None:
    normalized = normalize_ingredient_name(name)
    for keyword, deal in BULK_DEALS.items():
        if normalized == keyword or normalized.endswith(f" {keyword}"):
            return deal
    return None


def check_bulk_deal(item: ConsolidatedItem) -> BulkOption | None:
    """
    Offer a bulk package when the list already needs most of one.

    Only weight quantities are compared against the bulk size.
    """
    deal = _bulk_deal_for(item.name)
    unit = normalize_unit(item.unit)
    if deal is None or unit not in WEIGHT_IN_LBS:
        return None

    pounds = item.amount * WEIGHT_IN_LBS[unit]
    if pounds < deal.bulk_size * BULK_THRESHOLD:
        return None

    bulk_price = item.price * (1 - deal.savings_rate)
    savings = item.price - bulk_price
    return BulkOption(
        bulk_size=deal.bulk_size,
        bulk_unit="lbs",
        bulk_price=round(bulk_price, 2),
        savings=round(savings, 2),
        recommended=savings > BULK_RECOMMEND_SAVINGS,
    )


def calculate_totals(categories: dict[str, CategoryGroup]) -> ShoppingTotals:
    items = [item for group in categories.values() for item in group.items]
    total = sum(item.price for item in items)
    savings = sum(item.bulk_option.savings for item in items if item.bulk_option)
    return ShoppingTotals(
        total_cost=round(total, 2),
        total_items=len(items),
        average_per_item=round(total / len(items), 2) if items else 0.0,
        potential_savings=round(savings, 2),
        category_totals={key: group.total for key, group in categories.items()},
    )


def build_shopping_list(
    meals: list[ScaledMeal],
    resolver: PricingResolver,
    location: str | None = None,
) -> ShoppingList:
    """
    Build the priced, categorized shopping list for a set of meals.

    Args:
        meals: Scaled meals of the plan
        resolver: Pricing resolver used for every item
        location: ZIP code or state for regional pricing

    Returns:
        ShoppingList derived entirely from ``meals``
    """
    pairs = [(ingredient, meal.name) for meal in meals for ingredient in meal.ingredients]
    items = consolidate_ingredients(pairs)

    quotes = resolver.price_many(
        [
            PriceRequest(item.name, item.amount, item.unit, location, item.search_term)
            for item in items
        ]
    )
    for item, quote in zip(items, quotes, strict=True):
        item.price = quote.price
        item.source = quote.source
        item.confidence = quote.confidence
        item.bulk_option = check_bulk_deal(item)

    categories = categorize(items)
    totals = calculate_totals(categories)
    logger.info(
        "Shopping list: %d items in %d categories, $%.2f",
        totals.total_items,
        len(categories),
        totals.total_cost,
    )
    return ShoppingList(
        categories=categories, totals=totals, location=location, meal_count=len(meals)
    )
