"""Translate recipe quantities into what a shopper actually picks off the shelf."""

import math
from collections.abc import Callable
from dataclasses import dataclass

from .units import normalize_unit


@dataclass(frozen=True)
class GroceryItem:
    """An ingredient quantity as seen by the grocery rules."""

    name: str
    amount: float
    unit: str
    category: str

    @property
    def lower_name(self) -> str:
        return self.name.lower()

    @property
    def count(self) -> int:
        # Shelf items are whole; never fractional
        return max(1, math.ceil(self.amount))


Predicate = Callable[[GroceryItem], bool]
Formatter = Callable[[GroceryItem], str]


@dataclass(frozen=True)
class GroceryRule:
    matches: Predicate
    format: Formatter


def when(
    *keywords: str,
    unit: str | None = None,
    category: str | None = None,
    exclude: tuple[str, ...] = (),
) -> Predicate:
    """
    Build a predicate on unit, category, and name keywords.

    Any of ``keywords`` must appear in the lowercase name (none given means
    any name); none of ``exclude`` may appear.
    """

    def predicate(item: GroceryItem) -> bool:
        if unit is not None and normalize_unit(item.unit) != unit:
            return False
        if category is not None and item.category != category:
            return False
        name = item.lower_name
        if keywords and not any(k in name for k in keywords):
            return False
        return not any(x in name for x in exclude)

    return predicate


def fixed(text: str) -> Formatter:
    return lambda item: text.format(name=item.name)


def counted(one: str, many: str, threshold: int = 1) -> Formatter:
    """Use ``many`` once the count exceeds ``threshold``; ``{n}`` is the count."""

    def formatter(item: GroceryItem) -> str:
        template = many if item.count > threshold else one
        return template.format(n=item.count, name=item.name)

    return formatter


def _rule(predicate: Predicate, formatter: Formatter) -> GroceryRule:
    return GroceryRule(predicate, formatter)


# ============================================================================
# Rule table (first match wins)
# ============================================================================

UNIT_RULES: list[GroceryRule] = [
    # Spoon measures are bought as a whole package
    _rule(when("butter", unit="tbsp"), fixed("1 lb butter")),
    _rule(when("oil", unit="tbsp"), fixed("1 bottle cooking oil")),
    _rule(when("flour", unit="tbsp"), fixed("1 bag flour (5lbs)")),
    _rule(when("honey", unit="tbsp"), fixed("1 bottle honey")),
    _rule(when(unit="tbsp"), fixed("1 container {name}")),
    _rule(when("milk", unit="cups"), fixed("1 gallon milk")),
    _rule(
        lambda item: when("broth", "stock", unit="cups")(item) and item.amount > 4,
        fixed("2 cartons broth (32oz each)"),
    ),
    _rule(when("broth", "stock", unit="cups"), fixed("1 carton broth (32oz)")),
    _rule(
        lambda item: when("shredded", "cheddar", unit="cups")(item) and "cheese" in item.lower_name,
        counted("1 bag shredded cheese (8oz)", "2 bags shredded cheese (8oz each)"),
    ),
    _rule(when("peas", unit="cups"), fixed("1 bag frozen peas (12oz)")),
    _rule(when("breadcrumb", unit="cups"), fixed("1 container breadcrumbs")),
    _rule(when("lentils", unit="cups"), fixed("1 bag lentils (1lb)")),
    _rule(when("rice", unit="cups"), fixed("1 bag rice (5lbs)")),
    _rule(when(unit="cups", category="pantry"), fixed("1 container {name}")),
    _rule(when(unit="tsp"), fixed("1 container {name}")),
]

PRODUCE_RULES: list[GroceryRule] = [
    _rule(when("yellow onion", "sweet onion"), fixed("1 bag Yellow/Sweet Onions (3lbs)")),
    _rule(
        when("red onion"),
        lambda item: (
            "1 bag Red Onions (2lbs)"
            if item.count > 2
            else counted("1 Large Red Onion", "{n} Large Red Onions")(item)
        ),
    ),
    _rule(when("white onion"), fixed("1 bag White Onions (3lbs)")),
    _rule(when("onion"), fixed("1 bag Yellow Onions (3lbs)")),
    _rule(when("baby carrot"), fixed("1 bag Baby Carrots (2lbs)")),
    _rule(when("carrot"), fixed("1 bag Large Carrots (2lbs)")),
    _rule(when("red potato"), fixed("1 bag Red Potatoes (3lbs)")),
    _rule(when("yukon potato"), fixed("1 bag Yukon Gold Potatoes (3lbs)")),
    _rule(when("potato"), fixed("1 bag Russet Potatoes (5lbs)")),
    _rule(when("garlic"), fixed("1 head Fresh Garlic")),
    _rule(when("banana"), fixed("1 bunch Bananas (6-8 bananas)")),
    _rule(when("red bell pepper"), counted("1 Red Bell Pepper", "{n} Red Bell Peppers")),
    _rule(when("green bell pepper"), counted("1 Green Bell Pepper", "{n} Green Bell Peppers")),
    _rule(
        when("bell pepper", "pepper"),
        counted("1 Bell Pepper", "{n} Bell Peppers (mixed colors)"),
    ),
    _rule(when("celery"), fixed("1 bunch Fresh Celery")),
    _rule(when("lettuce"), fixed("1 head Lettuce (Romaine or Iceberg)")),
    _rule(when("cherry tomato"), fixed("1 container Cherry Tomatoes (1lb)")),
    _rule(
        when("tomato", exclude=("sauce", "diced")),
        counted("1 Medium Tomato", "{n} Medium Tomatoes"),
    ),
    _rule(when("broccoli"), counted("1 head Fresh Broccoli", "{n} heads Fresh Broccoli")),
    _rule(when("spinach"), fixed("1 bag Fresh Spinach (5oz)")),
    _rule(when("mushroom"), fixed("1 container White Button Mushrooms (8oz)")),
    _rule(when("zucchini"), counted("1 Medium Zucchini", "{n} Medium Zucchini")),
    _rule(
        when("lemon"),
        lambda item: (
            "1 bag Lemons (2lbs)" if item.count > 3 else counted("1 Lemon", "{n} Lemons")(item)
        ),
    ),
    _rule(
        when("apple"),
        lambda item: (
            "1 bag Apples (3lbs)" if item.count > 4 else counted("1 Apple", "{n} Apples")(item)
        ),
    ),
]

PANTRY_RULES: list[GroceryRule] = [
    _rule(when("flour"), fixed("1 bag All-Purpose Flour (5lbs)")),
    _rule(when("brown rice"), fixed("1 bag Brown Rice (2lbs)")),
    _rule(when("rice"), fixed("1 bag White Rice (5lbs)")),
    _rule(
        when("spaghetti"),
        counted("1 box Spaghetti Pasta (1lb)", "{n} boxes Spaghetti Pasta (1lb each)"),
    ),
    _rule(
        when("egg noodles"),
        counted("1 bag Egg Noodles (12oz)", "{n} bags Egg Noodles (12oz each)"),
    ),
    _rule(
        when("pasta", "noodle"),
        counted("1 box {name} (1lb)", "{n} boxes {name} (1lb each)"),
    ),
    _rule(
        when("marinara"),
        counted("1 jar Marinara Sauce (24oz)", "{n} jars Marinara Sauce (24oz each)"),
    ),
    _rule(
        when("tomato sauce"),
        counted("1 can Tomato Sauce (15oz)", "{n} cans Tomato Sauce (15oz each)"),
    ),
    _rule(
        when("diced tomatoes"),
        counted("1 can Diced Tomatoes (14.5oz)", "{n} cans Diced Tomatoes (14.5oz each)"),
    ),
    _rule(
        when("kidney beans"),
        counted("1 can Kidney Beans (15oz)", "{n} cans Kidney Beans (15oz each)"),
    ),
    _rule(
        when("black beans"),
        counted("1 can Black Beans (15oz)", "{n} cans Black Beans (15oz each)"),
    ),
    _rule(
        when("chickpeas", "garbanzo"),
        counted("1 can Chickpeas (15oz)", "{n} cans Chickpeas (15oz each)"),
    ),
    _rule(
        when("chicken broth"),
        counted("1 carton Chicken Broth (32oz)", "{n} cartons Chicken Broth (32oz each)"),
    ),
    _rule(
        when("vegetable broth"),
        counted("1 carton Vegetable Broth (32oz)", "{n} cartons Vegetable Broth (32oz each)"),
    ),
    _rule(
        when("broth", "stock"),
        counted("1 carton {name} (32oz)", "{n} cartons {name} (32oz each)"),
    ),
    _rule(when("olive oil"), fixed("1 bottle Extra Virgin Olive Oil (16.9oz)")),
    _rule(when("vegetable oil"), fixed("1 bottle Vegetable Oil (48oz)")),
    _rule(when("oil"), fixed("1 bottle {name} (16-48oz)")),
    _rule(when("brown sugar"), fixed("1 box Brown Sugar (1lb)")),
    _rule(when("sugar"), fixed("1 bag Sugar (4lbs)")),
    _rule(when("rolled oats"), fixed("1 container Old Fashioned Rolled Oats (42oz)")),
    _rule(when("oats"), fixed("1 container Oats (42oz)")),
    _rule(when("bread", exclude=("breadcrumb",)), fixed("1 loaf Bread (20oz)")),
    _rule(when("peanut butter"), fixed("1 jar Peanut Butter (40oz)")),
    _rule(when("honey"), fixed("1 bottle Honey (12oz)")),
    _rule(when("baking powder"), fixed("1 container Baking Powder (10oz)")),
    _rule(when("tomato soup"), lambda item: f"{item.count} cans Tomato Soup (10.75oz each)"),
    _rule(when("soup"), lambda item: f"{item.count} cans {item.name} (10.75oz each)"),
]

DAIRY_RULES: list[GroceryRule] = [
    _rule(when("milk"), fixed("1 gallon Milk (2% or Whole)")),
    _rule(when("egg"), fixed("1 dozen Large Eggs")),
    _rule(when("butter"), fixed("1 lb Butter (4 sticks)")),
    _rule(when("parmesan"), fixed("1 container Grated Parmesan Cheese (8oz)")),
    _rule(
        when("cream cheese"),
        counted("1 package Cream Cheese (8oz)", "{n} packages Cream Cheese (8oz each)"),
    ),
    _rule(when("sour cream"), fixed("1 container Sour Cream (16oz)")),
    _rule(when("yogurt"), fixed("1 container {name} (32oz)")),
    _rule(
        lambda item: (
            item.category == "dairy"
            and "cheese" in item.lower_name
            and (normalize_unit(item.unit) == "cups" or "shredded" in item.lower_name)
        ),
        counted("1 bag {name} Shredded (8oz)", "2 bags {name} Shredded (8oz each)"),
    ),
    _rule(when("cheese"), fixed("1 package {name} (8oz)")),
]

MEAT_RULES: list[GroceryRule] = [
    _rule(
        when("ground beef"),
        counted(
            "1 package Ground Beef 80/20 (1lb)",
            "{n} packages Ground Beef 80/20 (1lb each)",
        ),
    ),
    _rule(
        when("ground turkey"),
        counted(
            "1 package Ground Turkey 93/7 (1lb)",
            "{n} packages Ground Turkey 93/7 (1lb each)",
        ),
    ),
    _rule(
        when("chicken breast"),
        lambda item: (
            "1 family pack Chicken Breasts (3lbs)"
            if item.count > 2
            else counted("1lb package Chicken Breasts", "{n}lb package Chicken Breasts")(item)
        ),
    ),
    _rule(
        when("chicken thigh"),
        counted(
            "1 package Chicken Thighs (1.5lbs)", "1 family pack Chicken Thighs (3lbs)", threshold=2
        ),
    ),
    _rule(
        when("bacon"),
        counted(
            "1 package Thick Cut Bacon (1lb)", "{n} packages Thick Cut Bacon (1lb each)"
        ),
    ),
    _rule(when("tuna"), counted("1 can Tuna (5oz)", "{n} cans Tuna (5oz each)")),
]

FROZEN_RULES: list[GroceryRule] = [
    _rule(
        when("mixed vegetables"),
        counted(
            "1 bag Frozen Mixed Vegetables (12oz)", "{n} bags Frozen Mixed Vegetables (12oz each)"
        ),
    ),
    _rule(
        when("peas"),
        counted("1 bag Frozen Green Peas (12oz)", "{n} bags Frozen Green Peas (12oz each)"),
    ),
    _rule(
        when("corn"),
        counted("1 bag Frozen Corn Kernels (12oz)", "{n} bags Frozen Corn Kernels (12oz each)"),
    ),
    _rule(
        when(category="frozen"),
        counted("1 bag/box {name} (10-12oz)", "{n} bags/boxes {name} (10-12oz each)"),
    ),
]

SPICE_RULES: list[GroceryRule] = [
    _rule(when("salt"), fixed("1 container Table Salt (26oz)")),
    _rule(when("black pepper"), fixed("1 container Ground Black Pepper (4oz)")),
    _rule(when("garlic powder"), fixed("1 container Garlic Powder (3.4oz)")),
    _rule(when("onion powder"), fixed("1 container Onion Powder (3.1oz)")),
    _rule(when("paprika"), fixed("1 container Paprika (2.5oz)")),
    _rule(when("cumin"), fixed("1 container Ground Cumin (2.2oz)")),
    _rule(when("chili powder"), fixed("1 container Chili Powder (2.5oz)")),
    _rule(when("oregano"), fixed("1 container Dried Oregano (1oz)")),
    _rule(when("thyme"), fixed("1 container Dried Thyme (1oz)")),
    _rule(when("rosemary"), fixed("1 container Dried Rosemary (1oz)")),
    _rule(when("cinnamon"), fixed("1 container Ground Cinnamon (2.4oz)")),
    _rule(when("bay leaves"), fixed("1 container Bay Leaves (0.5oz)")),
    _rule(when(category="spices"), fixed("1 container {name} (1-4oz)")),
]

CONTAINER_RULES: list[GroceryRule] = [
    _rule(when(unit="cans"), counted("1 can {name}", "{n} cans {name}")),
    _rule(when(unit="jars"), counted("1 jar {name}", "{n} jars {name}")),
    _rule(when(unit="bottles"), counted("1 bottle {name}", "{n} bottles {name}")),
    _rule(when(unit="packages"), counted("1 package {name}", "{n} packages {name}")),
    _rule(when(unit="bags"), counted("1 bag {name}", "{n} bags {name}")),
    _rule(when(unit="boxes"), counted("1 box {name}", "{n} boxes {name}")),
    _rule(when(unit="head"), counted("1 head {name}", "{n} heads {name}")),
    _rule(when(unit="bunch"), counted("1 bunch {name}", "{n} bunches {name}")),
]

FALLBACK_RULES: list[GroceryRule] = [
    _rule(
        when("sauce", "dressing"),
        counted("1 bottle {name} (16-24oz)", "{n} bottles {name} (16-24oz each)"),
    ),
    _rule(
        when("cereal", "crackers"),
        counted("1 box {name} (12-16oz)", "{n} boxes {name} (12-16oz each)"),
    ),
    _rule(
        when("nuts", "chips"),
        counted("1 bag {name} (8-16oz)", "{n} bags {name} (8-16oz each)"),
    ),
    _rule(
        when("seasoning", "spice"),
        counted("1 container {name} (1-4oz)", "{n} containers {name} (1-4oz each)"),
    ),
]


def _in_category(category: str, rules: list[GroceryRule]) -> list[GroceryRule]:
    def scoped(rule: GroceryRule) -> GroceryRule:
        return GroceryRule(
            lambda item: item.category == category and rule.matches(item), rule.format
        )

    return [scoped(rule) for rule in rules]


GROCERY_RULES: list[GroceryRule] = [
    *UNIT_RULES,
    *_in_category("produce", PRODUCE_RULES),
    *_in_category("pantry", PANTRY_RULES),
    *_in_category("dairy", DAIRY_RULES),
    *_in_category("meat", MEAT_RULES),
    *_in_category("frozen", FROZEN_RULES),
    *_in_category("spices", SPICE_RULES),
    *CONTAINER_RULES,
    *FALLBACK_RULES,
]


def generic_description(item: GroceryItem) -> str:
    if item.count <= 1:
        return f"1 package/container {item.name} (standard size)"
    return f"{item.count} packages/containers {item.name} (standard size each)"


def format_grocery_item(name: str, amount: float, unit: str, category: str) -> str:
    """
    Describe an ingredient quantity as a purchasable grocery item.

    Examples:
        format_grocery_item("milk", 2, "cups", "dairy") -> "1 gallon milk"
        format_grocery_item("black beans", 1.5, "cans", "pantry")
            -> "2 cans Black Beans (15oz each)"
    """
    item = GroceryItem(name=name, amount=amount, unit=unit or "", category=category)
    for rule in GROCERY_RULES:
        if rule.matches(item):
            return rule.format(item)
    return generic_description(item)
