"""Unit normalization and price conversion tables for grocery quantities."""

from typing import Literal

UnitType = Literal["weight", "volume", "package", "unknown"]

# Recipe unit synonyms (maps every spelling to one canonical unit)
UNIT_SYNONYMS: dict[str, str] = {
    # Volume
    "cup": "cups",
    "cups": "cups",
    "c": "cups",
    "tablespoon": "tbsp",
    "tablespoons": "tbsp",
    "tbsp": "tbsp",
    "tbs": "tbsp",
    "teaspoon": "tsp",
    "teaspoons": "tsp",
    "tsp": "tsp",
    "pints": "pint",
    "quarts": "quart",
    "gallons": "gallon",
    # Weight
    "lb": "lbs",
    "lbs": "lbs",
    "pound": "lbs",
    "pounds": "lbs",
    "oz": "oz",
    "ounce": "oz",
    "ounces": "oz",
    # Count
    "whole": "whole",
    "each": "whole",
    "item": "whole",
    "items": "whole",
    "piece": "whole",
    "pieces": "whole",
    "clove": "cloves",
    "cloves": "cloves",
    "slice": "slices",
    "slices": "slices",
    "stalk": "stalks",
    "stalks": "stalks",
    # Packaging
    "can": "cans",
    "cans": "cans",
    "jar": "jars",
    "jars": "jars",
    "container": "containers",
    "containers": "containers",
    "bag": "bags",
    "bags": "bags",
    "box": "boxes",
    "boxes": "boxes",
    "package": "packages",
    "packages": "packages",
    "pkg": "packages",
    "bottle": "bottles",
    "bottles": "bottles",
    "carton": "cartons",
    "cartons": "cartons",
}

# How many requested units one base (shelf) unit holds: (base_unit, requested_unit) -> ratio
PACKAGE_RATIOS: dict[tuple[str, str], float] = {
    ("gallon", "cups"): 16,  # 16 cups per gallon
    ("42oz", "cups"): 5.25,  # rolled oats canister
    ("5lb", "cups"): 11,  # 2.2 cups per pound (rice)
    ("5lb", "tbsp"): 176,
    ("4lb", "cups"): 9,
    ("4lb", "tbsp"): 144,
    ("dozen", "whole"): 12,
    ("loaf", "slices"): 20,
    ("head", "cloves"): 10,
    ("bunch", "stalks"): 3,
    ("32oz", "cups"): 4,  # broth carton
    ("16oz", "tbsp"): 32,
    ("16.9oz", "tbsp"): 33.8,
    ("48oz", "tbsp"): 96,
    ("12oz", "oz"): 12,
    ("12oz", "cups"): 2.5,
    ("12oz", "tbsp"): 16,
    ("containers", "tsp"): 24,
    ("containers", "tbsp"): 8,
    ("containers", "cups"): 3,
    ("containers", "whole"): 30,  # bay leaves and other whole spices
    ("lbs", "tbsp"): 32,  # butter
    ("lbs", "cups"): 4,  # shredded cheese
    ("lbs", "slices"): 16,
    ("lbs", "whole"): 2,  # medium onion, carrot or potato
}

# Ingredient-specific overrides: (name keyword, base_unit, requested_unit) -> ratio
INGREDIENT_RATIOS: dict[tuple[str, str, str], float] = {
    ("flour", "5lb", "cups"): 20,  # 4 cups per pound
    ("flour", "5lb", "tbsp"): 320,
    ("lentil", "lbs", "cups"): 2.3,
}

# Weight units -> pounds
WEIGHT_IN_LBS: dict[str, float] = {
    "oz": 1 / 16,
    "lbs": 1.0,
}

# Volume units -> cups
VOLUME_IN_CUPS: dict[str, float] = {
    "tsp": 1 / 48,
    "tbsp": 1 / 16,
    "cups": 1.0,
    "pint": 2.0,
    "quart": 4.0,
    "gallon": 16.0,
}

PACKAGE_UNITS = {
    "cans",
    "jars",
    "containers",
    "bags",
    "boxes",
    "packages",
    "bottles",
    "cartons",
    "head",
    "bunch",
    "loaf",
    "dozen",
}


def normalize_unit(unit: str | None) -> str:
    """Collapse unit spellings to one canonical form (``"cup"`` -> ``"cups"``)."""
    if not unit:
        return ""
    unit_lower = unit.lower().strip()
    return UNIT_SYNONYMS.get(unit_lower, unit_lower)


def get_unit_type(unit: str | None) -> UnitType:
    """Get the type of a unit (weight, volume, package, or unknown)."""
    normalized = normalize_unit(unit)
    if normalized in WEIGHT_IN_LBS:
        return "weight"
    if normalized in VOLUME_IN_CUPS:
        return "volume"
    if normalized in PACKAGE_UNITS:
        return "package"
    return "unknown"


def conversion_ratio(base_unit: str, requested_unit: str, name: str = "") -> float | None:
    """
    Look up how many requested units fit in one base unit.

    Args:
        base_unit: Unit the shelf price is quoted in (e.g., "gallon")
        requested_unit: Unit the recipe asks for (e.g., "cups")
        name: Ingredient name, used for ingredient-specific ratios

    Returns:
        Ratio, or None if the pair is not in any table
    """
    base = normalize_unit(base_unit)
    requested = normalize_unit(requested_unit)
    name_lower = name.lower()

    for (keyword, ratio_base, ratio_requested), ratio in INGREDIENT_RATIOS.items():
        if keyword in name_lower and (ratio_base, ratio_requested) == (base, requested):
            return ratio

    if (base, requested) in PACKAGE_RATIOS:
        return PACKAGE_RATIOS[(base, requested)]

    if base in WEIGHT_IN_LBS and requested in WEIGHT_IN_LBS:
        return WEIGHT_IN_LBS[base] / WEIGHT_IN_LBS[requested]

    if base in VOLUME_IN_CUPS and requested in VOLUME_IN_CUPS:
        return VOLUME_IN_CUPS[base] / VOLUME_IN_CUPS[requested]

    return None


def to_base_amount(amount: float, unit: str, base_unit: str, name: str = "") -> float:
    """
    Express a requested amount in the base unit a price is quoted in.

    Unknown unit pairs fall back to treating the amount as unit-less.

    Examples:
        to_base_amount(2, "cups", "gallon") -> 0.125
        to_base_amount(4, "cloves", "head") -> 0.4
        to_base_amount(3, "peppers", "each") -> 3
    """
    if normalize_unit(unit) == normalize_unit(base_unit):
        return amount

    ratio = conversion_ratio(base_unit, unit, name)
    if ratio is None or ratio <= 0:
        return amount
    return amount / ratio
