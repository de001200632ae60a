"""Static grocery price data and regional cost-of-living tables."""

from dataclasses import dataclass

# Price charged for an ingredient no table recognizes, per requested unit
DEFAULT_UNIT_PRICE = 3.48


@dataclass(frozen=True)
class BasePrice:
    """Shelf price of one base unit of an ingredient."""

    price: float
    unit: str
    category: str
    last_updated: str = "2024-10-15"


def _prices(category: str, items: dict[str, tuple[float, str]]) -> dict[str, BasePrice]:
    return {name: BasePrice(price, unit, category) for name, (price, unit) in items.items()}


# Categorized base prices (price per unit, national average)
INGREDIENT_PRICES: dict[str, BasePrice] = {
    **_prices(
        "produce",
        {
            "banana": (0.58, "lb"),
            "onion": (1.28, "lb"),
            "potatoes": (0.98, "lb"),
            "carrots": (0.98, "lb"),
            "celery": (1.48, "bunch"),
            "bell pepper": (1.28, "each"),
            "garlic": (0.88, "head"),
        },
    ),
    **_prices(
        "dairy",
        {
            "milk": (3.68, "gallon"),
            "eggs": (2.98, "dozen"),
            "butter": (4.98, "lb"),
            "cheddar cheese": (3.98, "lb"),
            "parmesan cheese": (4.98, "container"),
        },
    ),
    **_prices(
        "meat",
        {
            "ground beef": (4.98, "lb"),
            "chicken breast": (3.48, "lb"),
            "chicken thighs": (1.98, "lb"),
        },
    ),
    **_prices(
        "pantry",
        {
            "rolled oats": (2.98, "42oz"),
            "white rice": (2.68, "5lb"),
            "all-purpose flour": (2.98, "5lb"),
            "spaghetti pasta": (1.28, "lb"),
            "egg noodles": (1.48, "12oz"),
            "bread": (1.28, "loaf"),
            "black beans": (0.88, "can"),
            "kidney beans": (0.88, "can"),
            "dried lentils": (1.68, "lb"),
            "diced tomatoes": (0.98, "can"),
            "tomato sauce": (0.88, "can"),
            "marinara sauce": (1.48, "jar"),
            "tomato soup": (1.28, "can"),
            "cream of mushroom soup": (1.28, "can"),
            "chicken broth": (1.48, "32oz"),
            "vegetable broth": (1.48, "32oz"),
            "tuna": (1.28, "can"),
            "olive oil": (3.98, "16.9oz"),
            "vegetable oil": (2.98, "48oz"),
            "sugar": (2.98, "4lb"),
            "honey": (3.98, "12oz"),
            "peanut butter": (2.48, "16oz"),
            "baking powder": (0.98, "container"),
            "salt": (0.58, "container"),
            "breadcrumbs": (1.48, "container"),
        },
    ),
    **_prices(
        "spices",
        {
            "cinnamon": (1.28, "container"),
            "cumin": (1.28, "container"),
            "chili powder": (1.28, "container"),
            "garlic powder": (1.28, "container"),
            "rosemary": (1.28, "container"),
            "thyme": (1.28, "container"),
            "bay leaves": (1.28, "container"),
        },
    ),
    **_prices(
        "frozen",
        {
            "mixed vegetables": (1.48, "12oz"),
            "frozen peas": (1.28, "12oz"),
        },
    ),
}

# Keyword estimates used when no live price is available (first match wins)
BASIC_ESTIMATES: list[tuple[str, float]] = [
    # Compound names that would otherwise hit a shorter keyword
    ("peanut butter", 4.48),
    ("garlic powder", 2.28),
    ("onion powder", 2.28),
    ("black pepper", 2.98),
    # Meat & Protein
    ("ground beef", 5.48),
    ("chicken breast", 5.98),
    ("chicken thigh", 4.48),
    ("eggs", 2.98),
    ("bacon", 6.48),
    ("salmon", 12.98),
    ("tuna", 8.98),
    # Dairy
    ("milk", 3.78),
    ("butter", 4.98),
    ("cream cheese", 3.48),
    ("sour cream", 2.98),
    ("cheese", 4.48),
    ("yogurt", 5.48),
    # Produce
    ("onion", 1.68),
    ("carrot", 1.48),
    ("potato", 3.48),
    ("tomato", 2.98),
    ("banana", 1.78),
    ("apple", 2.48),
    ("lettuce", 2.28),
    ("bell pepper", 1.98),
    ("garlic", 0.98),
    ("celery", 1.98),
    ("broccoli", 2.48),
    # Pantry Staples
    ("rice", 4.48),
    ("pasta", 1.48),
    ("flour", 3.98),
    ("sugar", 3.48),
    ("oil", 4.98),
    ("vinegar", 2.48),
    ("salt", 1.28),
    # Canned/Jarred
    ("marinara", 1.98),
    ("beans", 1.68),
    ("broth", 2.98),
    ("soup", 2.48),
    # Bread & Grain
    ("bread", 2.48),
    ("bagel", 3.48),
    ("cereal", 4.98),
    ("oats", 4.98),
    # Frozen
    ("frozen vegetables", 2.48),
    ("frozen fruit", 3.98),
    ("ice cream", 5.48),
    # Spices & Seasonings
    ("basil", 1.98),
    ("oregano", 1.98),
    ("cumin", 2.48),
    ("paprika", 2.48),
    ("pepper", 2.98),
]

# Cost-of-living multipliers by state
STATE_ADJUSTMENTS: dict[str, float] = {
    "AL": 0.92, "AK": 1.32, "AZ": 1.05, "AR": 0.89, "CA": 1.25,
    "CO": 1.08, "CT": 1.18, "DE": 1.05, "FL": 1.02, "GA": 0.95,
    "HI": 1.45, "ID": 0.98, "IL": 1.08, "IN": 0.95, "IA": 0.92,
    "KS": 0.94, "KY": 0.91, "LA": 0.93, "ME": 1.12, "MD": 1.15,
    "MA": 1.22, "MI": 0.98, "MN": 1.05, "MS": 0.88, "MO": 0.92,
    "MT": 1.02, "NE": 0.94, "NV": 1.08, "NH": 1.12, "NJ": 1.18,
    "NM": 0.98, "NY": 1.28, "NC": 0.96, "ND": 0.95, "OH": 0.96,
    "OK": 0.91, "OR": 1.12, "PA": 1.05, "RI": 1.15, "SC": 0.94,
    "SD": 0.95, "TN": 0.92, "TX": 0.96, "UT": 1.02, "VT": 1.15,
    "VA": 1.08, "WA": 1.15, "WV": 0.94, "WI": 0.98, "WY": 1.05,
}  # fmt: skip

# Cost-of-living multipliers by ZIP range (checked in order)
ZIP_RANGE_MULTIPLIERS: list[tuple[int, int, float]] = [
    (10000, 14999, 1.15),  # Northeast (NY, PA, NJ)
    (90000, 96999, 1.25),  # California
    (98000, 99999, 1.18),  # Washington
    (97000, 97999, 1.12),  # Oregon
    (80000, 81999, 1.08),  # Colorado
    (30000, 39999, 0.88),  # Southeast (GA, FL, SC)
    (40000, 49999, 0.92),  # Kentucky, Tennessee
    (50000, 52999, 0.90),  # Iowa
    (70000, 79999, 0.95),  # Texas
]


@dataclass(frozen=True)
class RegionInfo:
    """City and state a ZIP code resolves to."""

    city: str
    state: str
    region: str


# ZIP ranges -> representative city, used to phrase region-aware lookups
ZIP_REGIONS: list[tuple[int, int, RegionInfo]] = [
    (90000, 96999, RegionInfo("Los Angeles", "CA", "West Coast")),
    (10000, 14999, RegionInfo("New York", "NY", "Northeast")),
    (70000, 79999, RegionInfo("Dallas", "TX", "South")),
    (30000, 39999, RegionInfo("Atlanta", "GA", "Southeast")),
    (60000, 69999, RegionInfo("Chicago", "IL", "Midwest")),
    (98000, 99999, RegionInfo("Seattle", "WA", "Pacific Northwest")),
]

NATIONAL_REGION = RegionInfo("Anytown", "USA", "National")


@dataclass(frozen=True)
class StoreChain:
    """A grocery chain with a searchable website."""

    id: str
    name: str
    search_url: str


REGIONAL_STORE_CHAINS: dict[str, list[StoreChain]] = {
    "CA": [
        StoreChain("ralphs", "Ralphs", "https://www.ralphs.com/search"),
        StoreChain("vons", "Vons", "https://www.vons.com/search"),
        StoreChain("safeway-ca", "Safeway", "https://www.safeway.com/search"),
    ],
    "TX": [
        StoreChain("heb", "H-E-B", "https://www.heb.com/search"),
        StoreChain("kroger-tx", "Kroger", "https://www.kroger.com/search"),
        StoreChain("randalls", "Randalls", "https://www.randalls.com/search"),
    ],
    "NY": [
        StoreChain("stop-shop", "Stop & Shop", "https://stopandshop.com/search"),
        StoreChain("wegmans", "Wegmans", "https://www.wegmans.com/search"),
        StoreChain("key-food", "Key Food", "https://www.keyfood.com/search"),
    ],
    "FL": [
        StoreChain("publix", "Publix", "https://www.publix.com/search"),
        StoreChain("winn-dixie", "Winn-Dixie", "https://www.winndixie.com/search"),
    ],
    "WA": [
        StoreChain("safeway-wa", "Safeway", "https://www.safeway.com/search"),
        StoreChain("fred-meyer", "Fred Meyer", "https://www.fredmeyer.com/search"),
        StoreChain("qfc", "QFC", "https://www.qfc.com/search"),
    ],
}

NATIONAL_STORE_CHAINS: list[StoreChain] = [
    StoreChain("walmart", "Walmart", "https://www.walmart.com/search"),
    StoreChain("target", "Target", "https://www.target.com/s"),
    StoreChain("kroger-nat", "Kroger", "https://www.kroger.com/search"),
]

RETAILER_SEARCH_URL = "https://www.walmart.com/search"
