"""Ingredient pricing: strategy chain, regional adjustment, caching, and bulk lookup."""

import logging
import re
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Protocol

import httpx
from bs4 import BeautifulSoup
from rapidfuzz import fuzz, process

from .config import Settings, load_settings
from .errors import LLMError, PricingUnavailableError
from .llm import LLMClient
from .price_tables import (
    BASIC_ESTIMATES,
    DEFAULT_UNIT_PRICE,
    INGREDIENT_PRICES,
    NATIONAL_REGION,
    NATIONAL_STORE_CHAINS,
    REGIONAL_STORE_CHAINS,
    RETAILER_SEARCH_URL,
    STATE_ADJUSTMENTS,
    ZIP_RANGE_MULTIPLIERS,
    ZIP_REGIONS,
    BasePrice,
    RegionInfo,
    StoreChain,
)
from .recipes import Ingredient, Recipe
from .units import to_base_amount

logger = logging.getLogger(__name__)

# Scraped prices outside this range are page noise, not grocery prices
MIN_PLAUSIBLE_PRICE = 0.50
MAX_PLAUSIBLE_PRICE = 50.00

# Minimum rapidfuzz ratio for a base-table name match
FUZZY_MATCH_CUTOFF = 88

BROWSER_HEADERS = {
    "User-Agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/124.0.0.0 Safari/537.36",
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
}

PRICE_PATTERNS = [
    re.compile(r"\$(\d+\.\d{2})"),
    re.compile(r'"price":"?(\d+\.\d{2})"?'),
    re.compile(r'"salePrice":"?(\d+\.\d{2})"?'),
    re.compile(r'data-price="(\d+\.\d{2})"'),
]

# Errors a strategy may raise to pass control to the next one
STRATEGY_ERRORS = (PricingUnavailableError, LLMError, httpx.HTTPError)


@dataclass(frozen=True)
class PriceRequest:
    """One ingredient quantity to price."""

    name: str
    amount: float
    unit: str
    location: str | None = None
    search_term: str | None = None


@dataclass(frozen=True)
class StrategyQuote:
    """Price of one base unit as reported by a single strategy."""

    unit_price: float
    source: str
    confidence: str
    base_unit: str | None = None
    regional: bool = False
    store: str | None = None
    product: str | None = None


@dataclass(frozen=True)
class PriceQuote:
    """Final price for a requested ingredient quantity."""

    price: float
    source: str
    confidence: str
    unit: str
    regional: bool = False
    store: str | None = None
    product: str | None = None


@dataclass(frozen=True)
class PricedIngredient:
    ingredient: Ingredient
    quote: PriceQuote


@dataclass(frozen=True)
class RecipePricing:
    """Cost of a recipe at its stated servings."""

    total_cost: float
    cost_per_serving: float
    items: tuple[PricedIngredient, ...] = ()

    def scaled(self, scale_factor: float, servings: int) -> "RecipePricing":
        """Cost of the recipe multiplied by ``scale_factor`` and split over ``servings``."""
        total = self.total_cost * scale_factor
        return RecipePricing(
            total_cost=round(total, 2),
            cost_per_serving=round(total / servings, 2) if servings > 0 else 0.0,
            items=self.items,
        )


# ============================================================================
# Location helpers
# ============================================================================

_ZIP_RE = re.compile(r"\b(\d{5})(?:-\d{4})?\b")
_STATE_RE = re.compile(r"\b([A-Z]{2})\b")


def extract_zip(location: str | None) -> str | None:
    """Return the first 5-digit ZIP code in a location string."""
    if not location:
        return None
    match = _ZIP_RE.search(location)
    return match.group(1) if match else None


def extract_state(location: str | None) -> str | None:
    """Return the first two-letter US state code appearing as a whole word."""
    if not location:
        return None
    for token in _STATE_RE.findall(location.upper()):
        if token in STATE_ADJUSTMENTS:
            return token
    return None


def regional_multiplier(location: str | None) -> float:
    """
    Cost-of-living multiplier for a location.

    A 5-digit ZIP is looked up in the ZIP range table; otherwise a state code
    is looked up in the state table; anything else is 1.0.
    """
    zip_code = extract_zip(location)
    if zip_code:
        zip_num = int(zip_code)
        for low, high, multiplier in ZIP_RANGE_MULTIPLIERS:
            if low <= zip_num <= high:
                return multiplier
        return 1.0

    state = extract_state(location)
    if state:
        return STATE_ADJUSTMENTS[state]
    return 1.0


def region_for_location(location: str | None) -> RegionInfo | None:
    """Resolve a location to a region, or None when it holds no ZIP or state."""
    zip_code = extract_zip(location)
    if zip_code:
        zip_num = int(zip_code)
        for low, high, region in ZIP_REGIONS:
            if low <= zip_num <= high:
                return region
        return NATIONAL_REGION

    state = extract_state(location)
    if state:
        return RegionInfo(city="", state=state, region=state)
    return None


def parse_page_price(html: str) -> tuple[float | None, str | None]:
    """
    Find the first plausible grocery price and product name on a search page.

    Structured price attributes are tried before raw text patterns.

    Returns:
        Tuple of (price, product name); either may be None
    """
    soup = BeautifulSoup(html, "html.parser")

    price = None
    candidates = [tag.get("data-price") for tag in soup.find_all(attrs={"data-price": True})]
    candidates += [tag.get("content") for tag in soup.find_all(attrs={"itemprop": "price"})]
    for candidate in candidates:
        try:
            value = float(str(candidate).replace("$", ""))
        except ValueError:
            continue
        if MIN_PLAUSIBLE_PRICE <= value <= MAX_PLAUSIBLE_PRICE:
            price = value
            break

    if price is None:
        for pattern in PRICE_PATTERNS:
            prices = [float(m) for m in pattern.findall(html)]
            plausible = [p for p in prices if MIN_PLAUSIBLE_PRICE <= p <= MAX_PLAUSIBLE_PRICE]
            if plausible:
                price = plausible[0]
                break

    name_tag = soup.find(attrs={"itemprop": "name"})
    if name_tag is not None and name_tag.get_text(strip=True):
        product = name_tag.get_text(strip=True)
    else:
        name_match = re.search(r'"name":"([^"]+)"', html)
        product = name_match.group(1).strip() if name_match else None

    return price, product


# ============================================================================
# Cache and rate limiting
# ============================================================================

CacheKey = tuple[str, float, str, str | None]


class PriceCache:
    """Thread-safe LRU cache of price quotes with a time-to-live."""

    def __init__(
        self,
        max_entries: int = 2048,
        ttl: float = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_entries = max_entries
        self.ttl = ttl
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: OrderedDict[CacheKey, tuple[float, PriceQuote]] = OrderedDict()

    @staticmethod
    def make_key(name: str, amount: float, unit: str, location: str | None) -> CacheKey:
        return (name.lower().strip(), float(amount), unit.lower().strip(), location)

    def get(self, key: CacheKey) -> PriceQuote | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, quote = entry
            if self._clock() - stored_at > self.ttl:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return quote

    def set(self, key: CacheKey, quote: PriceQuote) -> None:
        with self._lock:
            self._entries[key] = (self._clock(), quote)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RateLimiter:
    """Enforces a minimum delay between external calls across threads."""

    def __init__(self, min_interval: float = 0.3):
        self.min_interval = min_interval
        self._lock = threading.Lock()
        self._last_call: float | None = None

    def wait(self) -> None:
        with self._lock:
            now = time.monotonic()
            if self._last_call is not None:
                remaining = self.min_interval - (now - self._last_call)
                if remaining > 0:
                    time.sleep(remaining)
                    now = time.monotonic()
            self._last_call = now


# ============================================================================
# Strategies
# ============================================================================


class PricingStrategy(Protocol):
    """A single way of finding an ingredient's price."""

    name: str

    def lookup(self, request: PriceRequest) -> StrategyQuote | None: ...


class BasePriceTable:
    """Categorized national base prices; never fails."""

    name = "base_table"

    def __init__(self, prices: dict[str, BasePrice] | None = None):
        self.prices = prices if prices is not None else INGREDIENT_PRICES
        self._names = list(self.prices)

    def match(self, name: str) -> BasePrice | None:
        """Find the base price for an ingredient by exact or fuzzy name match."""
        key = name.lower().strip()
        if key in self.prices:
            return self.prices[key]

        result = process.extractOne(
            key, self._names, scorer=fuzz.ratio, score_cutoff=FUZZY_MATCH_CUTOFF
        )
        if result is None:
            return None
        matched, score, _ = result
        logger.debug("Fuzzy matched %r to %r (%.0f)", name, matched, score)
        return self.prices[matched]

    def lookup(self, request: PriceRequest) -> StrategyQuote:
        base = self.match(request.name)
        if base is None:
            return self.default_quote()
        return StrategyQuote(
            unit_price=base.price,
            source="base_table",
            confidence="catalog",
            base_unit=base.unit,
        )

    @staticmethod
    def default_quote() -> StrategyQuote:
        return StrategyQuote(
            unit_price=DEFAULT_UNIT_PRICE,
            source="default_estimate",
            confidence="default",
        )


class RegionalEstimate:
    """Keyword estimate adjusted for the requester's region."""

    name = "regional_estimate"

    def __init__(self, estimates: list[tuple[str, float]] | None = None):
        self.estimates = estimates if estimates is not None else BASIC_ESTIMATES

    def estimate(self, name: str) -> float | None:
        name_lower = name.lower()
        for keyword, price in self.estimates:
            if keyword in name_lower:
                return price
        return None

    def lookup(self, request: PriceRequest) -> StrategyQuote | None:
        if region_for_location(request.location) is None:
            return None

        price = self.estimate(request.name)
        if price is None:
            return None

        return StrategyQuote(
            unit_price=price * regional_multiplier(request.location),
            source="regional_estimate",
            confidence="estimated",
            regional=True,
        )


class RetailerScrape:
    """Scrape a national retailer's search results page."""

    name = "retailer_scrape"

    def __init__(
        self,
        client: httpx.Client,
        rate_limiter: RateLimiter | None = None,
        search_url: str = RETAILER_SEARCH_URL,
    ):
        self.client = client
        self.rate_limiter = rate_limiter
        self.search_url = search_url

    def lookup(self, request: PriceRequest) -> StrategyQuote | None:
        term = request.search_term or request.name
        if self.rate_limiter:
            self.rate_limiter.wait()

        response = self.client.get(self.search_url, params={"q": term}, headers=BROWSER_HEADERS)
        response.raise_for_status()

        price, product = parse_page_price(response.text)
        if price is None:
            return None

        return StrategyQuote(
            unit_price=price,
            source="walmart_scraped",
            confidence="scraped",
            store="Walmart",
            product=product or term,
        )


class RegionalStoreSearch:
    """Search the grocery chains that operate in the requester's state."""

    name = "regional_store_search"

    def __init__(self, client: httpx.Client, rate_limiter: RateLimiter | None = None):
        self.client = client
        self.rate_limiter = rate_limiter

    @staticmethod
    def chains_for(state: str) -> list[StoreChain]:
        return REGIONAL_STORE_CHAINS.get(state, NATIONAL_STORE_CHAINS)

    def lookup(self, request: PriceRequest) -> StrategyQuote | None:
        region = region_for_location(request.location)
        if region is None:
            return None

        term = request.search_term or request.name
        best: tuple[float, StoreChain, str | None] | None = None

        for chain in self.chains_for(region.state):
            if self.rate_limiter:
                self.rate_limiter.wait()
            try:
                response = self.client.get(
                    chain.search_url, params={"q": term}, headers=BROWSER_HEADERS
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                logger.debug("Store search at %s failed for %s: %s", chain.name, term, e)
                continue

            price, product = parse_page_price(response.text)
            if price is not None and (best is None or price < best[0]):
                best = (price, chain, product)

        if best is None:
            return None

        price, chain, product = best
        return StrategyQuote(
            unit_price=price,
            source="geographic_search",
            confidence="regional_store_data",
            regional=True,
            store=chain.name,
            product=product or term,
        )


class AIPriceLookup:
    """Ask a language model for a current local shelf price."""

    name = "ai_price_lookup"

    SYSTEM_PROMPT = (
        "You are a grocery price researcher with access to current pricing data. "
        "Research current grocery prices for specific geographic locations. "
        "Consider local market conditions, store density, cost of living, "
        "and regional pricing variations."
    )

    def __init__(self, llm: LLMClient, rate_limiter: RateLimiter | None = None):
        self.llm = llm
        self.rate_limiter = rate_limiter

    def build_prompt(self, term: str, region: RegionInfo, location: str) -> str:
        place = f"{region.city}, {region.state}" if region.city else region.state
        return (
            f'Find the current price for "{term}" at grocery stores '
            f"(Walmart, Target, Kroger, etc.) in {place} ({location}).\n\n"
            f"Consider local cost of living, current grocery inflation, "
            f"and typical pricing for the {region.region} region.\n\n"
            "Respond with the price in dollars, the store name, and the full product name.\n"
            'Format: "$X.XX at [Store] - [Product Name]"'
        )

    @staticmethod
    def parse_reply(reply: str) -> tuple[float, str | None, str | None]:
        """
        Parse a ``"$X.XX at Store - Product"`` reply.

        Raises:
            PricingUnavailableError: If the reply contains no price
        """
        price_match = re.search(r"\$(\d+\.\d{2})", reply)
        if not price_match:
            raise PricingUnavailableError(f"No price in model reply: {reply[:80]!r}")
        store_match = re.search(r"at\s+([^-\n]+)", reply)
        product_match = re.search(r"-\s*(.+)$", reply)
        return (
            float(price_match.group(1)),
            store_match.group(1).strip() if store_match else None,
            product_match.group(1).strip() if product_match else None,
        )

    def lookup(self, request: PriceRequest) -> StrategyQuote | None:
        region = region_for_location(request.location)
        if region is None or request.location is None:
            return None

        term = request.search_term or request.name
        if self.rate_limiter:
            self.rate_limiter.wait()

        reply = self.llm.chat(
            [
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {"role": "user", "content": self.build_prompt(term, region, request.location)},
            ],
            temperature=0.2,
            max_tokens=150,
        )
        price, store, product = self.parse_reply(reply)

        return StrategyQuote(
            unit_price=price,
            source="ai_geographic",
            confidence="ai_regional_search",
            regional=True,
            store=store,
            product=product or term,
        )


# ============================================================================
# Resolver
# ============================================================================


class PricingResolver:
    """Prices ingredient quantities through an ordered chain of strategies."""

    def __init__(
        self,
        strategies: Sequence[PricingStrategy] | None = None,
        *,
        base_table: BasePriceTable | None = None,
        cache: PriceCache | None = None,
        max_workers: int = 4,
        http_client: httpx.Client | None = None,
    ):
        self.base_table = base_table or BasePriceTable()
        if strategies is None:
            strategies = [RegionalEstimate(), self.base_table]
        self.strategies = list(strategies)
        self.cache = cache if cache is not None else PriceCache()
        self.max_workers = max(1, max_workers)
        self._http_client = http_client

    def price(
        self,
        name: str,
        amount: float,
        unit: str,
        location: str | None = None,
        search_term: str | None = None,
    ) -> PriceQuote:
        """
        Price a quantity of an ingredient.

        Args:
            name: Ingredient name
            amount: Requested amount in ``unit``
            unit: Requested unit
            location: Free-form location holding a ZIP code or state
            search_term: Retail search term, defaults to the name

        Returns:
            PriceQuote rounded to cents
        """
        key = PriceCache.make_key(name, amount, unit, location)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        request = PriceRequest(name, amount, unit, location, search_term)
        quote = self._finish(request, self._lookup(request))
        self.cache.set(key, quote)
        return quote

    def _lookup(self, request: PriceRequest) -> StrategyQuote:
        for strategy in self.strategies:
            try:
                quote = strategy.lookup(request)
            except STRATEGY_ERRORS as e:
                logger.debug("%s failed for %s: %s", strategy.name, request.name, e)
                continue
            if quote is not None:
                return quote
        return BasePriceTable.default_quote()

    def _finish(self, request: PriceRequest, quote: StrategyQuote) -> PriceQuote:
        base_unit = quote.base_unit
        if base_unit is None and quote.source != "default_estimate":
            base = self.base_table.match(request.name)
            base_unit = base.unit if base else None

        if base_unit:
            quantity = to_base_amount(request.amount, request.unit, base_unit, request.name)
        else:
            quantity = request.amount

        price = quote.unit_price * quantity
        if not quote.regional:
            price *= regional_multiplier(request.location)

        return PriceQuote(
            price=round(price, 2),
            source=quote.source,
            confidence=quote.confidence,
            unit=base_unit or request.unit,
            regional=quote.regional,
            store=quote.store,
            product=quote.product,
        )

    def _price_request(self, request: PriceRequest) -> PriceQuote:
        try:
            return self.price(
                request.name, request.amount, request.unit, request.location, request.search_term
            )
        except Exception as e:
            logger.warning("Pricing failed for %s, using default estimate: %s", request.name, e)
            return self._finish(request, BasePriceTable.default_quote())

    def price_many(self, requests: Sequence[PriceRequest]) -> list[PriceQuote]:
        """
        Price many requests concurrently, preserving input order.

        A failure in one lookup degrades that item to the default estimate.
        """
        if not requests:
            return []
        if self.max_workers == 1 or len(requests) == 1:
            return [self._price_request(r) for r in requests]
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(executor.map(self._price_request, requests))

    def price_recipe(self, recipe: Recipe, location: str | None = None) -> RecipePricing:
        """Price every ingredient of a recipe at its stated servings."""
        requests = [
            PriceRequest(ing.name, ing.amount, ing.unit, location, ing.search_term)
            for ing in recipe.ingredients
        ]
        quotes = self.price_many(requests)
        total = sum(quote.price for quote in quotes)
        return RecipePricing(
            total_cost=round(total, 2),
            cost_per_serving=round(total / recipe.servings, 2),
            items=tuple(
                PricedIngredient(ing, quote)
                for ing, quote in zip(recipe.ingredients, quotes, strict=True)
            ),
        )

    def clear_cache(self) -> None:
        self.cache.clear()

    def close(self) -> None:
        if self._http_client is not None:
            self._http_client.close()

    def __enter__(self) -> "PricingResolver":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def build_default_resolver(settings: Settings | None = None) -> PricingResolver:
    """
    Build a resolver from settings.

    Offline the chain is (regional estimate, base table). With live pricing
    on, the AI lookup (when an API key is set), regional store search, and
    retailer scrape are tried first.
    """
    settings = settings or load_settings()
    base_table = BasePriceTable()
    strategies: list[PricingStrategy] = []
    http_client = None

    if settings.live_pricing:
        http_client = httpx.Client(timeout=settings.http_timeout, follow_redirects=True)
        limiter = RateLimiter(settings.request_delay)
        if settings.openai_api_key:
            llm = LLMClient(
                settings.openai_api_key,
                settings.llm_model,
                timeout=settings.http_timeout,
                client=http_client,
            )
            strategies.append(AIPriceLookup(llm, limiter))
        strategies.append(RegionalStoreSearch(http_client, limiter))
        strategies.append(RetailerScrape(http_client, limiter))

    strategies.extend([RegionalEstimate(), base_table])

    return PricingResolver(
        strategies,
        base_table=base_table,
        cache=PriceCache(settings.cache_size, settings.cache_ttl),
        max_workers=settings.max_workers,
        http_client=http_client,
    )
