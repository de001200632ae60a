"""Configuration and settings management for Budget Meals."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

APP_NAME = "budget-meals"
ENV_PREFIX = "BUDGET_MEALS_"

# API Configuration
OPENAI_API_URL = "https://api.openai.com/v1/chat/completions"
DEFAULT_LLM_MODEL = "gpt-4-turbo-preview"

# Input limits
MIN_WEEKLY_BUDGET = 20.0
DEFAULT_MEALS_COUNT = 7


@dataclass
class Settings:
    """Runtime settings, read from the environment."""

    openai_api_key: str | None = None
    llm_model: str = DEFAULT_LLM_MODEL
    live_pricing: bool = False
    request_delay: float = 0.3
    http_timeout: float = 15.0
    cache_ttl: float = 3600.0
    cache_size: int = 2048
    max_workers: int = 4
    catalog_path: Path | None = None


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        return default


def get_openai_key() -> str | None:
    """Get the OpenAI API key from the environment."""
    key = os.getenv("OPENAI_API_KEY")
    return key.strip() if key and key.strip() else None


def load_settings() -> Settings:
    """Build settings from environment variables, falling back to defaults."""
    catalog = os.getenv(f"{ENV_PREFIX}CATALOG")
    return Settings(
        openai_api_key=get_openai_key(),
        llm_model=os.getenv(f"{ENV_PREFIX}LLM_MODEL") or DEFAULT_LLM_MODEL,
        live_pricing=_env_bool(f"{ENV_PREFIX}LIVE_PRICING", False),
        request_delay=_env_float(f"{ENV_PREFIX}REQUEST_DELAY", 0.3),
        http_timeout=_env_float(f"{ENV_PREFIX}HTTP_TIMEOUT", 15.0),
        cache_ttl=_env_float(f"{ENV_PREFIX}CACHE_TTL", 3600.0),
        cache_size=_env_int(f"{ENV_PREFIX}CACHE_SIZE", 2048),
        max_workers=max(1, _env_int(f"{ENV_PREFIX}MAX_WORKERS", 4)),
        catalog_path=Path(catalog).expanduser() if catalog else None,
    )
