"""
Settings and environment management module for the Revenue Bridge backend.

This module provides centralized configuration management using pydantic-settings,
which automatically loads settings from environment variables and .env files.

Key Features:
- Environment variable validation and type coercion
- Sensible defaults for development
- Singleton pattern via @lru_cache for efficient access

Environment Variables:
- DEFAULT_SEED: Base seed mixed into every generated period (default: FP&A-bridge)
- DEFAULT_SEGMENT: Segment used when a request omits one (default: existing-clients)
- DEFAULT_VIEW: View used when a request omits one (default: monthly)
- MONTH_SELECTOR_COUNT: Months offered by the month selector (default: 6)
- CORS_ALLOW_ORIGINS: JSON list of front-end origins allowed by CORS
- LOG_LEVEL: Root logging level (default: INFO)

Usage:
    from revenue_bridge.core.config import get_settings

    settings = get_settings()
    seed = settings.default_seed
"""

from functools import lru_cache
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict

from revenue_bridge.models.enums import Segment, ViewType


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The class inherits from pydantic-settings BaseSettings which provides:
    - Automatic loading from environment variables (case-insensitive)
    - Support for .env file loading
    - Type validation and coercion
    - Default values for optional settings

    Attributes:
        api_title: Title shown in the OpenAPI docs.
        api_version: Version string reported by the API.
        default_seed: Base seed for deterministic generation.
        default_segment: Segment used when none is supplied.
        default_view: Aggregation view used when none is supplied.
        month_selector_count: Number of months listed by the month selector.
        cors_allow_origins: Origins allowed to call the API from a browser.
        log_level: Logging level applied in main.py.
    """

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',  # Ignore extra environment variables not defined in this class
        case_sensitive=False,  # Allow DEFAULT_SEED or default_seed
    )

    # =========================================================================
    # API
    # =========================================================================

    api_title: str = 'Revenue Bridge API'
    api_version: str = '1.0.0'

    # =========================================================================
    # Generator Defaults
    # =========================================================================

    # Same seed + period + segment + view always yields the same bridge.
    # Changing this reshuffles every dashboard at once.
    default_seed: str = 'FP&A-bridge'

    default_segment: Segment = Segment.EXISTING_CLIENTS
    default_view: ViewType = ViewType.MONTHLY

    # The navigation lists the current month and the N-1 months before it
    month_selector_count: int = 6

    # =========================================================================
    # Web
    # =========================================================================

    cors_allow_origins: List[str] = [
        'http://localhost:5173',  # Vite dev server
        'http://127.0.0.1:5173',
        'http://localhost:3000',
    ]

    log_level: str = 'INFO'


@lru_cache()
def get_settings() -> Settings:
    """
    Get the application settings singleton.

    Returns a cached Settings instance so environment variables are only read
    once during the application lifecycle.

    Returns:
        Settings: The application settings instance with all configuration values.

    Raises:
        pydantic.ValidationError: If an environment variable has an invalid
            value (e.g., DEFAULT_VIEW=weekly).

    Note:
        To refresh settings in tests, clear the cache:
        >>> get_settings.cache_clear()
    """
    return Settings()
