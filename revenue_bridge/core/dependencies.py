"""
FastAPI dependency injection module for the Revenue Bridge backend.

Provides reusable dependencies so route handlers receive configuration
through injection rather than reaching for globals, which keeps handlers easy
to call directly from tests with an explicit Settings instance.

Key Dependencies Provided:
- get_settings_dependency: Returns the cached Settings singleton
- SettingsDep: Type alias for injecting Settings into endpoints

Usage Examples:
    @router.get("/revenue-data")
    async def get_revenue_data(settings: SettingsDep) -> PeriodDataModel:
        seed = settings.default_seed
        ...
"""

from typing import Annotated

from fastapi import Depends

from revenue_bridge.core.config import Settings, get_settings


# =============================================================================
# Settings Dependency
# =============================================================================

def get_settings_dependency() -> Settings:
    """
    Return the application settings for dependency injection.

    Wraps get_settings() so FastAPI's dependency_overrides can swap in a test
    configuration without touching the lru_cache.

    Returns:
        Settings: The cached application settings instance.
    """
    return get_settings()


# =============================================================================
# Type Aliases for Dependency Injection
# =============================================================================

SettingsDep = Annotated[Settings, Depends(get_settings_dependency)]
