"""
Core infrastructure package for the Revenue Bridge backend.

Provides:
- Configuration management via pydantic-settings
- FastAPI dependency injection utilities

Re-exports key components so other modules can write:

    from revenue_bridge.core import get_settings, SettingsDep

instead of importing from the submodules.
"""

# =============================================================================
# Re-exports from revenue_bridge.core.config
# =============================================================================
from revenue_bridge.core.config import Settings, get_settings

# =============================================================================
# Re-exports from revenue_bridge.core.dependencies
# =============================================================================
from revenue_bridge.core.dependencies import (
    get_settings_dependency,
    SettingsDep,
)

__all__ = [
    # Configuration management (from config.py)
    'Settings',
    'get_settings',
    # FastAPI dependency injection (from dependencies.py)
    'get_settings_dependency',
    'SettingsDep',
]
