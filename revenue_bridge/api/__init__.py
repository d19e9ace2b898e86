"""
Revenue Bridge API package initialization.

This package contains FastAPI router modules for the Revenue Bridge backend:
- revenue: Bridge data model, dashboard bundle, driver drill-downs and
  month selector options
"""

from fastapi import APIRouter

from revenue_bridge.api.revenue import router as revenue_router

# Create main API router
api_router = APIRouter()

# The revenue router carries its own /revenue-data prefix
api_router.include_router(revenue_router)

__all__ = [
    "api_router",
    "revenue_router",
]
