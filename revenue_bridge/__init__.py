"""
Revenue Bridge Package.

Deterministic plan-vs-actual revenue variance bridge: a seeded synthetic data
model that decomposes the gap between planned and actual recognized revenue
into volume, price, timing, churn, FX and residual drivers, served over
FastAPI.

Subpackages:
    - api: FastAPI route handlers
    - core: Configuration and dependencies
    - models: Pydantic schemas and enums
    - services: Generation, aggregation, insights and view-model services
"""

__version__ = "1.0.0"
