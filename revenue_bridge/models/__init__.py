"""
Package initialization file for revenue_bridge models.

Re-exports all Pydantic schemas and enumerations so other modules can import
them from revenue_bridge.models directly:

    from revenue_bridge.models import PeriodDataModel, DriverKind, Segment
"""

# =============================================================================
# Enums
# =============================================================================

from revenue_bridge.models.enums import (
    Segment,
    ViewType,
    DriverKind,
    StepKind,
    InsightPolarity,
    CardTone,
)

# =============================================================================
# Schemas
# =============================================================================

from revenue_bridge.models.schemas import (
    # -------------------------------------------------------------------------
    # Core data model
    # -------------------------------------------------------------------------
    ClientDetail,
    Driver,
    BridgeStep,
    Insight,
    PeriodDataModel,

    # -------------------------------------------------------------------------
    # Dashboard view models
    # -------------------------------------------------------------------------
    KpiCard,
    WaterfallBar,
    WaterfallChart,
    DriverContributionRow,
    DriverContributionTable,
    DriverBreakdown,
    InsightsPanel,
    MonthOption,
    DashboardResponse,
)


__all__ = [
    # Enums
    "Segment",
    "ViewType",
    "DriverKind",
    "StepKind",
    "InsightPolarity",
    "CardTone",
    # Core data model
    "ClientDetail",
    "Driver",
    "BridgeStep",
    "Insight",
    "PeriodDataModel",
    # Dashboard view models
    "KpiCard",
    "WaterfallBar",
    "WaterfallChart",
    "DriverContributionRow",
    "DriverContributionTable",
    "DriverBreakdown",
    "InsightsPanel",
    "MonthOption",
    "DashboardResponse",
]
