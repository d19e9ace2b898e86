"""
Pydantic models for the Revenue Bridge data model and API responses.

The data model (ClientDetail, Driver, BridgeStep, Insight, PeriodDataModel) is
produced by the generator services and is read-only from then on: every one of
these models is frozen. Field names are camelCase because this is the wire
format consumed by the dashboard front end.

The view models further down (KpiCard, WaterfallChart, DriverContributionTable,
DriverBreakdown, InsightsPanel, MonthOption, DashboardResponse) are derived from
a PeriodDataModel by revenue_bridge/services/dashboard.py and carry no business
numbers of their own.

All models use Pydantic v2 syntax.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from revenue_bridge.models.enums import (
    CardTone,
    DriverKind,
    InsightPolarity,
    Segment,
    StepKind,
    ViewType,
)


# =============================================================================
# Core Data Model
# =============================================================================


class ClientDetail(BaseModel):
    """
    One row attributing part of a driver's value to a named client.

    `variance` is always the revenue impact of the row, whatever the driver
    kind, so the rows of a driver sum to the driver's value. The optional
    fields are populated according to the driver kind:

    - volume: planVolume, actualVolume (transaction counts)
    - price: planPrice, actualPrice, priceChange (unit price)
    - timing: planDate, actualDate, daysDelay
    - churn: churnReason
    - fx: planFxRate, fxRate, fxChange
    - other: common fields only
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "clientName": "Acme Corp",
                "planValue": 25000,
                "actualValue": 26840,
                "variance": 12450.75,
                "variancePct": 0.0736,
                "planVolume": 25000,
                "actualVolume": 26840,
            }
        },
    )

    clientName: str = Field(..., min_length=1, description="Client display name")
    planValue: float = Field(..., description="Plan-side figure (units depend on driver kind)")
    actualValue: float = Field(..., description="Actual-side figure (units depend on driver kind)")
    variance: float = Field(..., description="Revenue impact attributed to this client")
    variancePct: float = Field(default=0.0, description="Relative change of the plan-side figure")

    # Volume
    planVolume: Optional[int] = Field(default=None, description="Planned transaction count")
    actualVolume: Optional[int] = Field(default=None, description="Actual transaction count")

    # Price
    planPrice: Optional[float] = Field(default=None, description="Planned unit price")
    actualPrice: Optional[float] = Field(default=None, description="Actual unit price")
    priceChange: Optional[float] = Field(default=None, description="actualPrice - planPrice")

    # Timing
    planDate: Optional[str] = Field(default=None, description="Planned go-live date, e.g. 'Jun 15'")
    actualDate: Optional[str] = Field(default=None, description="Actual go-live date")
    daysDelay: Optional[int] = Field(
        default=None,
        description="Go-live slip in days (negative means accelerated)",
    )

    # Churn
    churnReason: Optional[str] = Field(default=None, description="Why the revenue was lost")

    # FX
    planFxRate: Optional[float] = Field(default=None, description="Plan FX rate")
    fxRate: Optional[float] = Field(default=None, description="Effective actual FX rate")
    fxChange: Optional[float] = Field(default=None, description="fxRate - planFxRate")


class Driver(BaseModel):
    """A named component of the plan-to-actual variance."""
    model_config = ConfigDict(frozen=True)

    kind: DriverKind = Field(..., description="Driver tag used to pick detail shapes")
    name: str = Field(..., description="Display name, e.g. 'Volume (transactions)'")
    value: float = Field(..., description="Signed revenue contribution")
    note: str = Field(default="", description="One-line explanation of the driver")
    clientDetails: List[ClientDetail] = Field(default_factory=list)


class BridgeStep(BaseModel):
    """
    One bar of the variance waterfall.

    Plan and Actual are totals; the six drivers are deltas in fixed order.
    Delta steps carry the same clientDetails as their driver. The Plan and
    FX steps carry planFX for FX drill-down display.
    """
    model_config = ConfigDict(frozen=True)

    label: str
    value: float
    kind: StepKind
    driverKind: Optional[DriverKind] = Field(default=None, description="Set on delta steps only")
    clientDetails: List[ClientDetail] = Field(default_factory=list)
    planFX: Optional[float] = None


class Insight(BaseModel):
    """A narrative observation shown in the insights panel."""
    model_config = ConfigDict(frozen=True)

    polarity: InsightPolarity
    text: str = Field(..., min_length=1)


class PeriodDataModel(BaseModel):
    """
    Complete bridge data model for one period or one cumulative view.

    Invariant: planRevenue + sum(driver values) == actualRevenue, where the
    Other/residual driver is solved for rather than sampled.
    """
    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "periodKey": "2025-06",
                "segment": "existing-clients",
                "view": "monthly",
                "periods": ["2025-06"],
                "planRevenue": 1523000.0,
                "actualRevenue": 1687000.0,
                "variance": 164000.0,
                "variancePct": 0.1077,
                "planDelay": 0.081,
                "actualDelay": 0.064,
                "planFX": 1.0123,
                "actualFX": 0.9872,
            }
        },
    )

    periodKey: str = Field(..., description="Anchor period (YYYY-MM) selected by the caller")
    segment: Segment
    view: ViewType = ViewType.MONTHLY
    periods: List[str] = Field(
        default_factory=list,
        description="Effective period keys folded into this model, anchor first",
    )

    planRevenue: float
    actualRevenue: float
    variance: float
    variancePct: float

    planDelay: float = Field(..., description="Planned timing-slip rate")
    actualDelay: float = Field(..., description="Actual timing-slip rate")
    planFX: float
    actualFX: float

    drivers: List[Driver]
    bridgeSteps: List[BridgeStep]
    insights: List[Insight]

    def driver(self, kind: DriverKind) -> Optional[Driver]:
        """Return the driver with the given tag, if present."""
        for driver in self.drivers:
            if driver.kind == kind:
                return driver
        return None


# =============================================================================
# Dashboard View Models
# =============================================================================


class KpiCard(BaseModel):
    """A headline KPI card (plan, actual, variance, variance %)."""
    label: str
    value: str = Field(..., description="Formatted headline figure")
    detail: str = Field(..., description="Formatted subline")
    tone: CardTone = CardTone.NEUTRAL


class WaterfallBar(BaseModel):
    """A bridge step positioned on the running total."""
    label: str
    value: float
    kind: StepKind
    start: float
    end: float
    isTotal: bool
    formattedValue: str
    driverKind: Optional[DriverKind] = None
    hasDetails: bool = False


class WaterfallChart(BaseModel):
    """Waterfall bars plus padded axis bounds."""
    bars: List[WaterfallBar]
    yMin: float
    yMax: float


class DriverContributionRow(BaseModel):
    """One row of the ranked driver table."""
    rank: int = Field(..., ge=1)
    kind: DriverKind
    name: str
    value: float
    formattedValue: str
    share: float = Field(..., ge=0.0, description="|value| / sum of |values|")
    formattedShare: str
    note: str
    hasDetails: bool


class DriverContributionTable(BaseModel):
    """Drivers ranked by absolute contribution with the residual sanity check."""
    rows: List[DriverContributionRow]
    residualValue: float
    residualShare: float = Field(..., ge=0.0, description="|other| / |variance|")
    residualSummary: str


class DriverBreakdown(BaseModel):
    """Drill-down content for a single driver."""
    driverKind: DriverKind
    driverName: str
    driverValue: float
    explanation: str
    totalVariance: float = Field(..., description="Sum of the valid client rows")
    clientDetails: List[ClientDetail]
    planFX: Optional[float] = None


class InsightsPanel(BaseModel):
    """Insights split by polarity for the two-column panel."""
    periodLabel: str
    positive: List[Insight]
    negative: List[Insight]


class MonthOption(BaseModel):
    """An entry of the month selector."""
    value: str = Field(..., pattern=r"^\d{4}-\d{2}$")
    label: str


class DashboardResponse(BaseModel):
    """Everything the dashboard page renders for one (period, segment, view)."""
    data: PeriodDataModel
    kpiCards: List[KpiCard]
    waterfall: WaterfallChart
    driverTable: DriverContributionTable
    insightsPanel: InsightsPanel
