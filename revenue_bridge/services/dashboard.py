"""
Dashboard view models derived from a PeriodDataModel.

Everything here is a pure derivation for display: KPI cards, waterfall bar
positions, the ranked driver table with its residual sanity check, driver
drill-downs, the two-column insights panel and the month selector. No new
business numbers are introduced; the model stays the single source of truth.
"""

from datetime import date
from typing import List, Optional, Sequence

import numpy as np
import pandas as pd

from revenue_bridge.models import (
    BridgeStep,
    CardTone,
    DashboardResponse,
    Driver,
    DriverBreakdown,
    DriverContributionRow,
    DriverContributionTable,
    DriverKind,
    Insight,
    InsightPolarity,
    InsightsPanel,
    KpiCard,
    MonthOption,
    PeriodDataModel,
    StepKind,
    ViewType,
    WaterfallBar,
    WaterfallChart,
)
from revenue_bridge.services.aggregator import is_valid_detail
from revenue_bridge.services.formatting import format_money, format_pct, format_rate
from revenue_bridge.services.numeric import safe_divide
from revenue_bridge.services.periods import format_period_key, period_label, trailing_period_keys

# =============================================================================
# CONSTANTS
# =============================================================================

# Waterfall axis padding as a share of the data span
AXIS_PADDING_BELOW: float = 0.10
AXIS_PADDING_ABOVE: float = 0.15

PERIOD_LABELS = {
    ViewType.MONTHLY: "this month",
    ViewType.QUARTERLY_CUMULATIVE: "this quarter",
    ViewType.ANNUAL_CUMULATIVE: "this year",
}

DRILL_DOWN_EXPLANATIONS = {
    DriverKind.VOLUME: (
        "This breakdown shows transaction volume differences per client. "
        "Higher volume increases revenue, lower volume decreases it."
    ),
    DriverKind.PRICE: (
        "This breakdown shows price point differences per client. "
        "Price increases boost revenue, decreases reduce it."
    ),
    DriverKind.TIMING: (
        "This breakdown shows implementation timing differences. "
        "Delays push revenue recognition later, accelerations bring it forward."
    ),
    DriverKind.CHURN: "This breakdown shows which clients churned or downgraded, causing revenue loss.",
    DriverKind.FX: (
        "This breakdown shows FX rate impact per client. FX rate changes affect "
        "revenue when converting from local to reporting currency."
    ),
}

SORT_NOTE = " Values are sorted by absolute contribution."


# =============================================================================
# KPI Cards
# =============================================================================


def build_kpi_cards(model: PeriodDataModel) -> List[KpiCard]:
    """Plan, actual, variance and variance % cards."""
    over = model.variance >= 0
    direction_tone = CardTone.GOOD if over else CardTone.BAD
    return [
        KpiCard(
            label="Planned recognized revenue",
            value=format_money(model.planRevenue),
            detail=f"Delay {format_pct(model.planDelay)} · FX {format_rate(model.planFX)}",
        ),
        KpiCard(
            label="Actual recognized revenue",
            value=format_money(model.actualRevenue),
            detail=f"Delay {format_pct(model.actualDelay)} · FX {format_rate(model.actualFX)}",
        ),
        KpiCard(
            label="Variance (Actual − Plan)",
            value=format_money(model.variance),
            detail=f"{'Over' if over else 'Under'} plan by {format_money(abs(model.variance))}",
            tone=direction_tone,
        ),
        KpiCard(
            label="Variance %",
            value=format_pct(model.variancePct),
            detail=f"vs plan {format_pct(model.variancePct)}",
            tone=CardTone.GOOD if model.variancePct >= 0 else CardTone.BAD,
        ),
    ]


# =============================================================================
# Waterfall
# =============================================================================


def build_waterfall(steps: Sequence[BridgeStep]) -> WaterfallChart:
    """
    Position bridge steps on the running total.

    Totals are anchored at zero; the first total also seeds the running
    total. Each delta starts where the previous bar ended.
    """
    bars: List[WaterfallBar] = []
    running = 0.0
    for index, step in enumerate(steps):
        if step.kind == StepKind.TOTAL:
            start, end = 0.0, step.value
            if index == 0:
                running = step.value
        else:
            start, end = running, running + step.value
            running = end
        bars.append(
            WaterfallBar(
                label=step.label,
                value=step.value,
                kind=step.kind,
                start=start,
                end=end,
                isTotal=step.kind == StepKind.TOTAL,
                formattedValue=format_money(step.value),
                driverKind=step.driverKind,
                hasDetails=bool(step.clientDetails),
            )
        )

    if not bars:
        return WaterfallChart(bars=[], yMin=0.0, yMax=1.0)

    extents = np.array([[bar.start, bar.end, bar.value] for bar in bars], dtype=np.float64)
    low, high = float(extents.min()), float(extents.max())
    span = (high - low) or 1.0
    return WaterfallChart(
        bars=bars,
        yMin=max(0.0, low - span * AXIS_PADDING_BELOW),
        yMax=high + span * AXIS_PADDING_ABOVE,
    )


# =============================================================================
# Ranked Driver Table
# =============================================================================


def rank_drivers(drivers: Sequence[Driver], variance: float) -> DriverContributionTable:
    """
    Rank drivers by absolute contribution.

    share = |value| / sum(|value|), using 1 as the denominator when every
    driver is zero. The residual share compares |other| with |variance|.
    """
    frame = pd.DataFrame(
        {
            "kind": [d.kind for d in drivers],
            "name": [d.name for d in drivers],
            "value": [d.value for d in drivers],
            "note": [d.note for d in drivers],
            "hasDetails": [bool(d.clientDetails) for d in drivers],
        }
    )

    rows: List[DriverContributionRow] = []
    if not frame.empty:
        frame["absValue"] = frame["value"].abs()
        total_abs = float(frame["absValue"].sum()) or 1.0
        frame["share"] = frame["absValue"] / total_abs
        # Stable sort keeps bridge order between equal contributions
        frame = frame.sort_values("absValue", ascending=False, kind="mergesort").reset_index(drop=True)

        for position, row in enumerate(frame.itertuples(index=False), start=1):
            rows.append(
                DriverContributionRow(
                    rank=position,
                    kind=row.kind,
                    name=row.name,
                    value=float(row.value),
                    formattedValue=format_money(float(row.value)),
                    share=float(row.share),
                    formattedShare=format_pct(float(row.share)),
                    note=row.note,
                    hasDetails=bool(row.hasDetails),
                )
            )

    residual = next((d.value for d in drivers if d.kind == DriverKind.OTHER), 0.0)
    residual_share = safe_divide(abs(residual), abs(variance))
    return DriverContributionTable(
        rows=rows,
        residualValue=residual,
        residualShare=residual_share,
        residualSummary=(
            f'"Other / residual" is {format_money(residual)} '
            f"({format_pct(residual_share)} of total variance). "
            f"Ideally this stays small over time."
        ),
    )


# =============================================================================
# Drill-down
# =============================================================================


def build_driver_breakdown(model: PeriodDataModel, kind: DriverKind) -> Optional[DriverBreakdown]:
    """
    Drill-down for one driver.

    Invalid rows (no name or non-finite variance) are dropped; the remaining
    rows are sorted by |variance| descending.

    Returns:
        DriverBreakdown, or None if the driver is absent or has no valid rows
    """
    driver = model.driver(kind)
    if driver is None:
        return None

    valid = [d for d in driver.clientDetails if is_valid_detail(d)]
    if not valid:
        return None

    variances = np.array([d.variance for d in valid], dtype=np.float64)
    order = (
        pd.Series(np.abs(variances))
        .sort_values(ascending=False, kind="mergesort")
        .index
    )

    explanation = DRILL_DOWN_EXPLANATIONS.get(
        kind,
        f"This breakdown shows how {driver.name.lower()} variance is distributed across clients.",
    )
    return DriverBreakdown(
        driverKind=kind,
        driverName=driver.name,
        driverValue=driver.value,
        explanation=explanation + SORT_NOTE,
        totalVariance=float(variances.sum()),
        clientDetails=[valid[i] for i in order],
        planFX=model.planFX if kind == DriverKind.FX else None,
    )


# =============================================================================
# Insights Panel
# =============================================================================


def group_insights(insights: Sequence[Insight], view: ViewType) -> InsightsPanel:
    """Split insights into positive and negative columns."""
    return InsightsPanel(
        periodLabel=PERIOD_LABELS[view],
        positive=[i for i in insights if i.polarity == InsightPolarity.POSITIVE],
        negative=[i for i in insights if i.polarity == InsightPolarity.NEGATIVE],
    )


# =============================================================================
# Month Selector
# =============================================================================


def month_options(reference: date, count: int = 6) -> List[MonthOption]:
    """
    The reference month and the count-1 months before it, newest first.

    Example:
        >>> [m.value for m in month_options(date(2025, 2, 10), 3)]
        ['2025-02', '2025-01', '2024-12']
    """
    anchor = format_period_key(reference.year, reference.month)
    return [
        MonthOption(value=key, label=period_label(key))
        for key in trailing_period_keys(anchor, max(count, 0))
    ]


# =============================================================================
# Dashboard Bundle
# =============================================================================


def build_dashboard(model: PeriodDataModel) -> DashboardResponse:
    """Bundle the model with every derived view model the page renders."""
    return DashboardResponse(
        data=model,
        kpiCards=build_kpi_cards(model),
        waterfall=build_waterfall(model.bridgeSteps),
        driverTable=rank_drivers(model.drivers, model.variance),
        insightsPanel=group_insights(model.insights, model.view),
    )
