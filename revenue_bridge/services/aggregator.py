"""
Period Aggregator - fold several single-period models into one cumulative view.

Aggregation rules:
- planRevenue and actualRevenue are summed; variance and variancePct are
  recomputed from the sums (never summed independently)
- planDelay, actualDelay, planFX and actualFX are not additive; the first
  (anchor) period's values are carried as a documented simplification
- Driver values are summed per driver kind; client rows are concatenated with
  each client renamed "<name> (M<n>)" where n is the 1-based position of its
  period in the input, after dropping rows with a non-finite variance
- The Other/residual driver is recomputed as
  actual - plan - (volume + price + timing + churn + fx) from the aggregated
  sums, so the bridge closes exactly on the aggregate
- Insights are unioned by exact text in encounter order, then padded

Periods without drivers or bridge steps are dropped before aggregation.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence

from revenue_bridge.models import (
    ClientDetail,
    Driver,
    DriverKind,
    PeriodDataModel,
    ViewType,
)
from revenue_bridge.services.insights import merge_insights, pad_insights
from revenue_bridge.services.numeric import safe_divide
from revenue_bridge.services.period_generator import (
    DRIVER_NAMES,
    DRIVER_ORDER,
    SAMPLED_DRIVERS,
    build_bridge_steps,
)

logger = logging.getLogger(__name__)

# Drivers plus Plan and Actual
EXPECTED_BRIDGE_STEPS: int = len(DRIVER_ORDER) + 2


# =============================================================================
# Errors
# =============================================================================


class EmptyAggregationInput(ValueError):
    """Raised when the aggregator is called with no periods at all."""


class StructuralValidationFailure(ValueError):
    """Raised when a model is missing its drivers or bridge steps."""


# =============================================================================
# Validation
# =============================================================================


def is_structurally_valid(model: Optional[PeriodDataModel]) -> bool:
    """True if the model has non-empty drivers and bridge steps."""
    return bool(model is not None and model.drivers and model.bridgeSteps)


def validate_period_model(model: Optional[PeriodDataModel]) -> PeriodDataModel:
    """
    Check that a model can be rendered as a bridge.

    Requires all six drivers (one per kind) and the eight bridge steps.

    Raises:
        StructuralValidationFailure: On any structural defect
    """
    if model is None:
        raise StructuralValidationFailure("Model is missing")
    if not model.drivers:
        raise StructuralValidationFailure("Model has no drivers")
    if not model.bridgeSteps:
        raise StructuralValidationFailure("Model has no bridge steps")
    kinds = {driver.kind for driver in model.drivers}
    missing = [kind.value for kind in DRIVER_ORDER if kind not in kinds]
    if missing:
        raise StructuralValidationFailure(f"Model is missing drivers: {', '.join(missing)}")
    if len(model.bridgeSteps) != EXPECTED_BRIDGE_STEPS:
        raise StructuralValidationFailure(
            f"Expected {EXPECTED_BRIDGE_STEPS} bridge steps, got {len(model.bridgeSteps)}"
        )
    return model


# =============================================================================
# Client Detail Merging
# =============================================================================


def is_valid_detail(detail: ClientDetail) -> bool:
    return bool(detail.clientName) and math.isfinite(detail.variance)


def tag_period_details(details: Sequence[ClientDetail], period_index: int) -> List[ClientDetail]:
    """
    Keep valid rows and suffix client names with their period position.

    Example:
        "Acme Corp" from the second period becomes "Acme Corp (M2)".
    """
    suffix = f" (M{period_index + 1})"
    return [
        detail.model_copy(update={"clientName": f"{detail.clientName}{suffix}"})
        for detail in details
        if is_valid_detail(detail)
    ]


# =============================================================================
# Aggregation
# =============================================================================


def aggregate_periods(
    periods: Sequence[PeriodDataModel],
    view: Optional[ViewType] = None,
) -> PeriodDataModel:
    """
    Combine consecutive single-period models into one cumulative model.

    Args:
        periods: Models in period order (anchor first)
        view: View recorded on the aggregate; defaults to the first model's

    Returns:
        The single input unchanged if exactly one period is given, otherwise
        a new cumulative model

    Raises:
        EmptyAggregationInput: If periods is empty
        StructuralValidationFailure: If no period has drivers and bridge steps
    """
    if not periods:
        raise EmptyAggregationInput("Cannot aggregate an empty sequence of periods")
    if len(periods) == 1:
        return periods[0]

    valid = [p for p in periods if is_structurally_valid(p)]
    if len(valid) < len(periods):
        logger.warning(f"Dropped {len(periods) - len(valid)} invalid periods before aggregation")
    if not valid:
        raise StructuralValidationFailure("No valid periods to aggregate")

    anchor = valid[0]
    plan_revenue = sum(p.planRevenue for p in valid)
    actual_revenue = sum(p.actualRevenue for p in valid)
    variance = actual_revenue - plan_revenue

    values: Dict[DriverKind, float] = {kind: 0.0 for kind in DRIVER_ORDER}
    details: Dict[DriverKind, List[ClientDetail]] = {kind: [] for kind in DRIVER_ORDER}
    notes: Dict[DriverKind, str] = {}

    for period_index, period in enumerate(valid):
        for driver in period.drivers:
            values[driver.kind] += driver.value
            notes.setdefault(driver.kind, driver.note)
            details[driver.kind].extend(tag_period_details(driver.clientDetails, period_index))

    # The residual closes the aggregate bridge exactly
    values[DriverKind.OTHER] = variance - sum(values[kind] for kind in SAMPLED_DRIVERS)

    drivers = [
        Driver(
            kind=kind,
            name=DRIVER_NAMES[kind],
            value=values[kind],
            note=notes.get(kind, ""),
            clientDetails=details[kind],
        )
        for kind in DRIVER_ORDER
    ]

    logger.debug(f"Aggregated {len(valid)} periods for {anchor.periodKey} ({anchor.segment.value})")

    return PeriodDataModel(
        periodKey=anchor.periodKey,
        segment=anchor.segment,
        view=view if view is not None else anchor.view,
        periods=[key for p in valid for key in p.periods],
        planRevenue=plan_revenue,
        actualRevenue=actual_revenue,
        variance=variance,
        variancePct=safe_divide(variance, plan_revenue),
        planDelay=anchor.planDelay,
        actualDelay=anchor.actualDelay,
        planFX=anchor.planFX,
        actualFX=anchor.actualFX,
        drivers=drivers,
        bridgeSteps=build_bridge_steps(plan_revenue, actual_revenue, drivers, anchor.planFX),
        insights=pad_insights(merge_insights(p.insights for p in valid)),
    )
