"""
Single-Period Generator - deterministic synthetic plan-vs-actual data.

Produces one period's complete bridge data model from
(period key, segment, base seed, period offset).

Algorithm Overview:
1. Effective period = selected period shifted by the offset (in months)
2. Generator seeded with FNV-1a("seed|effective period|segment|offset")
3. Plan revenue and variance % drawn from segment-specific bands
4. Planned/actual delay and FX drawn around fixed bands
5. Five driver values drawn as segment-specific fractions of the variance
6. Other/residual solved as variance minus the five sampled drivers, so
   plan + sum(drivers) == actual holds by construction
7. Each driver's value distributed over 6-8 named clients; the last client
   takes the exact remainder so the rows sum to the driver value
8. Bridge steps assembled in fixed order, insights synthesized

Draw order is part of the reproducibility contract: the same inputs always
consume the stream in the same sequence.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, Dict, List, Sequence, Tuple, Union

from revenue_bridge.models import (
    BridgeStep,
    ClientDetail,
    Driver,
    DriverKind,
    PeriodDataModel,
    Segment,
    StepKind,
    ViewType,
)
from revenue_bridge.services.insights import synthesize_insights
from revenue_bridge.services.numeric import clamp, finite_or, round_half_up, safe_divide
from revenue_bridge.services.periods import period_start, shift_period_key
from revenue_bridge.services.prng import Mulberry32, hash_to_seed

logger = logging.getLogger(__name__)

# =============================================================================
# CONSTANTS - Driver catalogue
# =============================================================================

# Bridge order of the delta steps (and of PeriodDataModel.drivers)
DRIVER_ORDER: Tuple[DriverKind, ...] = (
    DriverKind.VOLUME,
    DriverKind.PRICE,
    DriverKind.TIMING,
    DriverKind.CHURN,
    DriverKind.FX,
    DriverKind.OTHER,
)

# Drivers drawn from the stream; OTHER is solved for
SAMPLED_DRIVERS: Tuple[DriverKind, ...] = DRIVER_ORDER[:-1]

DRIVER_NAMES: Dict[DriverKind, str] = {
    DriverKind.VOLUME: "Volume (transactions)",
    DriverKind.PRICE: "Price point (avg price)",
    DriverKind.TIMING: "Timing (implementation / go-live)",
    DriverKind.CHURN: "Unknown churn",
    DriverKind.FX: "FX (translation)",
    DriverKind.OTHER: "Other / residual",
}

STEP_LABELS: Dict[DriverKind, str] = {
    DriverKind.VOLUME: "Volume",
    DriverKind.PRICE: "Price",
    DriverKind.TIMING: "Timing",
    DriverKind.CHURN: "Unknown churn",
    DriverKind.FX: "FX",
    DriverKind.OTHER: "Other",
}

PLAN_LABEL: str = "Plan"
ACTUAL_LABEL: str = "Actual"

CHURN_REASONS: Tuple[str, ...] = (
    "Contract cancellation",
    "Downgrade to lower tier",
    "Payment failure",
    "Competitor switch",
    "Service dissatisfaction",
    "Budget constraints",
)

# =============================================================================
# CONSTANTS - Sampling bands
# =============================================================================

PLAN_DELAY_RANGE: Tuple[float, float] = (0.06, 0.10)
DELAY_SHOCK_HALF_WIDTH: float = 0.06
DELAY_BOUNDS: Tuple[float, float] = (0.01, 0.20)

PLAN_FX_RANGE: Tuple[float, float] = (0.97, 1.05)
FX_SHOCK_RANGE: Tuple[float, float] = (0.94, 1.06)

MIN_CLIENTS_PER_DRIVER: int = 6
MAX_CLIENTS_PER_DRIVER: int = 8

# Share of the driver value given to each non-final client row
CLIENT_SHARE_RANGE: Tuple[float, float] = (0.10, 0.35)

PLAN_VOLUME_RANGE: Tuple[float, float] = (10_000, 60_000)
PLAN_PRICE_RANGE: Tuple[float, float] = (0.15, 0.40)

# Plan-side spread for churn and residual rows around the per-client base
CLIENT_PLAN_SPREAD: Tuple[float, float] = (0.8, 1.2)

# A timing row worth one full client base revenue maps to a 30-day shift
TIMING_DAYS_PER_BASE: int = 30

# Plan go-live for client idx is on day 15 + 5 * idx of the effective month
TIMING_FIRST_DAY_OFFSET: int = 14
TIMING_DAY_SPACING: int = 5


@dataclass(frozen=True)
class SegmentProfile:
    """Sampling bands and presentation text for one client segment."""
    plan_range: Tuple[float, float]
    variance_half_width: float
    driver_fractions: Dict[DriverKind, Tuple[float, float]]
    client_names: Tuple[str, ...]
    driver_notes: Dict[DriverKind, str]


_COMMON_NOTES: Dict[DriverKind, str] = {
    DriverKind.TIMING: "Recognized % vs plan (slippage or acceleration)",
    DriverKind.FX: "Plan FX vs actual FX on actual recognized local",
    DriverKind.OTHER: "Rounding + unmodeled effects (should be small)",
}

SEGMENT_PROFILES: Dict[Segment, SegmentProfile] = {
    Segment.EXISTING_CLIENTS: SegmentProfile(
        plan_range=(1_200_000, 1_800_000),
        variance_half_width=0.30,
        driver_fractions={
            DriverKind.VOLUME: (0.25, 0.45),
            DriverKind.PRICE: (0.20, 0.38),
            DriverKind.TIMING: (0.15, 0.30),
            DriverKind.CHURN: (-0.30, -0.10),
            DriverKind.FX: (0.10, 0.20),
        },
        client_names=(
            "Acme Corp",
            "TechSolutions Inc",
            "Global Systems Ltd",
            "Enterprise Partners",
            "Digital Ventures",
            "Innovation Labs",
            "Market Leaders Co",
            "Strategic Alliance",
        ),
        driver_notes={
            DriverKind.VOLUME: "Δ transaction count vs plan @ plan price (existing customer activity)",
            DriverKind.PRICE: "Δ price vs plan on actual volume (pricing changes for existing)",
            DriverKind.CHURN: "Revenue lost from customer cancellations and downgrades",
            **_COMMON_NOTES,
        },
    ),
    Segment.NEW_CLIENTS: SegmentProfile(
        plan_range=(400_000, 700_000),
        variance_half_width=0.25,
        driver_fractions={
            DriverKind.VOLUME: (0.35, 0.55),
            DriverKind.PRICE: (0.22, 0.40),
            DriverKind.TIMING: (0.15, 0.30),
            DriverKind.CHURN: (-0.05, 0.0),
            DriverKind.FX: (0.08, 0.16),
        },
        client_names=(
            "Startup Alpha",
            "NewCo Beta",
            "LaunchPad Gamma",
            "Emerging Delta",
            "Fresh Epsilon",
            "Rising Zeta",
            "Upstart Eta",
            "Novel Theta",
        ),
        driver_notes={
            DriverKind.VOLUME: "Δ transaction count vs plan @ plan price (new customer onboarding)",
            DriverKind.PRICE: "Δ price vs plan on actual volume (pricing for new customers)",
            DriverKind.CHURN: "Minimal churn impact (new customer cohort)",
            **_COMMON_NOTES,
        },
    ),
}


# =============================================================================
# Seeding
# =============================================================================


def derive_seed_string(seed: str, effective_period_key: str, segment: Segment, period_offset: int) -> str:
    """
    Build the string hashed into a period's generator seed.

    Example:
        >>> derive_seed_string("FP&A-bridge", "2025-05", Segment.NEW_CLIENTS, -1)
        'FP&A-bridge|2025-05|new-clients|-1'
    """
    return f"{seed}|{effective_period_key}|{segment.value}|{period_offset}"


# =============================================================================
# Client Detail Distribution
# =============================================================================


def distribute_value(total: float, count: int, rng: Mulberry32) -> List[float]:
    """
    Split total over count rows.

    Each non-final row receives a CLIENT_SHARE_RANGE fraction of the total;
    the final row receives the exact remainder, so the rows sum to total.

    Args:
        total: Driver value to distribute
        count: Number of rows (>= 1)
        rng: Period generator

    Returns:
        count values summing to total
    """
    if count <= 0:
        return []
    values: List[float] = []
    remaining = total
    for _ in range(count - 1):
        row_value = finite_or(total * rng.uniform(*CLIENT_SHARE_RANGE), 0.0)
        values.append(row_value)
        remaining -= row_value
    values.append(finite_or(remaining, 0.0))
    return values


@dataclass
class _DetailContext:
    """Per-driver inputs shared by the row builders."""
    rng: Mulberry32
    base_revenue: float
    plan_fx: float
    first_day: date


def _format_day(day: date) -> str:
    return f"{day:%b} {day.day}"


def _volume_row(ctx: _DetailContext, idx: int, name: str, value: float) -> ClientDetail:
    # Back-solve transactions from revenue per planned transaction
    plan_volume = round_half_up(ctx.rng.uniform(*PLAN_VOLUME_RANGE))
    revenue_per_unit = safe_divide(ctx.base_revenue, plan_volume)
    volume_change = safe_divide(value, revenue_per_unit)
    actual_volume = round_half_up(plan_volume + volume_change)
    return ClientDetail(
        clientName=name,
        planValue=plan_volume,
        actualValue=actual_volume,
        variance=value,
        variancePct=safe_divide(actual_volume - plan_volume, plan_volume),
        planVolume=plan_volume,
        actualVolume=actual_volume,
    )


def _price_row(ctx: _DetailContext, idx: int, name: str, value: float) -> ClientDetail:
    # Spread the revenue impact over the units the base revenue buys at plan price
    plan_price = ctx.rng.uniform(*PLAN_PRICE_RANGE)
    plan_units = safe_divide(ctx.base_revenue, plan_price)
    price_change = safe_divide(value, plan_units)
    actual_price = finite_or(plan_price + price_change, plan_price)
    return ClientDetail(
        clientName=name,
        planValue=plan_price,
        actualValue=actual_price,
        variance=value,
        variancePct=safe_divide(actual_price - plan_price, plan_price),
        planPrice=plan_price,
        actualPrice=actual_price,
        priceChange=actual_price - plan_price,
    )


def _timing_row(ctx: _DetailContext, idx: int, name: str, value: float) -> ClientDetail:
    # Revenue pulled forward is an early go-live, so the sign flips
    plan_day = ctx.first_day + timedelta(days=TIMING_FIRST_DAY_OFFSET + idx * TIMING_DAY_SPACING)
    days_delay = -round_half_up(safe_divide(value, ctx.base_revenue) * TIMING_DAYS_PER_BASE)
    actual_day = plan_day + timedelta(days=days_delay)
    return ClientDetail(
        clientName=name,
        planValue=ctx.base_revenue,
        actualValue=ctx.base_revenue + value,
        variance=value,
        variancePct=safe_divide(value, ctx.base_revenue),
        planDate=_format_day(plan_day),
        actualDate=_format_day(actual_day),
        daysDelay=days_delay,
    )


def _churn_row(ctx: _DetailContext, idx: int, name: str, value: float) -> ClientDetail:
    plan_value = ctx.base_revenue * ctx.rng.uniform(*CLIENT_PLAN_SPREAD)
    reason = ctx.rng.choice(CHURN_REASONS)
    return ClientDetail(
        clientName=name,
        planValue=plan_value,
        actualValue=plan_value + value,
        variance=value,
        variancePct=safe_divide(value, plan_value),
        churnReason=reason,
    )


def _fx_row(ctx: _DetailContext, idx: int, name: str, value: float) -> ClientDetail:
    fx_change = finite_or(safe_divide(value, ctx.base_revenue) * ctx.plan_fx, 0.0)
    fx_rate = finite_or(ctx.plan_fx + fx_change, ctx.plan_fx)
    return ClientDetail(
        clientName=name,
        planValue=ctx.base_revenue,
        actualValue=ctx.base_revenue + value,
        variance=value,
        variancePct=safe_divide(value, ctx.base_revenue),
        planFxRate=ctx.plan_fx,
        fxRate=fx_rate,
        fxChange=fx_rate - ctx.plan_fx,
    )


def _other_row(ctx: _DetailContext, idx: int, name: str, value: float) -> ClientDetail:
    plan_value = ctx.base_revenue * ctx.rng.uniform(*CLIENT_PLAN_SPREAD)
    return ClientDetail(
        clientName=name,
        planValue=plan_value,
        actualValue=plan_value + value,
        variance=value,
        variancePct=safe_divide(value, plan_value),
    )


_ROW_BUILDERS: Dict[DriverKind, Callable[[_DetailContext, int, str, float], ClientDetail]] = {
    DriverKind.VOLUME: _volume_row,
    DriverKind.PRICE: _price_row,
    DriverKind.TIMING: _timing_row,
    DriverKind.CHURN: _churn_row,
    DriverKind.FX: _fx_row,
    DriverKind.OTHER: _other_row,
}


def build_client_details(
    kind: DriverKind,
    driver_value: float,
    rng: Mulberry32,
    client_names: Sequence[str],
    plan_revenue: float,
    plan_fx: float,
    first_day: date,
) -> List[ClientDetail]:
    """
    Synthesize the per-client breakdown of one driver.

    Args:
        kind: Driver tag selecting the row shape
        driver_value: Aggregate value the rows must sum to
        rng: Period generator
        client_names: Segment name pool (sampled without replacement)
        plan_revenue: Period plan revenue; plan / n is the per-client base
        plan_fx: Period plan FX rate, used by FX rows
        first_day: First day of the effective period, used by timing rows

    Returns:
        6-8 rows whose variance values sum to driver_value, or an empty list
        if driver_value is not finite
    """
    if not math.isfinite(driver_value):
        return []

    count = rng.randint(MIN_CLIENTS_PER_DRIVER, MAX_CLIENTS_PER_DRIVER)
    names = rng.sample(client_names, count)
    if not names:
        return []

    row_values = distribute_value(driver_value, len(names), rng)
    ctx = _DetailContext(
        rng=rng,
        base_revenue=safe_divide(plan_revenue, len(names)),
        plan_fx=plan_fx,
        first_day=first_day,
    )
    builder = _ROW_BUILDERS[kind]
    return [builder(ctx, idx, name, value) for idx, (name, value) in enumerate(zip(names, row_values))]


# =============================================================================
# Bridge Assembly
# =============================================================================


def build_bridge_steps(
    plan_revenue: float,
    actual_revenue: float,
    drivers: Sequence[Driver],
    plan_fx: float,
) -> List[BridgeStep]:
    """
    Assemble the waterfall: Plan, six driver deltas in DRIVER_ORDER, Actual.

    Each delta step takes its value and client details from the driver with
    the same tag. Plan and FX steps carry plan_fx.

    Raises:
        KeyError: If a driver kind is missing from drivers
    """
    by_kind = {driver.kind: driver for driver in drivers}
    steps = [
        BridgeStep(label=PLAN_LABEL, value=plan_revenue, kind=StepKind.TOTAL, planFX=plan_fx)
    ]
    for kind in DRIVER_ORDER:
        driver = by_kind[kind]
        steps.append(
            BridgeStep(
                label=STEP_LABELS[kind],
                value=driver.value,
                kind=StepKind.DELTA,
                driverKind=kind,
                clientDetails=driver.clientDetails,
                planFX=plan_fx if kind == DriverKind.FX else None,
            )
        )
    steps.append(BridgeStep(label=ACTUAL_LABEL, value=actual_revenue, kind=StepKind.TOTAL))
    return steps


# =============================================================================
# Single-Period Generation
# =============================================================================


def generate_single_period(
    period_key: str,
    segment: Union[Segment, str],
    seed: str,
    period_offset: int = 0,
) -> PeriodDataModel:
    """
    Generate the full bridge data model for one calendar month.

    Args:
        period_key: Selected period, "YYYY-MM"
        segment: Client segment (enum or its string value)
        seed: Caller-supplied base seed
        period_offset: Months to shift the selected period by (0, -1, ...)

    Returns:
        PeriodDataModel with view=monthly, periodKey=the selected period and
        periods=[effective period]

    Raises:
        ValueError: If period_key is malformed or segment is unknown
    """
    segment = Segment(segment)
    effective_key = shift_period_key(period_key, period_offset)
    seed_string = derive_seed_string(seed, effective_key, segment, period_offset)
    rng = Mulberry32(hash_to_seed(seed_string))
    logger.debug(f"Generating period {effective_key} ({segment.value}) from seed {rng.state}")

    profile = SEGMENT_PROFILES[segment]

    # Headline revenue
    plan_revenue = rng.uniform(*profile.plan_range)
    sampled_pct = rng.symmetric(profile.variance_half_width)
    actual_revenue = plan_revenue * (1 + sampled_pct)
    variance = actual_revenue - plan_revenue
    variance_pct = safe_divide(variance, plan_revenue)

    # Timing slip
    plan_delay = rng.uniform(*PLAN_DELAY_RANGE)
    actual_delay = clamp(plan_delay + rng.symmetric(DELAY_SHOCK_HALF_WIDTH), *DELAY_BOUNDS)

    # FX
    plan_fx = rng.uniform(*PLAN_FX_RANGE)
    actual_fx = plan_fx * rng.uniform(*FX_SHOCK_RANGE)

    # Driver values as fractions of the variance; residual solved exactly
    values: Dict[DriverKind, float] = {}
    for kind in SAMPLED_DRIVERS:
        values[kind] = variance * rng.uniform(*profile.driver_fractions[kind])
    values[DriverKind.OTHER] = variance - sum(values[kind] for kind in SAMPLED_DRIVERS)

    first_day = period_start(effective_key)
    drivers = [
        Driver(
            kind=kind,
            name=DRIVER_NAMES[kind],
            value=values[kind],
            note=profile.driver_notes[kind],
            clientDetails=build_client_details(
                kind,
                values[kind],
                rng,
                profile.client_names,
                plan_revenue,
                plan_fx,
                first_day,
            ),
        )
        for kind in DRIVER_ORDER
    ]

    return PeriodDataModel(
        periodKey=period_key,
        segment=segment,
        view=ViewType.MONTHLY,
        periods=[effective_key],
        planRevenue=plan_revenue,
        actualRevenue=actual_revenue,
        variance=variance,
        variancePct=variance_pct,
        planDelay=plan_delay,
        actualDelay=actual_delay,
        planFX=plan_fx,
        actualFX=actual_fx,
        drivers=drivers,
        bridgeSteps=build_bridge_steps(plan_revenue, actual_revenue, drivers, plan_fx),
        insights=synthesize_insights(plan_revenue, plan_delay, actual_delay, drivers),
    )
