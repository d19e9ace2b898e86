"""
Revenue Bridge Services Module

Pure, deterministic business logic for the revenue variance bridge. No
service performs I/O; the API layer (revenue_bridge/api/) is the only
transport.

Services:
- prng: FNV-1a string hashing and the mulberry32 generator
- numeric: Division and non-finite guards shared by every computation
- periods: "YYYY-MM" period key parsing and month arithmetic
- period_generator: Single-period synthetic plan-vs-actual model
- aggregator: Cumulative (quarterly / annual) roll-up of period models
- insights: Rule-based positive and negative narrative insights
- revenue_data: Public entry point dispatching on the selected view
- formatting: Money, percent, rate and price display strings
- dashboard: KPI cards, waterfall, driver table, drill-downs, month selector
"""

# =============================================================================
# PRNG Exports
# =============================================================================

from revenue_bridge.services.prng import (
    Mulberry32,
    hash_to_seed,
    seed_to_stream,
)

# =============================================================================
# Numeric and Period Helpers
# =============================================================================

from revenue_bridge.services.numeric import (
    clamp,
    finite_or,
    round_half_up,
    safe_divide,
)
from revenue_bridge.services.periods import (
    format_period_key,
    parse_period_key,
    period_label,
    period_start,
    shift_period_key,
    trailing_period_keys,
)

# =============================================================================
# Generation and Aggregation Exports
# Single-period generator, cumulative aggregator and the public entry point
# =============================================================================

from revenue_bridge.services.period_generator import (
    DRIVER_NAMES,
    DRIVER_ORDER,
    SEGMENT_PROFILES,
    build_bridge_steps,
    build_client_details,
    derive_seed_string,
    distribute_value,
    generate_single_period,
)
from revenue_bridge.services.aggregator import (
    EmptyAggregationInput,
    StructuralValidationFailure,
    aggregate_periods,
    is_structurally_valid,
    validate_period_model,
)
from revenue_bridge.services.revenue_data import (
    DEFAULT_SEED,
    generate_revenue_data,
)

# =============================================================================
# Insight Exports
# =============================================================================

from revenue_bridge.services.insights import (
    MIN_INSIGHTS_PER_POLARITY,
    merge_insights,
    pad_insights,
    synthesize_insights,
)

# =============================================================================
# Presentation Exports
# =============================================================================

from revenue_bridge.services.formatting import (
    format_currency,
    format_money,
    format_pct,
    format_price,
    format_rate,
)
from revenue_bridge.services.dashboard import (
    build_dashboard,
    build_driver_breakdown,
    build_kpi_cards,
    build_waterfall,
    group_insights,
    month_options,
    rank_drivers,
)

__all__ = [
    # PRNG
    "Mulberry32",
    "hash_to_seed",
    "seed_to_stream",
    # Numeric / periods
    "clamp",
    "finite_or",
    "round_half_up",
    "safe_divide",
    "format_period_key",
    "parse_period_key",
    "period_label",
    "period_start",
    "shift_period_key",
    "trailing_period_keys",
    # Generation
    "DRIVER_NAMES",
    "DRIVER_ORDER",
    "SEGMENT_PROFILES",
    "build_bridge_steps",
    "build_client_details",
    "derive_seed_string",
    "distribute_value",
    "generate_single_period",
    # Aggregation
    "EmptyAggregationInput",
    "StructuralValidationFailure",
    "aggregate_periods",
    "is_structurally_valid",
    "validate_period_model",
    # Entry point
    "DEFAULT_SEED",
    "generate_revenue_data",
    # Insights
    "MIN_INSIGHTS_PER_POLARITY",
    "merge_insights",
    "pad_insights",
    "synthesize_insights",
    # Presentation
    "format_currency",
    "format_money",
    "format_pct",
    "format_price",
    "format_rate",
    "build_dashboard",
    "build_driver_breakdown",
    "build_kpi_cards",
    "build_waterfall",
    "group_insights",
    "month_options",
    "rank_drivers",
]
