"""
Public entry point for the revenue bridge data model.

generate_revenue_data() is what the API layer (and any other renderer)
calls. It never raises for valid inputs: any failure while building a
cumulative view is logged and answered with the single-month model for the
selected period.

View dispatch:
- monthly: one single-period generation at offset 0
- quarterly-cumulative: offsets 0, -1, -2 aggregated
- annual-cumulative: offsets 0 .. -11 aggregated
"""

import logging
from typing import List, Optional, Union

from revenue_bridge.models import PeriodDataModel, Segment, ViewType
from revenue_bridge.services.aggregator import (
    aggregate_periods,
    is_structurally_valid,
    validate_period_model,
)
from revenue_bridge.services.period_generator import generate_single_period
from revenue_bridge.services.periods import parse_period_key

logger = logging.getLogger(__name__)

DEFAULT_SEED: str = "FP&A-bridge"


def generate_revenue_data(
    period: str,
    segment: Union[Segment, str] = Segment.EXISTING_CLIENTS,
    view: Union[ViewType, str] = ViewType.MONTHLY,
    seed: Optional[str] = None,
) -> PeriodDataModel:
    """
    Build the bridge data model for a (period, segment, view) selection.

    Args:
        period: Selected month, "YYYY-MM"
        segment: "existing-clients" or "new-clients"
        view: "monthly", "quarterly-cumulative" or "annual-cumulative"
        seed: Base seed; DEFAULT_SEED when omitted

    Returns:
        A freshly generated, structurally valid PeriodDataModel

    Raises:
        ValueError: Only for malformed inputs (bad period key, unknown
            segment or view), checked before generation starts
    """
    parse_period_key(period)
    segment = Segment(segment)
    view = ViewType(view)
    seed = DEFAULT_SEED if seed is None else seed

    if view == ViewType.MONTHLY:
        return generate_single_period(period, segment, seed, 0)

    try:
        months: List[PeriodDataModel] = []
        for offset in range(view.period_count):
            month = generate_single_period(period, segment, seed, -offset)
            if is_structurally_valid(month):
                months.append(month)
            else:
                logger.warning(f"Discarding invalid period at offset {-offset} for {period}")

        if not months:
            logger.error("No valid months generated, falling back to monthly view")
            return generate_single_period(period, segment, seed, 0)

        aggregated = aggregate_periods(months, view=view)
        if aggregated.view != view:
            aggregated = aggregated.model_copy(update={"view": view})
        return validate_period_model(aggregated)

    except Exception as e:
        logger.error(
            f"Error generating {view.value} revenue data for {period} ({segment.value}), "
            f"falling back to monthly view: {e}",
            exc_info=True,
        )
        return generate_single_period(period, segment, seed, 0)
