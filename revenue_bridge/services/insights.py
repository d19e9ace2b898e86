"""
Insight Synthesizer - narrative observations for the insights panel.

Maps the sign and magnitude of each driver (and actual vs planned delay) to
templated sentences, then tops each polarity up to a minimum count from a
fixed, ordered filler list.

Rule evaluation order:
Positive rules
1. Volume above plan (names the top three volume contributors)
2. Price above plan (as % of plan revenue)
3. Timing acceleration
4. Actual delay below planned delay
5. Clients live on time or early (timing rows with daysDelay <= 0)

Negative rules
6. Volume below plan
7. Price below plan
8. Timing slippage
9. Churn loss (cites the first churn reason among the churn rows)
10. Actual delay more than 20% above planned delay
11. Material FX translation loss (|fx| above 2% of plan revenue)

Output order: rule-derived insights first in evaluation order, then
positive filler, then negative filler.
"""

from typing import Dict, Iterable, List, Sequence

from revenue_bridge.models import (
    ClientDetail,
    Driver,
    DriverKind,
    Insight,
    InsightPolarity,
)
from revenue_bridge.services.formatting import format_currency, format_pct
from revenue_bridge.services.numeric import safe_divide

# =============================================================================
# CONSTANTS
# =============================================================================

MIN_INSIGHTS_PER_POLARITY: int = 3

# Number of client names quoted in the volume sentence
TOP_CLIENT_COUNT: int = 3

# Actual delay must exceed plan by this factor to count as an overrun
DELAY_OVERRUN_FACTOR: float = 1.2

# FX losses below this share of plan revenue are not called out
FX_MATERIALITY_RATIO: float = 0.02

DEFAULT_CHURN_REASON: str = "contract cancellations"

POSITIVE_FILLERS: Sequence[str] = (
    "Sales team exceeded quarterly targets for new client acquisition, adding 5+ strategic accounts.",
    "Product adoption rates increased by 15% among existing clients, driving higher engagement.",
    "Customer satisfaction scores reached an all-time high of 4.7/5.0, indicating strong service delivery.",
    "Partnership channel generated 20% more qualified leads than planned, expanding market reach.",
    "Operational efficiency improvements reduced cost per transaction by 8% compared to plan.",
)

NEGATIVE_FILLERS: Sequence[str] = (
    "Payment processing delays affected 3 major clients, causing temporary revenue recognition gaps.",
    "Competitive pressure forced price reductions on 2 key accounts, impacting margin expectations.",
    "Technical integration challenges delayed go-live for 4 enterprise clients by an average of 2 weeks.",
    "Regulatory compliance review required additional documentation, slowing down 3 contract renewals.",
    "Market volatility in key regions led to reduced transaction volumes from international clients.",
)


# =============================================================================
# Helpers
# =============================================================================


def count_by_polarity(insights: Iterable[Insight]) -> Dict[InsightPolarity, int]:
    """Count insights per polarity (both keys always present)."""
    counts = {InsightPolarity.POSITIVE: 0, InsightPolarity.NEGATIVE: 0}
    for insight in insights:
        counts[insight.polarity] += 1
    return counts


def _top_client_names(details: Sequence[ClientDetail], limit: int = TOP_CLIENT_COUNT) -> List[str]:
    ranked = sorted(details, key=lambda d: d.variance, reverse=True)
    return [d.clientName for d in ranked[:limit]]


def _pct_of_plan(value: float, plan_revenue: float) -> str:
    return format_pct(abs(safe_divide(value, plan_revenue)))


def _positive(text: str) -> Insight:
    return Insight(polarity=InsightPolarity.POSITIVE, text=text)


def _negative(text: str) -> Insight:
    return Insight(polarity=InsightPolarity.NEGATIVE, text=text)


# =============================================================================
# Padding and Merging
# =============================================================================


def pad_insights(insights: Sequence[Insight]) -> List[Insight]:
    """
    Top each polarity up to MIN_INSIGHTS_PER_POLARITY from the filler lists.

    With n existing insights of a polarity, filler entries are taken from
    index n onwards, skipping any text already present, and never beyond the
    end of the filler list.

    Args:
        insights: Rule-derived (or merged) insights

    Returns:
        New list: the input followed by positive then negative filler
    """
    result = list(insights)
    for polarity, fillers in (
        (InsightPolarity.POSITIVE, POSITIVE_FILLERS),
        (InsightPolarity.NEGATIVE, NEGATIVE_FILLERS),
    ):
        count = count_by_polarity(result)[polarity]
        existing = {insight.text for insight in result}
        index = count
        while count < MIN_INSIGHTS_PER_POLARITY and index < len(fillers):
            text = fillers[index]
            index += 1
            if text in existing:
                continue
            result.append(Insight(polarity=polarity, text=text))
            count += 1
    return result


def merge_insights(groups: Iterable[Sequence[Insight]]) -> List[Insight]:
    """
    Union insight lists by exact text, keeping first-encounter order.

    Args:
        groups: Insight lists, one per period, in period order

    Returns:
        Deduplicated insights
    """
    seen = set()
    merged: List[Insight] = []
    for group in groups:
        for insight in group:
            if insight.text in seen:
                continue
            seen.add(insight.text)
            merged.append(insight)
    return merged


# =============================================================================
# Rule Evaluation
# =============================================================================


def synthesize_insights(
    plan_revenue: float,
    plan_delay: float,
    actual_delay: float,
    drivers: Sequence[Driver],
) -> List[Insight]:
    """
    Derive positive and negative insights from one period's numbers.

    Args:
        plan_revenue: Planned recognized revenue
        plan_delay: Planned timing-slip rate
        actual_delay: Actual timing-slip rate
        drivers: The six drivers with their client details

    Returns:
        Rule-derived insights followed by filler, with at least
        MIN_INSIGHTS_PER_POLARITY entries of each polarity
    """
    values = {driver.kind: driver.value for driver in drivers}
    details = {driver.kind: driver.clientDetails for driver in drivers}

    volume = values.get(DriverKind.VOLUME, 0.0)
    price = values.get(DriverKind.PRICE, 0.0)
    timing = values.get(DriverKind.TIMING, 0.0)
    churn = values.get(DriverKind.CHURN, 0.0)
    fx = values.get(DriverKind.FX, 0.0)

    insights: List[Insight] = []

    # ----- Positive -----
    if volume > 0:
        top_clients = _top_client_names(details.get(DriverKind.VOLUME, []))
        lead = f"{', '.join(top_clients)} and other top clients" if top_clients else "Top clients"
        insights.append(_positive(
            f"{lead} transacted above planned volume, contributing "
            f"{format_currency(abs(volume))} in additional revenue."
        ))

    if price > 0:
        insights.append(_positive(
            f"Average transaction price exceeded plan by {_pct_of_plan(price, plan_revenue)}, "
            f"indicating successful pricing optimization and upselling initiatives."
        ))

    if timing > 0:
        insights.append(_positive(
            f"Implementation acceleration resulted in {format_currency(abs(timing))} "
            f"of revenue being recognized earlier than planned."
        ))

    if actual_delay < plan_delay:
        insights.append(_positive(
            f"Actual implementation delay ({format_pct(actual_delay)}) was below planned "
            f"({format_pct(plan_delay)}), indicating improved project execution."
        ))

    timing_details = details.get(DriverKind.TIMING, [])
    on_time = [d for d in timing_details if d.daysDelay is not None and d.daysDelay <= 0]
    if on_time:
        plural = "s" if len(on_time) > 1 else ""
        insights.append(_positive(
            f"{len(on_time)} client{plural} went live on time or ahead of schedule, "
            f"demonstrating strong implementation capabilities."
        ))

    # ----- Negative -----
    if volume < 0:
        insights.append(_negative(
            f"Transaction volume fell short of plan by {format_currency(abs(volume))}, "
            f"primarily driven by lower activity from mid-tier clients."
        ))

    if price < 0:
        insights.append(_negative(
            f"Average transaction price was {_pct_of_plan(price, plan_revenue)} below plan, "
            f"suggesting pricing pressure or mix shift toward lower-value transactions."
        ))

    if timing < 0:
        insights.append(_negative(
            f"Implementation delays pushed {format_currency(abs(timing))} of revenue "
            f"recognition into future periods."
        ))

    churn_details = details.get(DriverKind.CHURN, [])
    if churn < 0 and churn_details:
        reasons = [d.churnReason for d in churn_details if d.churnReason]
        top_reason = reasons[0] if reasons else DEFAULT_CHURN_REASON
        insights.append(_negative(
            f"Customer churn resulted in {format_currency(abs(churn))} in lost revenue, "
            f"with {top_reason} being the primary driver."
        ))

    if actual_delay > plan_delay * DELAY_OVERRUN_FACTOR:
        insights.append(_negative(
            f"Actual implementation delay ({format_pct(actual_delay)}) significantly exceeded "
            f"plan ({format_pct(plan_delay)}), indicating operational challenges in project delivery."
        ))

    if fx < 0 and abs(fx) > plan_revenue * FX_MATERIALITY_RATIO:
        insights.append(_negative(
            f"Unfavorable FX rate movements resulted in {format_currency(abs(fx))} in "
            f"translation losses, impacting international revenue recognition."
        ))

    return pad_insights(insights)
