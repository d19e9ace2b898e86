"""
Enumeration definitions for the Revenue Bridge backend.

All enums inherit from both `str` and `Enum` so they serialize to their plain
string values inside Pydantic models and FastAPI responses. The string values
are the identifiers the dashboard front end sends and expects back.
"""

from enum import Enum


class Segment(str, Enum):
    """
    Client segment selected in the dashboard navigation.

    - existing-clients: Mature book of business, higher revenue base, larger churn
    - new-clients: Newly onboarded cohort, smaller base, volume-led variance
    """
    EXISTING_CLIENTS = "existing-clients"
    NEW_CLIENTS = "new-clients"


class ViewType(str, Enum):
    """
    Aggregation view for the bridge.

    - monthly: A single period
    - quarterly-cumulative: The selected month plus the two preceding months
    - annual-cumulative: The selected month plus the eleven preceding months
    """
    MONTHLY = "monthly"
    QUARTERLY_CUMULATIVE = "quarterly-cumulative"
    ANNUAL_CUMULATIVE = "annual-cumulative"

    @property
    def period_count(self) -> int:
        """Number of calendar months folded into this view."""
        if self is ViewType.QUARTERLY_CUMULATIVE:
            return 3
        if self is ViewType.ANNUAL_CUMULATIVE:
            return 12
        return 1


class DriverKind(str, Enum):
    """
    Variance driver categories.

    Every driver and every delta bridge step carries one of these tags from
    the moment it is created. Client detail shapes are chosen from the tag.
    """
    VOLUME = "volume"
    PRICE = "price"
    TIMING = "timing"
    CHURN = "churn"
    FX = "fx"
    OTHER = "other"


class StepKind(str, Enum):
    """
    Waterfall step kind.

    - total: Absolute bar anchored at zero (Plan, Actual)
    - delta: Floating bar added to the running total (drivers)
    """
    TOTAL = "total"
    DELTA = "delta"


class InsightPolarity(str, Enum):
    """Whether an insight describes a favourable or unfavourable development."""
    POSITIVE = "positive"
    NEGATIVE = "negative"


class CardTone(str, Enum):
    """
    Indicator dot colour for KPI cards.

    - good: Over plan
    - bad: Under plan
    - neutral: Informational figure with no direction
    """
    GOOD = "good"
    BAD = "bad"
    NEUTRAL = "neutral"
