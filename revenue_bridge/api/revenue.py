"""
FastAPI router module for revenue bridge endpoints.

This module implements endpoints for:
- The bridge data model for a (period, segment, view) selection
- The dashboard bundle (model plus KPI cards, waterfall, driver table,
  insights panel)
- Per-driver client drill-downs
- Month selector options

Every endpoint is a thin transport over revenue_bridge.services: the data
model is generated on request from the seed and never stored.

Query Defaults:
- period: the current calendar month
- segment, view, seed: taken from Settings (DEFAULT_SEGMENT, DEFAULT_VIEW,
  DEFAULT_SEED)
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Annotated, List, Optional, Tuple

from fastapi import APIRouter, HTTPException, Path, Query

from revenue_bridge.core.config import Settings
from revenue_bridge.core.dependencies import SettingsDep
from revenue_bridge.models import (
    DashboardResponse,
    DriverBreakdown,
    DriverKind,
    MonthOption,
    PeriodDataModel,
    Segment,
    ViewType,
)
from revenue_bridge.services.dashboard import (
    build_dashboard,
    build_driver_breakdown,
    month_options,
)
from revenue_bridge.services.periods import format_period_key
from revenue_bridge.services.revenue_data import generate_revenue_data

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/revenue-data", tags=["revenue-data"])

PeriodQuery = Annotated[
    Optional[str],
    Query(pattern=r"^\d{4}-\d{2}$", description="Selected month (YYYY-MM); defaults to the current month"),
]
SegmentQuery = Annotated[Optional[Segment], Query(description="Client segment")]
ViewQuery = Annotated[Optional[ViewType], Query(description="Monthly or cumulative view")]
SeedQuery = Annotated[Optional[str], Query(min_length=1, description="Base seed for generation")]


# =============================================================================
# Helpers
# =============================================================================


def _resolve_selection(
    settings: Settings,
    period: Optional[str],
    segment: Optional[Segment],
    view: Optional[ViewType],
    seed: Optional[str],
) -> Tuple[str, Segment, ViewType, str]:
    """Fill omitted query parameters from settings (and today's month)."""
    if period is None:
        today = date.today()
        period = format_period_key(today.year, today.month)
    return (
        period,
        segment if segment is not None else settings.default_segment,
        view if view is not None else settings.default_view,
        seed if seed is not None else settings.default_seed,
    )


def _generate(
    settings: Settings,
    period: Optional[str],
    segment: Optional[Segment],
    view: Optional[ViewType],
    seed: Optional[str],
) -> PeriodDataModel:
    """
    Generate the model for a request.

    Raises:
        HTTPException 400: If the selection is malformed (e.g. month 13)
        HTTPException 500: If generation fails unexpectedly
    """
    selection = _resolve_selection(settings, period, segment, view, seed)
    try:
        return generate_revenue_data(*selection)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error generating revenue data for {selection[0]}: {e}")
        raise HTTPException(
            status_code=500,
            detail=f"Failed to generate revenue data: {str(e)}",
        )


# =============================================================================
# Endpoints
# =============================================================================


@router.get("", response_model=PeriodDataModel)
async def get_revenue_data(
    settings: SettingsDep,
    period: PeriodQuery = None,
    segment: SegmentQuery = None,
    view: ViewQuery = None,
    seed: SeedQuery = None,
) -> PeriodDataModel:
    """
    Get the revenue bridge data model for a selection.

    Returns:
        PeriodDataModel with headline figures, six drivers, eight bridge
        steps and at least three insights of each polarity
    """
    return _generate(settings, period, segment, view, seed)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(
    settings: SettingsDep,
    period: PeriodQuery = None,
    segment: SegmentQuery = None,
    view: ViewQuery = None,
    seed: SeedQuery = None,
) -> DashboardResponse:
    """
    Get the model together with every view model the dashboard renders.

    Returns:
        DashboardResponse with KPI cards, waterfall chart, ranked driver
        table and insights panel
    """
    model = _generate(settings, period, segment, view, seed)
    return build_dashboard(model)


@router.get("/drivers/{driver_kind}", response_model=DriverBreakdown)
async def get_driver_breakdown(
    driver_kind: Annotated[DriverKind, Path(description="Driver to drill into")],
    settings: SettingsDep,
    period: PeriodQuery = None,
    segment: SegmentQuery = None,
    view: ViewQuery = None,
    seed: SeedQuery = None,
) -> DriverBreakdown:
    """
    Get the per-client breakdown of one driver.

    Raises:
        HTTPException 404: If the driver has no client details
    """
    model = _generate(settings, period, segment, view, seed)
    breakdown = build_driver_breakdown(model, driver_kind)
    if breakdown is None:
        raise HTTPException(
            status_code=404,
            detail=f"No client details for driver {driver_kind.value}",
        )
    return breakdown


@router.get("/months", response_model=List[MonthOption])
async def get_month_options(
    settings: SettingsDep,
    reference: Annotated[Optional[date], Query(description="Most recent month to list")] = None,
    count: Annotated[Optional[int], Query(ge=1, le=36, description="Number of months")] = None,
) -> List[MonthOption]:
    """
    List month selector options, most recent first.

    Defaults to the current month and Settings.month_selector_count months.
    """
    return month_options(
        reference if reference is not None else date.today(),
        count if count is not None else settings.month_selector_count,
    )
