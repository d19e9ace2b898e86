"""
Tests for the cumulative period aggregator.

Test Categories:
- TestAggregationInputs: Empty, single and invalid inputs
- TestAggregatedFigures: Sums, residual recomputation, anchor carry-over
- TestAggregatedDetails: Period tagging and detail filtering
- TestValidation: Structural validation of a finished model
"""

import logging
import math
from typing import List

import pytest

from revenue_bridge.models import ClientDetail, DriverKind, PeriodDataModel, ViewType
from revenue_bridge.services.aggregator import (
    EmptyAggregationInput,
    StructuralValidationFailure,
    aggregate_periods,
    tag_period_details,
    validate_period_model,
)
from revenue_bridge.services.insights import count_by_polarity
from revenue_bridge.services.period_generator import DRIVER_ORDER, SAMPLED_DRIVERS
from revenue_bridge.tests.conftest import make_detail


class TestAggregationInputs:

    def test_empty_input_raises(self) -> None:
        with pytest.raises(EmptyAggregationInput):
            aggregate_periods([])

    def test_empty_input_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            aggregate_periods([])

    def test_single_input_returned_unchanged(self, monthly_model: PeriodDataModel) -> None:
        assert aggregate_periods([monthly_model]) is monthly_model

    def test_invalid_periods_dropped(
        self,
        quarter_months: List[PeriodDataModel],
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        broken = quarter_months[1].model_copy(update={"drivers": []})
        periods = [quarter_months[0], broken, quarter_months[2]]
        with caplog.at_level(logging.WARNING):
            result = aggregate_periods(periods, view=ViewType.QUARTERLY_CUMULATIVE)

        assert result.planRevenue == pytest.approx(
            quarter_months[0].planRevenue + quarter_months[2].planRevenue
        )
        assert result.periods == quarter_months[0].periods + quarter_months[2].periods
        assert any("invalid" in record.message for record in caplog.records)

    def test_all_invalid_raises(self, quarter_months: List[PeriodDataModel]) -> None:
        broken = [m.model_copy(update={"bridgeSteps": []}) for m in quarter_months]
        with pytest.raises(StructuralValidationFailure):
            aggregate_periods(broken)


@pytest.mark.invariant
class TestAggregatedFigures:

    def test_revenue_sums(self, quarter_months: List[PeriodDataModel]) -> None:
        result = aggregate_periods(quarter_months, view=ViewType.QUARTERLY_CUMULATIVE)
        plan = sum(m.planRevenue for m in quarter_months)
        actual = sum(m.actualRevenue for m in quarter_months)
        assert result.planRevenue == pytest.approx(plan)
        assert result.actualRevenue == pytest.approx(actual)
        assert result.variance == pytest.approx(actual - plan)
        assert result.variancePct == pytest.approx((actual - plan) / plan)

    def test_sampled_driver_sums(self, quarter_months: List[PeriodDataModel]) -> None:
        result = aggregate_periods(quarter_months)
        for kind in SAMPLED_DRIVERS:
            expected = sum(m.driver(kind).value for m in quarter_months)
            assert result.driver(kind).value == pytest.approx(expected)

    def test_residual_recomputed_and_bridge_closes(self, quarter_months: List[PeriodDataModel]) -> None:
        result = aggregate_periods(quarter_months)
        sampled = sum(result.driver(kind).value for kind in SAMPLED_DRIVERS)
        assert result.driver(DriverKind.OTHER).value == pytest.approx(result.variance - sampled)
        assert result.planRevenue + sum(d.value for d in result.drivers) == pytest.approx(
            result.actualRevenue, rel=1e-9
        )

    def test_structure(self, quarter_months: List[PeriodDataModel]) -> None:
        result = aggregate_periods(quarter_months, view=ViewType.QUARTERLY_CUMULATIVE)
        assert [d.kind for d in result.drivers] == list(DRIVER_ORDER)
        assert len(result.bridgeSteps) == 8
        assert result.bridgeSteps[0].value == result.planRevenue
        assert result.bridgeSteps[-1].value == result.actualRevenue
        assert result.view == ViewType.QUARTERLY_CUMULATIVE

    def test_view_defaults_to_anchor(self, quarter_months: List[PeriodDataModel]) -> None:
        assert aggregate_periods(quarter_months).view == ViewType.MONTHLY

    def test_anchor_carries_delay_and_fx(self, quarter_months: List[PeriodDataModel]) -> None:
        anchor = quarter_months[0]
        result = aggregate_periods(quarter_months)
        assert result.periodKey == anchor.periodKey
        assert result.segment == anchor.segment
        assert result.planDelay == anchor.planDelay
        assert result.actualDelay == anchor.actualDelay
        assert result.planFX == anchor.planFX
        assert result.actualFX == anchor.actualFX

    def test_periods_concatenated(self, quarter_months: List[PeriodDataModel]) -> None:
        assert aggregate_periods(quarter_months).periods == ["2025-06", "2025-05", "2025-04"]

    def test_insights_unique_and_padded(self, quarter_months: List[PeriodDataModel]) -> None:
        result = aggregate_periods(quarter_months)
        texts = [i.text for i in result.insights]
        assert len(texts) == len(set(texts))
        counts = count_by_polarity(result.insights)
        assert all(count >= 3 for count in counts.values())

    def test_inputs_not_mutated(self, quarter_months: List[PeriodDataModel]) -> None:
        snapshot = [m.model_copy(deep=True) for m in quarter_months]
        aggregate_periods(quarter_months)
        assert quarter_months == snapshot


class TestAggregatedDetails:

    def test_detail_rows_concatenated_with_period_suffix(
        self, quarter_months: List[PeriodDataModel]
    ) -> None:
        result = aggregate_periods(quarter_months)
        for kind in DRIVER_ORDER:
            rows = result.driver(kind).clientDetails
            per_period = [len(m.driver(kind).clientDetails) for m in quarter_months]
            assert len(rows) == sum(per_period)

            first = rows[: per_period[0]]
            last = rows[-per_period[2]:]
            assert all(r.clientName.endswith(" (M1)") for r in first)
            assert all(r.clientName.endswith(" (M3)") for r in last)

    @pytest.mark.invariant
    def test_aggregated_details_sum_to_driver(self, quarter_months: List[PeriodDataModel]) -> None:
        result = aggregate_periods(quarter_months)
        for kind in DRIVER_ORDER:
            rows = result.driver(kind).clientDetails
            assert sum(r.variance for r in rows) == pytest.approx(result.driver(kind).value, abs=1e-6)

    def test_tag_period_details_filters_non_finite(self) -> None:
        rows = [
            make_detail("Acme Corp", 100.0),
            make_detail("Broken Co", math.nan),
            make_detail("Infinite Ltd", math.inf),
        ]
        tagged = tag_period_details(rows, 1)
        assert [r.clientName for r in tagged] == ["Acme Corp (M2)"]
        assert rows[0].clientName == "Acme Corp"

    def test_tag_period_details_keeps_kind_fields(self) -> None:
        row = ClientDetail(
            clientName="Acme Corp",
            planValue=0.2,
            actualValue=0.25,
            variance=500.0,
            planPrice=0.2,
            actualPrice=0.25,
            priceChange=0.05,
        )
        (tagged,) = tag_period_details([row], 0)
        assert tagged.clientName == "Acme Corp (M1)"
        assert tagged.priceChange == 0.05


class TestValidation:

    def test_valid_model_passes(self, monthly_model: PeriodDataModel) -> None:
        assert validate_period_model(monthly_model) is monthly_model

    def test_none_fails(self) -> None:
        with pytest.raises(StructuralValidationFailure):
            validate_period_model(None)

    def test_missing_driver_fails(self, monthly_model: PeriodDataModel) -> None:
        broken = monthly_model.model_copy(update={"drivers": monthly_model.drivers[:-1]})
        with pytest.raises(StructuralValidationFailure, match="other"):
            validate_period_model(broken)

    def test_wrong_step_count_fails(self, monthly_model: PeriodDataModel) -> None:
        broken = monthly_model.model_copy(update={"bridgeSteps": monthly_model.bridgeSteps[:5]})
        with pytest.raises(StructuralValidationFailure):
            validate_period_model(broken)
