"""
Calibration Engine Tests
========================

Tests for the calibration factors and the estimate they produce.

Version: 0.1.0
"""

import pytest

from services.cost_estimation.calibration import (
    CalibrationEngine,
    average_confidence,
    combined_multiplier,
    confidence_spread,
    geo_factor,
    industry_factor,
    size_factor,
    tech_factor,
)
from services.cost_estimation.extraction import extract_deterministic
from shared.models import (
    CompanyProfile,
    CostDriver,
    EstimationMethod,
    Industry,
    TechMaturity,
)
from tests.conftest import FIVE_DRIVER_TEXT


@pytest.fixture
def engine() -> CalibrationEngine:
    return CalibrationEngine()


@pytest.fixture
def five_drivers() -> list[CostDriver]:
    return extract_deterministic(FIVE_DRIVER_TEXT)


# =============================================================================
# Factors
# =============================================================================


class TestFactors:
    """Tests for the individual calibration factors."""

    @pytest.mark.parametrize(
        ("industry", "expected"),
        [
            (Industry.HEALTHCARE, 1.4),
            (Industry.FINANCE, 1.3),
            (Industry.MANUFACTURING, 1.1),
            (Industry.TECHNOLOGY, 1.0),
            (Industry.RETAIL, 1.0),
            (Industry.OTHER, 1.0),
        ],
    )
    def test_industry_factor(self, industry: Industry, expected: float) -> None:
        assert industry_factor(industry) == expected

    @pytest.mark.parametrize(
        ("maturity", "expected"),
        [
            (TechMaturity.LOW, 1.2),
            (TechMaturity.MEDIUM, 1.0),
            (TechMaturity.HIGH, 0.85),
        ],
    )
    def test_tech_factor(self, maturity: TechMaturity, expected: float) -> None:
        assert tech_factor(maturity) == expected

    def test_size_factor_is_one_at_baseline(self) -> None:
        assert size_factor(100) == 1.0

    def test_size_factor_is_sub_linear(self) -> None:
        """Doubling headcount scales by 2^0.7, not 2."""
        assert size_factor(200) == pytest.approx(2**0.7)
        assert size_factor(200) < 2

    def test_size_factor_below_baseline(self) -> None:
        """Small companies get a fractional factor."""
        assert 0 < size_factor(10) < 1

    def test_geo_factor(self) -> None:
        assert geo_factor(1) == 1.0
        assert geo_factor(5) == pytest.approx(1.2)

    def test_combined_multiplier(self, tech_startup: CompanyProfile) -> None:
        expected = 1.0 * (0.5**0.7) * 1.05 * 0.85
        assert combined_multiplier(tech_startup) == pytest.approx(expected)

    def test_average_confidence_defaults_without_drivers(self) -> None:
        assert average_confidence([]) == 0.7

    def test_confidence_spread_narrows_with_confidence(self) -> None:
        assert confidence_spread(0) == pytest.approx(0.2)
        assert confidence_spread(1) == pytest.approx(0.14)


# =============================================================================
# Engine
# =============================================================================


class TestCalibrationEngine:
    """Tests for CalibrationEngine.calibrate."""

    def test_baseline_profile_values(
        self,
        engine: CalibrationEngine,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        """Multiplier 1.0 leaves base costs and applies the band only."""
        estimate = engine.calibrate(five_drivers, baseline_profile)

        assert estimate.confidence == pytest.approx(0.78)
        assert estimate.one_time_cost_low == 29638
        assert estimate.one_time_cost_high == 40362
        assert estimate.recurring_cost_annual == 80000
        assert estimate.estimation_method == EstimationMethod.DETERMINISTIC

    def test_tech_startup(
        self,
        engine: CalibrationEngine,
        five_drivers: list[CostDriver],
        tech_startup: CompanyProfile,
    ) -> None:
        """A small mature company still gets an ordered band and recurring cost."""
        estimate = engine.calibrate(five_drivers, tech_startup)

        assert estimate.one_time_cost_low < estimate.one_time_cost_high
        assert estimate.recurring_cost_annual > 0

    def test_doubling_employees_scales_sub_linearly(
        self,
        engine: CalibrationEngine,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        doubled = baseline_profile.model_copy(update={"employee_count": 200})

        base = engine.calibrate(five_drivers, baseline_profile)
        scaled = engine.calibrate(five_drivers, doubled)

        ratio = scaled.one_time_cost_low / base.one_time_cost_low
        assert ratio < 2
        assert ratio == pytest.approx(2**0.7, rel=1e-3)

    def test_high_maturity_never_costs_more_than_low(
        self,
        engine: CalibrationEngine,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        high = baseline_profile.model_copy(update={"tech_maturity": TechMaturity.HIGH})
        low = baseline_profile.model_copy(update={"tech_maturity": TechMaturity.LOW})

        assert (
            engine.calibrate(five_drivers, high).one_time_cost_low
            <= engine.calibrate(five_drivers, low).one_time_cost_low
        )

    @pytest.mark.parametrize("employees", [7, 100, 350, 5000])
    @pytest.mark.parametrize("industry", list(Industry))
    def test_department_totals_match_midpoint(
        self,
        engine: CalibrationEngine,
        mixed_drivers: list[CostDriver],
        employees: int,
        industry: Industry,
    ) -> None:
        """Department one-time totals equal the band midpoint within 1%."""
        profile = CompanyProfile(
            industry=industry,
            employee_count=employees,
            geographic_complexity=3,
            tech_maturity=TechMaturity.LOW,
        )
        estimate = engine.calibrate(mixed_drivers, profile)

        department_one_time = sum(d.one_time_cost for d in estimate.department_breakdown)
        department_recurring = sum(d.recurring_cost_annual for d in estimate.department_breakdown)

        assert department_one_time == pytest.approx(estimate.one_time_cost_mid, rel=0.01)
        assert department_recurring == pytest.approx(estimate.recurring_cost_annual, rel=0.01)

    def test_empty_drivers(
        self,
        engine: CalibrationEngine,
        baseline_profile: CompanyProfile,
    ) -> None:
        """No drivers gives a zero estimate with the default confidence."""
        estimate = engine.calibrate([], baseline_profile)

        assert estimate.one_time_cost_low == 0
        assert estimate.one_time_cost_high == 0
        assert estimate.recurring_cost_annual == 0
        assert estimate.confidence == 0.7
        assert estimate.department_breakdown == []

    def test_identity_fields_are_carried(
        self,
        engine: CalibrationEngine,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        estimate = engine.calibrate(
            five_drivers,
            baseline_profile,
            estimation_method=EstimationMethod.AI_CALIBRATED,
            regulation_version_id="rv-1",
            customer_id="cust-1",
        )

        assert estimate.regulation_version_id == "rv-1"
        assert estimate.customer_id == "cust-1"
        assert estimate.estimation_method == EstimationMethod.AI_CALIBRATED
        assert estimate.cost_drivers == five_drivers
