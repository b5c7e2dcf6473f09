"""
Sensitivity Analysis
====================

Shows how an estimate moves when one input assumption changes.

Factors:
- Size: employee count at half, current and double
- Geography: jurisdiction count at half (never below one), current and double
- Tech maturity: average driver confidence -0.2, current, +0.2, which
  widens or narrows the confidence band

Size and geography points reuse the calibration factor formulas: the
ratio of the perturbed factor to the current one scales the estimate's
known bounds.

Version: 0.1.0
"""

from services.cost_estimation.calibration import (
    average_confidence,
    confidence_spread,
    geo_factor,
    size_factor,
    tech_factor,
)
from shared.logging import get_logger
from shared.models import (
    CompanyProfile,
    CostDriver,
    CostEstimate,
    SensitivityAnalysis,
    SensitivityFactor,
    SensitivityFactorName,
    SensitivityPoint,
    TechMaturity,
)


logger = get_logger(__name__)

CONFIDENCE_STEP = 0.2
CONFIDENCE_FLOOR = 0.3
CONFIDENCE_CEILING = 1.0

LARGE_COMPANY_EMPLOYEES = 500
COMPLEX_GEOGRAPHY_JURISDICTIONS = 10

SIZE_RECOMMENDATION = "Consider economies of scale at this size"
GEOGRAPHY_RECOMMENDATION = "Multi-jurisdiction complexity is driving costs"
TECH_RECOMMENDATION = "Investing in tech infrastructure could reduce long-term costs"


def _percent_change(high: float, baseline_high: float) -> float:
    if baseline_high == 0:
        return 0
    return round((high / baseline_high - 1) * 100)


class SensitivityAnalyzer:
    """Computes bounded cost ranges under perturbed assumptions."""

    def analyze(
        self,
        estimate: CostEstimate,
        profile: CompanyProfile,
        drivers: list[CostDriver],
    ) -> SensitivityAnalysis:
        """
        Run the sensitivity analysis for an estimate.

        Args:
            estimate: Calibrated estimate for ``profile``
            profile: Company profile the estimate was calibrated with
            drivers: Drivers behind the estimate

        Returns:
            SensitivityAnalysis with size, geography and tech maturity factors
        """
        # Recurring cost has no band of its own; reuse the estimate's spread
        band = confidence_spread(estimate.confidence)

        factors = [
            self._size_factor(estimate, profile, band),
            self._geography_factor(estimate, profile, band),
            self._tech_maturity_factor(estimate, profile, drivers),
        ]

        analysis = SensitivityAnalysis(
            baseline_one_time_low=estimate.one_time_cost_low,
            baseline_one_time_high=estimate.one_time_cost_high,
            baseline_recurring=estimate.recurring_cost_annual,
            factors=factors,
        )

        logger.debug(
            "sensitivity_analyzed",
            recommendations=sum(1 for f in factors if f.recommendation),
        )
        return analysis

    def _ratio_points(
        self,
        estimate: CostEstimate,
        points: list[tuple[str, float, float]],
        band: float,
    ) -> tuple[list[SensitivityPoint], list[SensitivityPoint]]:
        """Scale the estimate's bounds by (label, value, ratio) points."""
        one_time: list[SensitivityPoint] = []
        recurring: list[SensitivityPoint] = []
        baseline_recurring_high = estimate.recurring_cost_annual * (1 + band)

        for label, value, ratio in points:
            high = estimate.one_time_cost_high * ratio
            one_time.append(
                SensitivityPoint(
                    label=label,
                    value=value,
                    low=round(estimate.one_time_cost_low * ratio),
                    high=round(high),
                    percent_change=_percent_change(high, estimate.one_time_cost_high),
                )
            )

            recurring_mid = estimate.recurring_cost_annual * ratio
            recurring_high = recurring_mid * (1 + band)
            recurring.append(
                SensitivityPoint(
                    label=label,
                    value=value,
                    low=round(recurring_mid * (1 - band)),
                    high=round(recurring_high),
                    percent_change=_percent_change(recurring_high, baseline_recurring_high),
                )
            )

        return one_time, recurring

    def _size_factor(
        self,
        estimate: CostEstimate,
        profile: CompanyProfile,
        band: float,
    ) -> SensitivityFactor:
        current = size_factor(profile.employee_count)
        counts = [
            ("half", profile.employee_count * 0.5),
            ("current", float(profile.employee_count)),
            ("double", profile.employee_count * 2.0),
        ]
        points = [(label, count, size_factor(count) / current) for label, count in counts]
        one_time, recurring = self._ratio_points(estimate, points, band)

        return SensitivityFactor(
            factor=SensitivityFactorName.SIZE,
            current_value=current,
            impact_on_one_time=one_time,
            impact_on_recurring=recurring,
            recommendation=(
                SIZE_RECOMMENDATION if profile.employee_count > LARGE_COMPANY_EMPLOYEES else None
            ),
        )

    def _geography_factor(
        self,
        estimate: CostEstimate,
        profile: CompanyProfile,
        band: float,
    ) -> SensitivityFactor:
        current = geo_factor(profile.geographic_complexity)
        complexities = [
            ("half", max(1.0, profile.geographic_complexity * 0.5)),
            ("current", float(profile.geographic_complexity)),
            ("double", profile.geographic_complexity * 2.0),
        ]
        points = [(label, value, geo_factor(value) / current) for label, value in complexities]
        one_time, recurring = self._ratio_points(estimate, points, band)

        return SensitivityFactor(
            factor=SensitivityFactorName.GEOGRAPHY,
            current_value=current,
            impact_on_one_time=one_time,
            impact_on_recurring=recurring,
            recommendation=(
                GEOGRAPHY_RECOMMENDATION
                if profile.geographic_complexity > COMPLEX_GEOGRAPHY_JURISDICTIONS
                else None
            ),
        )

    def _tech_maturity_factor(
        self,
        estimate: CostEstimate,
        profile: CompanyProfile,
        drivers: list[CostDriver],
    ) -> SensitivityFactor:
        confidence = average_confidence(drivers)
        confidences = [
            ("lower", max(CONFIDENCE_FLOOR, confidence - CONFIDENCE_STEP)),
            ("current", confidence),
            ("higher", min(CONFIDENCE_CEILING, confidence + CONFIDENCE_STEP)),
        ]

        baseline_spread = confidence_spread(confidence)
        baseline_high = estimate.one_time_cost_mid * (1 + baseline_spread)
        baseline_recurring_high = estimate.recurring_cost_annual * (1 + baseline_spread)

        one_time: list[SensitivityPoint] = []
        recurring: list[SensitivityPoint] = []
        for label, value in confidences:
            spread = confidence_spread(value)
            high = estimate.one_time_cost_mid * (1 + spread)
            one_time.append(
                SensitivityPoint(
                    label=label,
                    value=round(value, 4),
                    low=round(estimate.one_time_cost_mid * (1 - spread)),
                    high=round(high),
                    percent_change=_percent_change(high, baseline_high),
                )
            )
            recurring_high = estimate.recurring_cost_annual * (1 + spread)
            recurring.append(
                SensitivityPoint(
                    label=label,
                    value=round(value, 4),
                    low=round(estimate.recurring_cost_annual * (1 - spread)),
                    high=round(recurring_high),
                    percent_change=_percent_change(recurring_high, baseline_recurring_high),
                )
            )

        return SensitivityFactor(
            factor=SensitivityFactorName.TECH_MATURITY,
            current_value=tech_factor(profile.tech_maturity),
            impact_on_one_time=one_time,
            impact_on_recurring=recurring,
            recommendation=(
                TECH_RECOMMENDATION if profile.tech_maturity == TechMaturity.LOW else None
            ),
        )
