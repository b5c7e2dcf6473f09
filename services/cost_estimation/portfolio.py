"""
Portfolio Analytics
===================

Aggregation and forecasting across a customer's cost estimates.

Aggregation is a pure reduction: partial trends built from disjoint
slices of the input can be combined with ``merge`` in any grouping.

Forecast Model:
- Year 1 carries the full one-time cost; later years carry none
- Recurring cost compounds at 2% annual inflation
- Cumulative is the running total of one-time (low) + recurring

Version: 0.1.0
"""

from collections.abc import Callable, Iterable
from functools import reduce

from shared.logging import get_logger
from shared.models import (
    CostEstimate,
    CurrentYearCosts,
    Department,
    DepartmentTotals,
    PortfolioForecast,
    PortfolioTrend,
    RiskLevel,
    TopDriver,
    YearProjection,
)


logger = get_logger(__name__)

THREE_YEARS = 3
TOP_DRIVER_LIMIT = 10
INFLATION_RATE = 0.02
DEFAULT_FORECAST_YEARS = 3

SMALL_PORTFOLIO_THRESHOLD = 5
LOW_CONFIDENCE_THRESHOLD = 0.7
IT_HEAVY_SHARE = 0.6

LIMITED_DATASET_FLAG = "Limited estimate dataset - forecast may be inaccurate"
LOW_CONFIDENCE_FLAG = "Low average confidence scores - verify key assumptions"
IT_HEAVY_FLAG = "IT implementation costs are high - consider phased approach"

RiskClassifier = Callable[[CostEstimate], RiskLevel]


def classify_by_confidence(estimate: CostEstimate) -> RiskLevel:
    """
    Default risk bucket for an estimate.

    Less certain estimates carry more budget risk.
    """
    if estimate.confidence >= 0.85:
        return RiskLevel.MINIMAL
    if estimate.confidence >= 0.75:
        return RiskLevel.LOW
    if estimate.confidence >= 0.6:
        return RiskLevel.MEDIUM
    return RiskLevel.HIGH


def _rank_top_drivers(drivers: Iterable[TopDriver]) -> list[TopDriver]:
    # sorted() is stable, so equal costs keep input order
    return sorted(drivers, key=lambda d: d.total_cost, reverse=True)[:TOP_DRIVER_LIMIT]


class PortfolioAnalyzer:
    """Aggregates estimates into trends and projects them forward."""

    def __init__(
        self,
        risk_classifier: RiskClassifier = classify_by_confidence,
        inflation_rate: float = INFLATION_RATE,
    ) -> None:
        """
        Args:
            risk_classifier: Maps an estimate to its risk bucket
            inflation_rate: Annual compounding rate for recurring cost
        """
        self.risk_classifier = risk_classifier
        self.inflation_rate = inflation_rate

    # =========================================================================
    # Aggregation
    # =========================================================================

    def summarize(self, estimate: CostEstimate) -> PortfolioTrend:
        """Trend of a single estimate."""
        departments: dict[Department, DepartmentTotals] = {}
        for dept in estimate.department_breakdown:
            current = departments.get(dept.department, DepartmentTotals())
            departments[dept.department] = DepartmentTotals(
                one_time=current.one_time + dept.one_time_cost,
                recurring=current.recurring + dept.recurring_cost_annual,
            )

        exposure_low = estimate.one_time_cost_low + estimate.recurring_cost_annual * THREE_YEARS
        buckets = {level: 0.0 for level in RiskLevel}
        buckets[self.risk_classifier(estimate)] += exposure_low

        return PortfolioTrend(
            total_one_time_low=estimate.one_time_cost_low,
            total_one_time_high=estimate.one_time_cost_high,
            total_recurring_annual=estimate.recurring_cost_annual,
            estimate_count=1,
            average_confidence=estimate.confidence,
            three_year_exposure_low=exposure_low,
            three_year_exposure_high=(
                estimate.one_time_cost_high + estimate.recurring_cost_annual * THREE_YEARS
            ),
            costs_by_department=departments,
            costs_by_risk=buckets,
            top_drivers=_rank_top_drivers(
                TopDriver(
                    description=driver.description,
                    category=driver.category,
                    total_cost=driver.estimated_cost,
                    confidence=driver.confidence,
                )
                for driver in estimate.cost_drivers
            ),
        )

    def merge(self, left: PortfolioTrend, right: PortfolioTrend) -> PortfolioTrend:
        """Combine two partial trends."""
        count = left.estimate_count + right.estimate_count
        if count == 0:
            return PortfolioTrend()

        average_confidence = (
            left.average_confidence * left.estimate_count
            + right.average_confidence * right.estimate_count
        ) / count

        departments = dict(left.costs_by_department)
        for department, totals in right.costs_by_department.items():
            current = departments.get(department, DepartmentTotals())
            departments[department] = DepartmentTotals(
                one_time=current.one_time + totals.one_time,
                recurring=current.recurring + totals.recurring,
            )

        return PortfolioTrend(
            total_one_time_low=left.total_one_time_low + right.total_one_time_low,
            total_one_time_high=left.total_one_time_high + right.total_one_time_high,
            total_recurring_annual=left.total_recurring_annual + right.total_recurring_annual,
            estimate_count=count,
            average_confidence=average_confidence,
            three_year_exposure_low=left.three_year_exposure_low + right.three_year_exposure_low,
            three_year_exposure_high=left.three_year_exposure_high + right.three_year_exposure_high,
            costs_by_department=departments,
            costs_by_risk={
                level: left.costs_by_risk.get(level, 0) + right.costs_by_risk.get(level, 0)
                for level in RiskLevel
            },
            top_drivers=_rank_top_drivers([*left.top_drivers, *right.top_drivers]),
        )

    def aggregate(self, estimates: Iterable[CostEstimate]) -> PortfolioTrend:
        """
        Aggregate estimates into a portfolio trend.

        An empty input yields an all-zero trend.
        """
        trend = reduce(self.merge, (self.summarize(e) for e in estimates), PortfolioTrend())

        logger.info(
            "portfolio_aggregated",
            estimates=trend.estimate_count,
            three_year_low=trend.three_year_exposure_low,
            three_year_high=trend.three_year_exposure_high,
        )
        return trend

    # =========================================================================
    # Forecast
    # =========================================================================

    def forecast(
        self,
        trend: PortfolioTrend,
        years: int = DEFAULT_FORECAST_YEARS,
    ) -> PortfolioForecast:
        """
        Project a trend forward.

        Args:
            trend: Aggregated portfolio trend
            years: Number of years to project (none when below 1)

        Returns:
            PortfolioForecast with per-year projections and advisory flags
        """
        projections: list[YearProjection] = []
        cumulative = 0.0

        for year in range(1, years + 1):
            recurring = round(
                trend.total_recurring_annual * (1 + self.inflation_rate) ** (year - 1)
            )
            one_time_low = trend.total_one_time_low if year == 1 else 0
            one_time_high = trend.total_one_time_high if year == 1 else 0
            cumulative += one_time_low + recurring

            projections.append(
                YearProjection(
                    year=year,
                    one_time_low=one_time_low,
                    one_time_high=one_time_high,
                    recurring_annual=recurring,
                    cumulative=cumulative,
                )
            )

        return PortfolioForecast(
            current_year=CurrentYearCosts(
                one_time_low=trend.total_one_time_low,
                one_time_high=trend.total_one_time_high,
                recurring_annual=trend.total_recurring_annual,
            ),
            projections=projections,
            risk_factors=self.risk_factors(trend),
        )

    def risk_factors(self, trend: PortfolioTrend) -> list[str]:
        """Advisory flags for a trend."""
        flags: list[str] = []
        if trend.estimate_count < SMALL_PORTFOLIO_THRESHOLD:
            flags.append(LIMITED_DATASET_FLAG)
        if trend.average_confidence < LOW_CONFIDENCE_THRESHOLD:
            flags.append(LOW_CONFIDENCE_FLAG)

        it_costs = trend.costs_by_department.get(Department.IT)
        if it_costs is not None and it_costs.one_time > trend.total_one_time_low * IT_HEAVY_SHARE:
            flags.append(IT_HEAVY_FLAG)
        return flags
