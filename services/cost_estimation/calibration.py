"""
Cost Calibration
================

Scales base driver costs to a specific company.

Multiplier Components:
- Industry: regulated sectors carry a premium
- Size: sub-linear in headcount, (employees / 100) ^ 0.7
- Geography: +5% per jurisdiction beyond the first
- Tech maturity: mature stacks absorb change more cheaply

The overall one-time cost is reported as a confidence band around the
calibrated midpoint; department totals carry the midpoint only.

Version: 0.1.0
"""

from typing import assert_never

from services.cost_estimation.allocation import DepartmentAllocator
from shared.logging import get_logger
from shared.models import (
    CompanyProfile,
    CostDriver,
    CostEstimate,
    EstimationMethod,
    Industry,
    TechMaturity,
)


logger = get_logger(__name__)

SIZE_BASELINE_EMPLOYEES = 100
SIZE_EXPONENT = 0.7
GEO_STEP = 0.05
DEFAULT_CONFIDENCE = 0.7
MAX_SPREAD = 0.2
SPREAD_CONFIDENCE_WEIGHT = 0.3


# =============================================================================
# Factors
# =============================================================================


def industry_factor(industry: Industry) -> float:
    """Industry premium."""
    match industry:
        case Industry.HEALTHCARE:
            return 1.4
        case Industry.FINANCE:
            return 1.3
        case Industry.MANUFACTURING:
            return 1.1
        case Industry.TECHNOLOGY | Industry.RETAIL | Industry.OTHER:
            return 1.0
        case _:
            assert_never(industry)


def size_factor(employee_count: float) -> float:
    """Economies of scale: below 1.0 for companies under 100 employees."""
    return (employee_count / SIZE_BASELINE_EMPLOYEES) ** SIZE_EXPONENT


def geo_factor(geographic_complexity: float) -> float:
    """Each jurisdiction beyond the first adds 5%."""
    return 1 + (geographic_complexity - 1) * GEO_STEP


def tech_factor(tech_maturity: TechMaturity) -> float:
    """Technology maturity discount or premium."""
    match tech_maturity:
        case TechMaturity.LOW:
            return 1.2
        case TechMaturity.MEDIUM:
            return 1.0
        case TechMaturity.HIGH:
            return 0.85
        case _:
            assert_never(tech_maturity)


def combined_multiplier(profile: CompanyProfile) -> float:
    """Product of all four calibration factors."""
    return (
        industry_factor(profile.industry)
        * size_factor(profile.employee_count)
        * geo_factor(profile.geographic_complexity)
        * tech_factor(profile.tech_maturity)
    )


def average_confidence(drivers: list[CostDriver]) -> float:
    """Mean driver confidence, 0.7 when there are no drivers."""
    if not drivers:
        return DEFAULT_CONFIDENCE
    return sum(d.confidence for d in drivers) / len(drivers)


def confidence_spread(confidence: float) -> float:
    """
    Relative half-width of the confidence band.

    0.2 at zero confidence, narrowing to 0.14 at full confidence.
    """
    return MAX_SPREAD * (1 - confidence * SPREAD_CONFIDENCE_WEIGHT)


def split_base_costs(drivers: list[CostDriver]) -> tuple[float, float]:
    """Sum uncalibrated (one-time, recurring) costs."""
    one_time = sum(d.estimated_cost for d in drivers if d.is_one_time)
    recurring = sum(d.estimated_cost for d in drivers if not d.is_one_time)
    return one_time, recurring


# =============================================================================
# Engine
# =============================================================================


class CalibrationEngine:
    """Converts a driver list and company profile into a cost estimate."""

    def __init__(self, allocator: DepartmentAllocator | None = None) -> None:
        self.allocator = allocator or DepartmentAllocator()

    def calibrate(
        self,
        drivers: list[CostDriver],
        profile: CompanyProfile,
        *,
        estimation_method: EstimationMethod = EstimationMethod.DETERMINISTIC,
        regulation_version_id: str = "",
        customer_id: str = "",
    ) -> CostEstimate:
        """
        Calibrate drivers to a company.

        Args:
            drivers: Extracted cost drivers
            profile: Company profile
            estimation_method: How the drivers were produced
            regulation_version_id: Identity supplied by the caller
            customer_id: Identity supplied by the caller

        Returns:
            CostEstimate with rounded cost fields and department breakdown
        """
        base_one_time, base_recurring = split_base_costs(drivers)
        multiplier = combined_multiplier(profile)

        one_time_mid = base_one_time * multiplier
        recurring = base_recurring * multiplier

        confidence = average_confidence(drivers)
        spread = confidence_spread(confidence)

        estimate = CostEstimate(
            regulation_version_id=regulation_version_id,
            customer_id=customer_id,
            one_time_cost_low=round(one_time_mid * (1 - spread)),
            one_time_cost_high=round(one_time_mid * (1 + spread)),
            recurring_cost_annual=round(recurring),
            cost_drivers=list(drivers),
            department_breakdown=self.allocator.allocate(drivers, profile, multiplier),
            estimation_method=estimation_method,
            confidence=confidence,
        )

        logger.info(
            "estimate_calibrated",
            drivers=len(drivers),
            multiplier=round(multiplier, 4),
            one_time_low=estimate.one_time_cost_low,
            one_time_high=estimate.one_time_cost_high,
            recurring=estimate.recurring_cost_annual,
        )
        return estimate
