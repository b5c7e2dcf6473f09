"""
Cost Estimate Models
====================

Records for regulatory compliance cost estimation: company profiles,
cost drivers, department breakdowns, scenarios, sensitivity analysis,
portfolio trends and learning feedback.

All records are immutable once constructed and serialise to plain JSON
with ``model_dump(mode="json")``.

Version: 0.1.0
"""

import uuid
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Industry(str, Enum):
    """Industry of the company being estimated."""

    TECHNOLOGY = "TECHNOLOGY"
    HEALTHCARE = "HEALTHCARE"
    FINANCE = "FINANCE"
    MANUFACTURING = "MANUFACTURING"
    RETAIL = "RETAIL"
    OTHER = "OTHER"


class TechMaturity(str, Enum):
    """Technology maturity level."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RiskLevel(str, Enum):
    """Risk classification for scenarios and risk appetite."""

    MINIMAL = "MINIMAL"
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class Department(str, Enum):
    """Departments that absorb compliance cost."""

    LEGAL = "LEGAL"
    IT = "IT"
    HR = "HR"
    FINANCE = "FINANCE"
    OPERATIONS = "OPERATIONS"
    COMPLIANCE = "COMPLIANCE"


class CostCategory(str, Enum):
    """Cost driver category."""

    LEGAL_REVIEW = "LEGAL_REVIEW"
    SYSTEM_CHANGES = "SYSTEM_CHANGES"
    TRAINING = "TRAINING"
    CONSULTING = "CONSULTING"
    AUDIT = "AUDIT"
    PERSONNEL = "PERSONNEL"
    INFRASTRUCTURE = "INFRASTRUCTURE"
    OTHER = "OTHER"


class EvidenceType(str, Enum):
    """Kind of source backing a cost driver."""

    REGULATION_CLAUSE = "REGULATION_CLAUSE"
    INDUSTRY_BENCHMARK = "INDUSTRY_BENCHMARK"
    CASE_STUDY = "CASE_STUDY"
    VENDOR_QUOTE = "VENDOR_QUOTE"
    ASSUMPTION = "ASSUMPTION"


class EstimationMethod(str, Enum):
    """How the cost drivers behind an estimate were produced."""

    DETERMINISTIC = "DETERMINISTIC"
    AI_CALIBRATED = "AI_CALIBRATED"


class ScenarioKey(str, Enum):
    """Keys of the four implementation scenarios."""

    MINIMAL = "minimal"
    STANDARD = "standard"
    BEST_IN_CLASS = "bestInClass"
    DELAY_90_DAYS = "delay90Days"


class SensitivityFactorName(str, Enum):
    """Input assumptions perturbed by the sensitivity analysis."""

    SIZE = "sizeMultiplier"
    GEOGRAPHY = "geoMultiplier"
    TECH_MATURITY = "techMaturity"


class _Record(BaseModel):
    """Base for immutable estimation records."""

    model_config = ConfigDict(frozen=True)


# =============================================================================
# Inputs
# =============================================================================


class CompanyProfile(_Record):
    """Company characteristics used to calibrate base costs."""

    industry: Industry
    employee_count: int = Field(..., gt=0)
    revenue: float | None = Field(default=None, ge=0)
    geographic_complexity: int = Field(
        default=1,
        ge=1,
        description="Number of distinct jurisdictions the company operates in",
    )
    tech_maturity: TechMaturity = TechMaturity.MEDIUM
    risk_appetite: RiskLevel | None = None


# =============================================================================
# Cost Drivers
# =============================================================================


class EvidenceSource(_Record):
    """Citation supporting a cost driver."""

    type: EvidenceType
    reference: str
    confidence: float = Field(..., ge=0, le=1)
    estimated_cost: float | None = Field(default=None, ge=0)


class DepartmentAlternative(_Record):
    """Another department that could own a driver."""

    department: Department
    probability: float = Field(..., ge=0, le=1)
    reasoning: str | None = None


class CostDriver(_Record):
    """A single discrete compliance requirement with a dollar estimate."""

    id: str
    category: CostCategory
    description: str
    is_one_time: bool
    estimated_cost: float = Field(..., ge=0)
    confidence: float = Field(..., ge=0, le=1)
    department: Department

    evidence: list[EvidenceSource] = Field(default_factory=list)
    notes: str | None = None
    department_alternatives: list[DepartmentAlternative] = Field(default_factory=list)


# =============================================================================
# Department Allocation
# =============================================================================


class DepartmentAllocationDetail(_Record):
    """Task and role detail added by the optional AI refinement pass."""

    one_time_tasks: list[str] = Field(default_factory=list)
    recurring_tasks: list[str] = Field(default_factory=list)
    fte_split: dict[str, float] = Field(
        default_factory=dict,
        description="Role name to FTE share, e.g. {'Senior Engineer': 0.5}",
    )
    risk_factors: list[str] = Field(default_factory=list)
    sequencing: list[str] = Field(default_factory=list)


class DepartmentCostBreakdown(_Record):
    """Calibrated cost owned by one department."""

    department: Department
    one_time_cost: float
    recurring_cost_annual: float
    fte_impact: float = Field(..., ge=0)
    budget_code: str
    line_items: list[CostDriver] = Field(default_factory=list)
    allocation_detail: DepartmentAllocationDetail | None = None


# =============================================================================
# Estimates
# =============================================================================


class CostEstimate(_Record):
    """Calibrated cost estimate for one regulation version and customer."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    regulation_version_id: str = ""
    customer_id: str = ""

    # Cost ranges
    one_time_cost_low: float
    one_time_cost_high: float
    recurring_cost_annual: float

    # Detailed breakdown
    cost_drivers: list[CostDriver] = Field(default_factory=list)
    department_breakdown: list[DepartmentCostBreakdown] = Field(default_factory=list)

    # Metadata
    estimation_method: EstimationMethod = EstimationMethod.DETERMINISTIC
    confidence: float = Field(..., ge=0, le=1)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def one_time_cost_mid(self) -> float:
        """Midpoint of the one-time confidence band."""
        return (self.one_time_cost_low + self.one_time_cost_high) / 2


# =============================================================================
# Scenarios
# =============================================================================


class CostScenario(_Record):
    """A named implementation strategy with its own cost and risk."""

    name: str
    description: str
    one_time_cost: float
    recurring_cost_annual: float
    three_year_total: float
    risk_level: RiskLevel
    assumptions: list[str] = Field(default_factory=list)


class ScenarioAnalysis(_Record):
    """
    The four scenarios plus the recommended one.

    Serialised keys match ``ScenarioKey`` values so ``recommended`` names a key
    present in the dump.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, serialize_by_alias=True)

    minimal: CostScenario
    standard: CostScenario
    best_in_class: CostScenario = Field(..., alias=ScenarioKey.BEST_IN_CLASS.value)
    delay_90_days: CostScenario = Field(..., alias=ScenarioKey.DELAY_90_DAYS.value)
    recommended: ScenarioKey

    def scenario(self, key: ScenarioKey) -> CostScenario:
        """Look up a scenario by key."""
        return {
            ScenarioKey.MINIMAL: self.minimal,
            ScenarioKey.STANDARD: self.standard,
            ScenarioKey.BEST_IN_CLASS: self.best_in_class,
            ScenarioKey.DELAY_90_DAYS: self.delay_90_days,
        }[key]

    @property
    def recommended_scenario(self) -> CostScenario:
        return self.scenario(self.recommended)


# =============================================================================
# Sensitivity
# =============================================================================


class SensitivityPoint(_Record):
    """Cost range at one perturbed value of a factor."""

    label: str
    value: float
    low: float
    high: float
    percent_change: float


class SensitivityFactor(_Record):
    """Impact of varying one input assumption."""

    factor: SensitivityFactorName
    current_value: float
    impact_on_one_time: list[SensitivityPoint]
    impact_on_recurring: list[SensitivityPoint]
    recommendation: str | None = None


class SensitivityAnalysis(_Record):
    """Baseline plus per-factor impact ranges."""

    baseline_one_time_low: float
    baseline_one_time_high: float
    baseline_recurring: float
    factors: list[SensitivityFactor]

    def factor(self, name: SensitivityFactorName) -> SensitivityFactor:
        """Get the analysis for a single factor."""
        for item in self.factors:
            if item.factor == name:
                return item
        raise KeyError(name)


# =============================================================================
# Portfolio
# =============================================================================


class DepartmentTotals(_Record):
    """Portfolio-wide cost owned by one department."""

    one_time: float = 0
    recurring: float = 0


class TopDriver(_Record):
    """One of the most expensive drivers across a portfolio."""

    description: str
    category: CostCategory
    total_cost: float
    confidence: float


def _empty_risk_buckets() -> dict[RiskLevel, float]:
    return {level: 0 for level in RiskLevel}


class PortfolioTrend(_Record):
    """Aggregate of many cost estimates."""

    total_one_time_low: float = 0
    total_one_time_high: float = 0
    total_recurring_annual: float = 0
    estimate_count: int = 0
    average_confidence: float = 0
    three_year_exposure_low: float = 0
    three_year_exposure_high: float = 0
    costs_by_department: dict[Department, DepartmentTotals] = Field(default_factory=dict)
    costs_by_risk: dict[RiskLevel, float] = Field(default_factory=_empty_risk_buckets)
    top_drivers: list[TopDriver] = Field(default_factory=list)


class CurrentYearCosts(_Record):
    """Portfolio totals for the current year."""

    one_time_low: float
    one_time_high: float
    recurring_annual: float


class YearProjection(_Record):
    """Projected portfolio cost for one forecast year."""

    year: int
    one_time_low: float
    one_time_high: float
    recurring_annual: float
    cumulative: float


class PortfolioForecast(_Record):
    """Year-indexed projection of a portfolio trend."""

    current_year: CurrentYearCosts
    projections: list[YearProjection] = Field(default_factory=list)
    risk_factors: list[str] = Field(default_factory=list)


# =============================================================================
# Learning Feedback
# =============================================================================


class HistoricalVariance(_Record):
    """An (estimated, actual) pair and its relative variance."""

    estimated: float
    actual: float
    variance: float


class FeedbackBand(_Record):
    """The part of an estimate adjusted by learning feedback."""

    one_time_cost_low: float
    one_time_cost_high: float
    confidence: float


class CostFeedback(_Record):
    """Actual costs reported after implementation."""

    cost_estimate_id: str
    estimated_one_time_cost: float
    actual_one_time_cost: float = Field(..., ge=0)
    actual_recurring_cost_annual: float = Field(..., ge=0)
    one_time_variance: float
    recurring_variance: float
    variance_notes: str | None = None
    submitted_by: str
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def accuracy(self) -> float:
        """One-time accuracy as a percentage (100 = exact)."""
        return 100 - abs(self.one_time_variance * 100)

    def to_history(self) -> HistoricalVariance:
        """Convert to the history entry consumed by learning feedback."""
        return HistoricalVariance(
            estimated=self.estimated_one_time_cost,
            actual=self.actual_one_time_cost,
            variance=self.one_time_variance,
        )
