"""
Shared Models
=============

Pydantic models shared across the cost estimation service.

Models:
- Inputs (CompanyProfile)
- Drivers (CostDriver, EvidenceSource, DepartmentAlternative)
- Estimates (CostEstimate, DepartmentCostBreakdown)
- Analysis (ScenarioAnalysis, SensitivityAnalysis)
- Portfolio (PortfolioTrend, PortfolioForecast)
- Feedback (CostFeedback, HistoricalVariance, FeedbackBand)
"""

from shared.models.cost import (
    CompanyProfile,
    CostCategory,
    CostDriver,
    CostEstimate,
    CostFeedback,
    CostScenario,
    CurrentYearCosts,
    Department,
    DepartmentAllocationDetail,
    DepartmentAlternative,
    DepartmentCostBreakdown,
    DepartmentTotals,
    EstimationMethod,
    EvidenceSource,
    EvidenceType,
    FeedbackBand,
    HistoricalVariance,
    Industry,
    PortfolioForecast,
    PortfolioTrend,
    RiskLevel,
    ScenarioAnalysis,
    ScenarioKey,
    SensitivityAnalysis,
    SensitivityFactor,
    SensitivityFactorName,
    SensitivityPoint,
    TechMaturity,
    TopDriver,
    YearProjection,
)

__all__ = [
    # Enums
    "Industry",
    "TechMaturity",
    "RiskLevel",
    "Department",
    "CostCategory",
    "EvidenceType",
    "EstimationMethod",
    "ScenarioKey",
    "SensitivityFactorName",
    # Inputs
    "CompanyProfile",
    # Drivers
    "CostDriver",
    "EvidenceSource",
    "DepartmentAlternative",
    # Estimates
    "CostEstimate",
    "DepartmentCostBreakdown",
    "DepartmentAllocationDetail",
    # Analysis
    "CostScenario",
    "ScenarioAnalysis",
    "SensitivityAnalysis",
    "SensitivityFactor",
    "SensitivityPoint",
    # Portfolio
    "PortfolioTrend",
    "PortfolioForecast",
    "DepartmentTotals",
    "TopDriver",
    "CurrentYearCosts",
    "YearProjection",
    # Feedback
    "CostFeedback",
    "HistoricalVariance",
    "FeedbackBand",
]
