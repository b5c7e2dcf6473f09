"""
Cost Estimation Service
=======================

Estimates the financial impact of regulatory compliance on a company.

Components:
- CostDriverExtractor: regulation text to cost drivers
- CalibrationEngine: company-specific cost scaling
- DepartmentAllocator: per-department costs, FTE impact and budget codes
- ScenarioGenerator: minimal / standard / best-in-class / delayed strategies
- SensitivityAnalyzer: impact of size, geography and tech maturity
- PortfolioAnalyzer: aggregation and inflation-adjusted forecast
- apply_learning_feedback: adjustment from actual-cost history
- CostEstimationService: the full pipeline with caching

Version: 0.1.0
"""

from services.cost_estimation.allocation import DepartmentAllocator
from services.cost_estimation.cache import (
    EstimationCache,
    InMemoryCache,
    RedisCache,
    make_cache_key,
)
from services.cost_estimation.calibration import CalibrationEngine, combined_multiplier
from services.cost_estimation.estimator import (
    DEFAULT_PROFILE,
    CostEstimationService,
    EstimationReport,
    profile_with_defaults,
)
from services.cost_estimation.extraction import CostDriverExtractor, extract_deterministic
from services.cost_estimation.feedback import (
    apply_learning_feedback,
    build_feedback,
    feedback_band,
)
from services.cost_estimation.portfolio import PortfolioAnalyzer, classify_by_confidence
from services.cost_estimation.scenarios import ScenarioGenerator, recommend_scenario
from services.cost_estimation.sensitivity import SensitivityAnalyzer


__all__ = [
    # Pipeline
    "CostEstimationService",
    "EstimationReport",
    "DEFAULT_PROFILE",
    "profile_with_defaults",
    # Cache
    "EstimationCache",
    "InMemoryCache",
    "RedisCache",
    "make_cache_key",
    # Extraction
    "CostDriverExtractor",
    "extract_deterministic",
    # Calibration
    "CalibrationEngine",
    "combined_multiplier",
    # Allocation
    "DepartmentAllocator",
    # Scenarios
    "ScenarioGenerator",
    "recommend_scenario",
    # Sensitivity
    "SensitivityAnalyzer",
    # Portfolio
    "PortfolioAnalyzer",
    "classify_by_confidence",
    # Feedback
    "apply_learning_feedback",
    "build_feedback",
    "feedback_band",
]
