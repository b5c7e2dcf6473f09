"""
Cost Estimation Service
=======================

End-to-end estimation for one regulation and one company:

    extract drivers -> calibrate -> (optional) enrich allocation
                    -> scenarios -> sensitivity

Estimate figures are memoized per regulation text and profile. No step raises
for generative-model trouble; the worst case is the deterministic result.

Version: 0.1.0
"""

import uuid
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Any

from pydantic import TypeAdapter

from services.cost_estimation.allocation import DepartmentAllocator
from services.cost_estimation.cache import EstimationCache, build_cache, make_cache_key
from services.cost_estimation.calibration import CalibrationEngine
from services.cost_estimation.extraction import CostDriverExtractor, estimation_method_for
from services.cost_estimation.scenarios import ScenarioGenerator
from services.cost_estimation.sensitivity import SensitivityAnalyzer
from shared.logging import bound_context, get_logger
from shared.models import (
    CompanyProfile,
    CostEstimate,
    Industry,
    RiskLevel,
    ScenarioAnalysis,
    SensitivityAnalysis,
    TechMaturity,
)


logger = get_logger(__name__)

ESTIMATE_CACHE_SUFFIX = "estimate"
MIN_TEXT_FOR_ENRICHMENT = 100

ESTIMATE_ADAPTER: TypeAdapter[CostEstimate] = TypeAdapter(CostEstimate)

DEFAULT_PROFILE = CompanyProfile(
    industry=Industry.TECHNOLOGY,
    employee_count=100,
    geographic_complexity=1,
    tech_maturity=TechMaturity.MEDIUM,
    risk_appetite=RiskLevel.LOW,
)


def profile_with_defaults(**overrides: Any) -> CompanyProfile:
    """Fill a partial profile from the default profile."""
    values = DEFAULT_PROFILE.model_dump()
    values.update({k: v for k, v in overrides.items() if v is not None})
    return CompanyProfile(**values)


@dataclass
class EstimationReport:
    """Estimate plus the analyses built on it."""

    estimate: CostEstimate
    scenarios: ScenarioAnalysis
    sensitivity: SensitivityAnalysis

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready representation."""
        return {
            "estimate": self.estimate.model_dump(mode="json"),
            "scenarios": self.scenarios.model_dump(mode="json"),
            "sensitivity": self.sensitivity.model_dump(mode="json", exclude_none=True),
        }


class CostEstimationService:
    """Runs the estimation pipeline with driver and estimate caching."""

    def __init__(
        self,
        extractor: CostDriverExtractor | None = None,
        calibration: CalibrationEngine | None = None,
        allocator: DepartmentAllocator | None = None,
        scenarios: ScenarioGenerator | None = None,
        sensitivity: SensitivityAnalyzer | None = None,
        estimate_cache: EstimationCache[CostEstimate] | None = None,
    ) -> None:
        self.extractor = extractor or CostDriverExtractor()
        self.allocator = allocator or DepartmentAllocator()
        self.calibration = calibration or CalibrationEngine(self.allocator)
        self.scenarios = scenarios or ScenarioGenerator()
        self.sensitivity = sensitivity or SensitivityAnalyzer()
        self.estimate_cache = (
            estimate_cache if estimate_cache is not None else build_cache(ESTIMATE_ADAPTER, "estimates")
        )

    @property
    def ai_enabled(self) -> bool:
        return self.extractor.ai_enabled

    async def estimate(
        self,
        regulation_text: str,
        regulation_title: str,
        profile: CompanyProfile,
        *,
        regulation_version_id: str = "",
        customer_id: str = "",
    ) -> CostEstimate:
        """
        Estimate the cost of complying with a regulation.

        Args:
            regulation_text: Full regulation text
            regulation_title: Regulation title
            profile: Company profile
            regulation_version_id: Persistence key supplied by the caller
            customer_id: Persistence key supplied by the caller

        Returns:
            CostEstimate carrying the caller's identity. The figures come
            from cache when the same text and profile were seen before.
        """
        with bound_context(customer_id=customer_id, regulation_version_id=regulation_version_id):
            cache_key = make_cache_key(
                regulation_text,
                f"{ESTIMATE_CACHE_SUFFIX}-{profile.model_dump_json()}",
            )
            cached = await self.estimate_cache.get(cache_key)
            if cached is not None:
                logger.info("estimate_cache_hit", title=regulation_title)
                return cached.model_copy(
                    update={
                        "id": str(uuid.uuid4()),
                        "created_at": datetime.now(UTC),
                        "customer_id": customer_id,
                        "regulation_version_id": regulation_version_id,
                    }
                )

            drivers = await self.extractor.extract(regulation_text, regulation_title)
            estimate = self.calibration.calibrate(
                drivers,
                profile,
                estimation_method=estimation_method_for(drivers),
                regulation_version_id=regulation_version_id,
                customer_id=customer_id,
            )

            if self.ai_enabled and len(regulation_text) > MIN_TEXT_FOR_ENRICHMENT:
                refined = await self.allocator.allocate_with_enrichment(
                    drivers,
                    profile,
                    regulation_title,
                    estimate.department_breakdown,
                )
                estimate = estimate.model_copy(update={"department_breakdown": refined})

            # Identity is restamped on every cache hit.
            await self.estimate_cache.set(
                cache_key,
                estimate.model_copy(update={"customer_id": "", "regulation_version_id": ""}),
            )
            return estimate

    async def analyze(
        self,
        regulation_text: str,
        regulation_title: str,
        profile: CompanyProfile,
        *,
        regulation_version_id: str = "",
        customer_id: str = "",
    ) -> EstimationReport:
        """Estimate, then build scenarios and sensitivity on the result."""
        estimate = await self.estimate(
            regulation_text,
            regulation_title,
            profile,
            regulation_version_id=regulation_version_id,
            customer_id=customer_id,
        )

        scenarios = self.scenarios.generate_scenarios(
            estimate.one_time_cost_mid,
            estimate.recurring_cost_annual,
            profile,
        )
        sensitivity = self.sensitivity.analyze(estimate, profile, estimate.cost_drivers)

        logger.info(
            "estimate_analyzed",
            title=regulation_title,
            method=estimate.estimation_method.value,
            recommended=scenarios.recommended.value,
        )
        return EstimationReport(estimate=estimate, scenarios=scenarios, sensitivity=sensitivity)

    async def cache_stats(self) -> dict[str, int]:
        """Sizes of the driver and estimate caches."""
        return {
            "driver_cache_size": await self.extractor.cache.size(),
            "estimate_cache_size": await self.estimate_cache.size(),
        }

    async def clear_caches(self) -> None:
        """Drop all memoized drivers and estimates."""
        await self.extractor.cache.clear()
        await self.estimate_cache.clear()
        logger.info("estimation_caches_cleared")
