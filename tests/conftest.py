"""
Test Configuration
==================

Pytest fixtures for RegCost tests.
"""

import os
from typing import Any

import pytest

# Set test environment before settings are loaded
os.environ["ENVIRONMENT"] = "testing"
os.environ["COST_ESTIMATION_AI_ENABLED"] = "false"
os.environ["COST_ESTIMATION_CACHE_BACKEND"] = "memory"

from shared.llm import LLMMessage, LLMProvider, LLMResponse  # noqa: E402
from shared.models import (  # noqa: E402
    CompanyProfile,
    CostCategory,
    CostDriver,
    Department,
    Industry,
    RiskLevel,
    TechMaturity,
)


# Mentions portal, officer, audit, training and legal review only
FIVE_DRIVER_TEXT = (
    "The controller shall build a request portal, appoint a data protection officer, "
    "undergo an audit each year, provide staff training and complete a legal review "
    "of its privacy notices."
)

# Adds the fee rule on top of the five above
SIX_DRIVER_TEXT = FIVE_DRIVER_TEXT + " Controllers pay an annual registration fee."


# =============================================================================
# Fake LLM Provider
# =============================================================================


class FakeProvider(LLMProvider):
    """
    Scripted LLM provider.

    Each call to ``complete`` consumes the next scripted item: a string is
    returned as the response content, an exception is raised. The last
    item repeats once the script is exhausted.
    """

    def __init__(self, *script: str | Exception) -> None:
        self.script = list(script)
        self.calls: list[list[LLMMessage]] = []

    @property
    def name(self) -> str:
        return "fake"

    @property
    def model(self) -> str:
        return "fake-model"

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def complete(
        self,
        messages: list[LLMMessage],
        temperature: float | None = None,
        max_tokens: int | None = None,
    ) -> LLMResponse:
        self.calls.append(messages)
        index = min(len(self.calls) - 1, len(self.script) - 1)
        item = self.script[index]
        if isinstance(item, Exception):
            raise item
        return LLMResponse(content=item, model=self.model, provider=self.name)

    async def health_check(self) -> dict[str, Any]:
        return {"status": "healthy", "provider": self.name, "model": self.model}


# =============================================================================
# Profiles
# =============================================================================


@pytest.fixture
def tech_startup() -> CompanyProfile:
    """Small, mature tech company in two jurisdictions."""
    return CompanyProfile(
        industry=Industry.TECHNOLOGY,
        employee_count=50,
        geographic_complexity=2,
        tech_maturity=TechMaturity.HIGH,
    )


@pytest.fixture
def baseline_profile() -> CompanyProfile:
    """Profile whose combined multiplier is exactly 1.0."""
    return CompanyProfile(
        industry=Industry.TECHNOLOGY,
        employee_count=100,
        geographic_complexity=1,
        tech_maturity=TechMaturity.MEDIUM,
        risk_appetite=RiskLevel.LOW,
    )


@pytest.fixture
def regulated_enterprise() -> CompanyProfile:
    """Large, low-maturity healthcare company in many jurisdictions."""
    return CompanyProfile(
        industry=Industry.HEALTHCARE,
        employee_count=1000,
        geographic_complexity=12,
        tech_maturity=TechMaturity.LOW,
        risk_appetite=RiskLevel.HIGH,
    )


# =============================================================================
# Drivers
# =============================================================================


def make_driver(
    driver_id: str = "driver-test-1",
    category: CostCategory = CostCategory.OTHER,
    cost: float = 10000,
    one_time: bool = True,
    confidence: float = 0.8,
    department: Department = Department.COMPLIANCE,
) -> CostDriver:
    """Build a driver with sensible defaults."""
    return CostDriver(
        id=driver_id,
        category=category,
        description=f"{category.value.lower()} driver",
        is_one_time=one_time,
        estimated_cost=cost,
        confidence=confidence,
        department=department,
    )


@pytest.fixture
def mixed_drivers() -> list[CostDriver]:
    """One-time and recurring drivers spread over three departments."""
    return [
        make_driver("d-1", CostCategory.SYSTEM_CHANGES, 40000, True, 0.7, Department.IT),
        make_driver("d-2", CostCategory.INFRASTRUCTURE, 15000, False, 0.6, Department.IT),
        make_driver("d-3", CostCategory.LEGAL_REVIEW, 10000, True, 0.9, Department.LEGAL),
        make_driver("d-4", CostCategory.PERSONNEL, 50000, False, 0.8, Department.COMPLIANCE),
    ]
