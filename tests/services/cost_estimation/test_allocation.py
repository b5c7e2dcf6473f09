"""
Department Allocation Tests
===========================

Tests for per-department cost allocation and the additive generative
refinement pass.

Version: 0.1.0
"""

import json

import pytest
from tenacity import wait_none

from services.cost_estimation.ai import GenerativeClient
from services.cost_estimation.allocation import (
    DepartmentAllocator,
    budget_code,
    fte_impact,
)
from services.cost_estimation.extraction import extract_deterministic
from shared.models import CompanyProfile, CostDriver, Department
from tests.conftest import FIVE_DRIVER_TEXT, FakeProvider


REFINEMENTS_JSON = json.dumps(
    {
        "refinements": [
            {
                "department": "IT",
                "allocationDetail": {
                    "oneTimeTasks": ["Build request portal"],
                    "recurringTasks": ["Patch portal"],
                    "fteSplit": {"Senior Engineer": 0.5},
                    "riskFactors": ["Vendor lock-in"],
                    "sequencing": ["Design", "Build"],
                },
            },
            {"department": "HR"},
        ]
    }
)


def allocator_with(provider: FakeProvider) -> DepartmentAllocator:
    return DepartmentAllocator(
        client=GenerativeClient(provider=provider, max_attempts=2, wait=wait_none())
    )


@pytest.fixture
def five_drivers() -> list[CostDriver]:
    return extract_deterministic(FIVE_DRIVER_TEXT)


class TestHelpers:
    """Tests for budget codes and FTE impact."""

    @pytest.mark.parametrize(
        ("department", "expected"),
        [
            (Department.LEGAL, "LEGA-COMP-001"),
            (Department.IT, "IT-COMP-001"),
            (Department.HR, "HR-COMP-001"),
            (Department.FINANCE, "FINA-COMP-001"),
            (Department.OPERATIONS, "OPER-COMP-001"),
            (Department.COMPLIANCE, "COMP-COMP-001"),
        ],
    )
    def test_budget_code(self, department: Department, expected: str) -> None:
        assert budget_code(department) == expected

    def test_fte_impact(self) -> None:
        """$100k recurring or $200k one-time is one FTE."""
        assert fte_impact(200_000, 100_000) == 2.0
        assert fte_impact(30_000, 0) == 0.15
        assert fte_impact(0, 0) == 0


class TestAllocate:
    """Tests for DepartmentAllocator.allocate."""

    def test_groups_by_department_in_fixed_order(
        self,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        """Departments without drivers are omitted."""
        breakdown = DepartmentAllocator().allocate(five_drivers, baseline_profile)

        assert [b.department for b in breakdown] == [
            Department.LEGAL,
            Department.IT,
            Department.HR,
            Department.COMPLIANCE,
        ]

    def test_costs_and_fte(
        self,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        breakdown = {
            b.department: b for b in DepartmentAllocator().allocate(five_drivers, baseline_profile)
        }

        it = breakdown[Department.IT]
        assert it.one_time_cost == 30000
        assert it.recurring_cost_annual == 0
        assert it.fte_impact == 0.15
        assert it.budget_code == "IT-COMP-001"

        compliance = breakdown[Department.COMPLIANCE]
        assert compliance.one_time_cost == 0
        assert compliance.recurring_cost_annual == 72000
        assert compliance.fte_impact == 0.72
        assert len(compliance.line_items) == 2

    def test_multiplier_scales_every_department(
        self,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        allocator = DepartmentAllocator()
        base = allocator.allocate(five_drivers, baseline_profile)
        doubled = allocator.allocate(five_drivers, baseline_profile, multiplier=2.0)

        for before, after in zip(base, doubled, strict=True):
            assert after.one_time_cost == before.one_time_cost * 2
            assert after.recurring_cost_annual == before.recurring_cost_annual * 2

    def test_no_drivers(self, baseline_profile: CompanyProfile) -> None:
        assert DepartmentAllocator().allocate([], baseline_profile) == []


class TestAllocateWithEnrichment:
    """Tests for DepartmentAllocator.allocate_with_enrichment."""

    @pytest.mark.asyncio
    async def test_adds_detail_without_touching_numbers(
        self,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        """Only departments returned by the model gain detail."""
        allocator = allocator_with(FakeProvider(REFINEMENTS_JSON))
        base = allocator.allocate(five_drivers, baseline_profile)

        refined = await allocator.allocate_with_enrichment(
            five_drivers, baseline_profile, "Privacy Act", base
        )

        for before, after in zip(base, refined, strict=True):
            assert after.department == before.department
            assert after.one_time_cost == before.one_time_cost
            assert after.recurring_cost_annual == before.recurring_cost_annual
            assert after.fte_impact == before.fte_impact
            assert after.budget_code == before.budget_code

        by_department = {b.department: b for b in refined}
        detail = by_department[Department.IT].allocation_detail
        assert detail is not None
        assert detail.one_time_tasks == ["Build request portal"]
        assert detail.fte_split == {"Senior Engineer": 0.5}

        # HR was returned without detail; LEGAL was not returned at all
        assert by_department[Department.HR].allocation_detail is None
        assert by_department[Department.LEGAL].allocation_detail is None

    @pytest.mark.asyncio
    async def test_prompt_carries_allocation(
        self,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        provider = FakeProvider(REFINEMENTS_JSON)
        allocator = allocator_with(provider)
        base = allocator.allocate(five_drivers, baseline_profile)

        await allocator.allocate_with_enrichment(five_drivers, baseline_profile, "Privacy Act", base)

        user = provider.calls[0][1].content
        assert "Regulation: Privacy Act" in user
        assert "TECHNOLOGY industry, 100 employees" in user
        assert "COMP-COMP-001" in user

    @pytest.mark.asyncio
    async def test_transport_failure_returns_base(
        self,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        provider = FakeProvider(ConnectionError("down"))
        allocator = allocator_with(provider)
        base = allocator.allocate(five_drivers, baseline_profile)

        refined = await allocator.allocate_with_enrichment(
            five_drivers, baseline_profile, "Privacy Act", base
        )

        assert refined is base
        assert provider.call_count == 2

    @pytest.mark.asyncio
    async def test_malformed_response_returns_base(
        self,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        allocator = allocator_with(FakeProvider('{"refinements": [{"department": "SALES"}]}'))
        base = allocator.allocate(five_drivers, baseline_profile)

        refined = await allocator.allocate_with_enrichment(
            five_drivers, baseline_profile, "Privacy Act", base
        )

        assert refined is base

    @pytest.mark.asyncio
    async def test_empty_refinements_return_base(
        self,
        five_drivers: list[CostDriver],
        baseline_profile: CompanyProfile,
    ) -> None:
        allocator = allocator_with(FakeProvider('{"refinements": []}'))
        base = allocator.allocate(five_drivers, baseline_profile)

        refined = await allocator.allocate_with_enrichment(
            five_drivers, baseline_profile, "Privacy Act", base
        )

        assert refined is base
