"""
Department Allocation
=====================

Redistributes calibrated driver costs into departments, with FTE impact
and budget codes. An optional generative pass adds task and role detail
to each department without touching the numbers.

Version: 0.1.0
"""

import json

from services.cost_estimation.ai import GenerativeClient
from services.cost_estimation.parsing import parse_refinements
from shared.logging import get_logger
from shared.models import (
    CompanyProfile,
    CostDriver,
    Department,
    DepartmentAllocationDetail,
    DepartmentCostBreakdown,
)


logger = get_logger(__name__)

DEPARTMENT_ORDER: tuple[Department, ...] = (
    Department.LEGAL,
    Department.IT,
    Department.HR,
    Department.FINANCE,
    Department.OPERATIONS,
    Department.COMPLIANCE,
)

RECURRING_COST_PER_FTE = 100_000
ONE_TIME_COST_PER_FTE = 200_000
BUDGET_CODE_SUFFIX = "-COMP-001"


def budget_code(department: Department) -> str:
    """Deterministic budget code, e.g. ``COMP-COMP-001``."""
    return f"{department.value[:4].upper()}{BUDGET_CODE_SUFFIX}"


def fte_impact(one_time_cost: float, recurring_cost_annual: float) -> float:
    """Full-time-equivalent load implied by a department's costs."""
    return round(
        recurring_cost_annual / RECURRING_COST_PER_FTE + one_time_cost / ONE_TIME_COST_PER_FTE,
        2,
    )


REFINEMENT_SYSTEM_PROMPT = (
    "You are a compliance cost allocation expert. Refine cost driver allocation "
    "to departments based on regulation context and company profile. "
    "Output ONLY valid JSON."
)

REFINEMENT_USER_PROMPT = """Regulation: {title}
Company: {industry} industry, {employees} employees

Current allocation:
{allocation}

Based on the regulation requirements and company profile:
1. Are there alternative department allocations?
2. What specific tasks should each department perform?
3. What FTE breakdown makes sense?
4. What are key risks/sequencing concerns?

Respond with JSON:
{{
  "refinements": [
    {{
      "department": "IT|HR|LEGAL|COMPLIANCE|FINANCE|OPERATIONS",
      "allocationDetail": {{
        "oneTimeTasks": ["task 1", "task 2"],
        "recurringTasks": ["task 1"],
        "fteSplit": {{"Senior Engineer": 0.5, "Analyst": 0.3}},
        "riskFactors": ["risk 1"],
        "sequencing": ["step 1", "step 2"]
      }}
    }}
  ]
}}"""


class DepartmentAllocator:
    """Allocates calibrated costs to departments."""

    def __init__(self, client: GenerativeClient | None = None) -> None:
        self._client = client

    @property
    def client(self) -> GenerativeClient:
        if self._client is None:
            self._client = GenerativeClient()
        return self._client

    def allocate(
        self,
        drivers: list[CostDriver],
        profile: CompanyProfile,
        multiplier: float = 1.0,
    ) -> list[DepartmentCostBreakdown]:
        """
        Allocate driver costs to departments.

        Departments without drivers are omitted rather than zero-filled.

        Args:
            drivers: Cost drivers
            profile: Company profile
            multiplier: Calibration multiplier shared with the overall estimate

        Returns:
            One breakdown per department with at least one driver, in fixed order
        """
        breakdown: list[DepartmentCostBreakdown] = []

        for department in DEPARTMENT_ORDER:
            line_items = [d for d in drivers if d.department == department]
            if not line_items:
                continue

            one_time = sum(d.estimated_cost for d in line_items if d.is_one_time) * multiplier
            recurring = sum(d.estimated_cost for d in line_items if not d.is_one_time) * multiplier

            breakdown.append(
                DepartmentCostBreakdown(
                    department=department,
                    one_time_cost=round(one_time),
                    recurring_cost_annual=round(recurring),
                    fte_impact=fte_impact(one_time, recurring),
                    budget_code=budget_code(department),
                    line_items=line_items,
                )
            )

        return breakdown

    async def allocate_with_enrichment(
        self,
        drivers: list[CostDriver],
        profile: CompanyProfile,
        regulation_title: str,
        base_breakdown: list[DepartmentCostBreakdown],
    ) -> list[DepartmentCostBreakdown]:
        """
        Add generative task/role detail to an existing breakdown.

        Only ``allocation_detail`` is added, and only for departments the
        model returned; every numeric field is carried over unchanged. Any
        failure returns ``base_breakdown`` as given.
        """
        allocation = json.dumps(
            [item.model_dump(mode="json", exclude={"line_items", "allocation_detail"}) for item in base_breakdown],
            indent=2,
        )
        prompt = REFINEMENT_USER_PROMPT.format(
            title=regulation_title,
            industry=profile.industry.value,
            employees=profile.employee_count,
            allocation=allocation,
        )

        response = await self.client.request(
            REFINEMENT_SYSTEM_PROMPT,
            prompt,
            temperature=0.3,
            max_tokens=2000,
        )

        def no_refinements(reason: str) -> dict[Department, DepartmentAllocationDetail]:
            logger.warning(
                "ai_allocation_failed",
                title=regulation_title,
                reason=reason,
                fallback="base_allocation",
            )
            return {}

        details = response.and_then(parse_refinements).unwrap_or_else(no_refinements)
        if not details:
            return base_breakdown

        refined = [
            item.model_copy(update={"allocation_detail": details[item.department]})
            if item.department in details
            else item
            for item in base_breakdown
        ]

        logger.info(
            "ai_allocation_refined",
            title=regulation_title,
            departments=len(refined),
            enriched=sum(1 for item in refined if item.allocation_detail is not None),
            drivers=len(drivers),
        )
        return refined
