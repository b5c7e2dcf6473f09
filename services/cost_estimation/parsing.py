"""
Generative Response Parsing
===========================

Strict parse-then-validate for model output. Every parser returns a
tagged result instead of raising:

    Ok(value)    the payload matched the documented schema
    Err(reason)  anything else (bad JSON, wrong shape, out-of-range values)

Callers pick the fallback explicitly with ``unwrap_or_else``.

Version: 0.1.0
"""

import json
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeAlias, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from shared.llm import strip_code_fences
from shared.models import (
    CostCategory,
    CostDriver,
    Department,
    DepartmentAllocationDetail,
    EvidenceSource,
    EvidenceType,
)


T = TypeVar("T")
U = TypeVar("U")

AI_DRIVER_PREFIX = "driver-ai-"


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful parse."""

    value: T

    @property
    def is_ok(self) -> bool:
        return True

    def and_then(self, fn: "Callable[[T], Result[U]]") -> "Result[U]":
        return fn(self.value)

    def unwrap_or_else(self, fallback: Callable[[str], T]) -> T:
        return self.value


@dataclass(frozen=True)
class Err:
    """Failed parse or failed request, with a human-readable reason."""

    reason: str

    @property
    def is_ok(self) -> bool:
        return False

    def and_then(self, fn: Callable[[Any], Any]) -> "Err":
        return self

    def unwrap_or_else(self, fallback: Callable[[str], T]) -> T:
        return fallback(self.reason)


Result: TypeAlias = Ok[T] | Err


# =============================================================================
# Payload Schemas
# =============================================================================


class _Payload(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class _DriverPayload(_Payload):
    category: CostCategory
    description: str = Field(..., min_length=1)
    is_one_time: bool = Field(..., alias="isOneTime")
    estimated_cost: float = Field(..., alias="estimatedCost", ge=0)
    confidence: float = Field(..., ge=0, le=1)
    department: Department


class _DriversEnvelope(_Payload):
    drivers: list[_DriverPayload]


class _AllocationDetailPayload(_Payload):
    one_time_tasks: list[str] = Field(default_factory=list, alias="oneTimeTasks")
    recurring_tasks: list[str] = Field(default_factory=list, alias="recurringTasks")
    fte_split: dict[str, float] = Field(default_factory=dict, alias="fteSplit")
    risk_factors: list[str] = Field(default_factory=list, alias="riskFactors")
    sequencing: list[str] = Field(default_factory=list)


class _RefinementPayload(_Payload):
    department: Department
    allocation_detail: _AllocationDetailPayload | None = Field(
        default=None,
        alias="allocationDetail",
    )


class _RefinementsEnvelope(_Payload):
    refinements: list[_RefinementPayload]


# =============================================================================
# Parsers
# =============================================================================


def parse_json_payload(text: str) -> Result[Any]:
    """Decode a (possibly code-fenced) JSON response."""
    body = strip_code_fences(text)
    if not body:
        return Err("empty response")
    try:
        return Ok(json.loads(body))
    except json.JSONDecodeError as e:
        return Err(f"invalid JSON: {e.msg} at position {e.pos}")


def _validation_reason(schema: str, error: ValidationError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"])
    return f"{schema} schema violation ({error.error_count()} errors), first at {location}: {first['msg']}"


def validate_drivers(payload: Any) -> Result[list[CostDriver]]:
    """Validate a decoded ``{"drivers": [...]}`` payload."""
    try:
        envelope = _DriversEnvelope.model_validate(payload)
    except ValidationError as e:
        return Err(_validation_reason("drivers", e))

    if not envelope.drivers:
        return Err("no drivers returned")

    drivers = [
        CostDriver(
            id=f"{AI_DRIVER_PREFIX}{index}",
            category=item.category,
            description=item.description,
            is_one_time=item.is_one_time,
            estimated_cost=item.estimated_cost,
            confidence=item.confidence,
            department=item.department,
            evidence=[
                EvidenceSource(
                    type=EvidenceType.ASSUMPTION,
                    reference="Generative model extraction",
                    confidence=item.confidence,
                    estimated_cost=item.estimated_cost,
                )
            ],
        )
        for index, item in enumerate(envelope.drivers, start=1)
    ]
    return Ok(drivers)


def validate_refinements(payload: Any) -> Result[dict[Department, DepartmentAllocationDetail]]:
    """
    Validate a decoded ``{"refinements": [...]}`` payload.

    Refinements without an ``allocationDetail`` are dropped; when a
    department appears twice the last entry wins.
    """
    try:
        envelope = _RefinementsEnvelope.model_validate(payload)
    except ValidationError as e:
        return Err(_validation_reason("refinements", e))

    details: dict[Department, DepartmentAllocationDetail] = {}
    for refinement in envelope.refinements:
        if refinement.allocation_detail is None:
            continue
        details[refinement.department] = DepartmentAllocationDetail(
            **refinement.allocation_detail.model_dump()
        )
    return Ok(details)


def parse_drivers(text: str) -> Result[list[CostDriver]]:
    """Parse a raw driver-extraction response."""
    return parse_json_payload(text).and_then(validate_drivers)


def parse_refinements(text: str) -> Result[dict[Department, DepartmentAllocationDetail]]:
    """Parse a raw department-refinement response."""
    return parse_json_payload(text).and_then(validate_refinements)
