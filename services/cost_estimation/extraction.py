"""
Cost Driver Extraction
======================

Turns regulation text into a list of discrete, typed cost drivers.

Extraction Methods:
1. Deterministic: ordered keyword rules with fixed benchmark costs
2. Generative (opt-in): structured LLM extraction, falling back to the
   deterministic rules on any request or parse failure

Results are memoized per text fingerprint.

Version: 0.1.0
"""

from dataclasses import dataclass

from pydantic import TypeAdapter

from services.cost_estimation.ai import GenerativeClient
from services.cost_estimation.cache import EstimationCache, build_cache, make_cache_key
from services.cost_estimation.parsing import AI_DRIVER_PREFIX, parse_drivers
from shared.config import settings
from shared.logging import get_logger
from shared.models import (
    CostCategory,
    CostDriver,
    Department,
    EstimationMethod,
    EvidenceSource,
    EvidenceType,
)


logger = get_logger(__name__)

DETERMINISTIC_DRIVER_PREFIX = "driver-det-"
DRIVERS_CACHE_SUFFIX = "drivers"

DRIVER_LIST_ADAPTER: TypeAdapter[list[CostDriver]] = TypeAdapter(list[CostDriver])


# =============================================================================
# Deterministic Rules
# =============================================================================


@dataclass(frozen=True)
class DriverRule:
    """One keyword group and the driver it contributes."""

    keywords: tuple[str, ...]
    category: CostCategory
    description: str
    is_one_time: bool
    estimated_cost: float
    confidence: float
    department: Department
    evidence_type: EvidenceType
    evidence_reference: str
    evidence_cost: float | None = None

    def matches(self, lowered_text: str) -> bool:
        return any(keyword in lowered_text for keyword in self.keywords)

    def build(self, driver_id: str) -> CostDriver:
        return CostDriver(
            id=driver_id,
            category=self.category,
            description=self.description,
            is_one_time=self.is_one_time,
            estimated_cost=self.estimated_cost,
            confidence=self.confidence,
            department=self.department,
            evidence=[
                EvidenceSource(
                    type=self.evidence_type,
                    reference=self.evidence_reference,
                    confidence=self.confidence,
                    estimated_cost=self.evidence_cost,
                )
            ],
        )


# Order is significant: it fixes the driver-det-N numbering.
DRIVER_RULES: tuple[DriverRule, ...] = (
    DriverRule(
        keywords=("portal", "system", "dsar", "setup"),
        category=CostCategory.SYSTEM_CHANGES,
        description="System changes and data request portal",
        is_one_time=True,
        estimated_cost=30000,
        confidence=0.7,
        department=Department.IT,
        evidence_type=EvidenceType.INDUSTRY_BENCHMARK,
        evidence_reference="Privacy engineering benchmarks, 2024",
        evidence_cost=25000,
    ),
    DriverRule(
        keywords=("officer", "dpo", "privacy officer"),
        category=CostCategory.PERSONNEL,
        description="Privacy officer / compliance personnel",
        is_one_time=False,
        estimated_cost=60000,
        confidence=0.8,
        department=Department.COMPLIANCE,
        evidence_type=EvidenceType.INDUSTRY_BENCHMARK,
        evidence_reference="Compliance officer salary benchmark",
        evidence_cost=60000,
    ),
    DriverRule(
        keywords=("audit", "assessment"),
        category=CostCategory.AUDIT,
        description="Annual compliance audits and assessments",
        is_one_time=False,
        estimated_cost=12000,
        confidence=0.75,
        department=Department.COMPLIANCE,
        evidence_type=EvidenceType.INDUSTRY_BENCHMARK,
        evidence_reference="Audit cost benchmark report",
        evidence_cost=12000,
    ),
    DriverRule(
        keywords=("training", "education", "awareness"),
        category=CostCategory.TRAINING,
        description="Employee compliance training program",
        is_one_time=False,
        estimated_cost=8000,
        confidence=0.8,
        department=Department.HR,
        evidence_type=EvidenceType.INDUSTRY_BENCHMARK,
        evidence_reference="Annual compliance training costs",
        evidence_cost=7500,
    ),
    DriverRule(
        keywords=("legal", "counsel", "policy review"),
        category=CostCategory.LEGAL_REVIEW,
        description="Legal review and documentation updates",
        is_one_time=True,
        estimated_cost=5000,
        confidence=0.85,
        department=Department.LEGAL,
        evidence_type=EvidenceType.VENDOR_QUOTE,
        evidence_reference="Legal review package estimate",
        evidence_cost=5000,
    ),
    DriverRule(
        keywords=("fee", "penalty", "annual"),
        category=CostCategory.OTHER,
        description="Annual reporting and compliance fees",
        is_one_time=False,
        estimated_cost=5000,
        confidence=0.75,
        department=Department.COMPLIANCE,
        evidence_type=EvidenceType.ASSUMPTION,
        evidence_reference="Estimated annual fees based on regulation text patterns",
    ),
)


def extract_deterministic(
    regulation_text: str,
    rules: tuple[DriverRule, ...] = DRIVER_RULES,
) -> list[CostDriver]:
    """
    Apply the keyword rules to a regulation text.

    Each matching rule contributes exactly one driver; blank text yields
    an empty list.
    """
    text = regulation_text.lower()
    if not text.strip():
        return []

    drivers: list[CostDriver] = []
    for rule in rules:
        if rule.matches(text):
            drivers.append(rule.build(f"{DETERMINISTIC_DRIVER_PREFIX}{len(drivers) + 1}"))

    logger.debug("cost_drivers_extracted", method="deterministic", count=len(drivers))
    return drivers


def estimation_method_for(drivers: list[CostDriver]) -> EstimationMethod:
    """AI_CALIBRATED when every driver came from the generative path."""
    if drivers and all(d.id.startswith(AI_DRIVER_PREFIX) for d in drivers):
        return EstimationMethod.AI_CALIBRATED
    return EstimationMethod.DETERMINISTIC


# =============================================================================
# Extractor
# =============================================================================


EXTRACTION_SYSTEM_PROMPT = (
    "You are a regulatory compliance cost analyst. Extract cost drivers from "
    "regulations and output ONLY valid JSON."
)

EXTRACTION_USER_PROMPT = """Analyze this regulation and identify all cost drivers (implementation requirements that have financial impact).

Regulation: {title}
Text: {excerpt}

For each cost driver, identify:
- category (LEGAL_REVIEW, SYSTEM_CHANGES, TRAINING, CONSULTING, AUDIT, PERSONNEL, INFRASTRUCTURE, OTHER)
- description (brief, specific)
- isOneTime (true/false)
- estimatedCost (USD, reasonable estimate)
- confidence (0-1)
- department (LEGAL, IT, HR, FINANCE, OPERATIONS, COMPLIANCE)

Respond ONLY with valid JSON:
{{
  "drivers": [
    {{
      "category": "SYSTEM_CHANGES",
      "description": "Data subject access request portal",
      "isOneTime": true,
      "estimatedCost": 35000,
      "confidence": 0.75,
      "department": "IT"
    }}
  ]
}}"""


class CostDriverExtractor:
    """
    Extracts cost drivers from regulation text.

    The deterministic rule engine is always available; the generative path
    is used only when enabled and silently falls back to it.
    """

    def __init__(
        self,
        cache: EstimationCache[list[CostDriver]] | None = None,
        client: GenerativeClient | None = None,
        ai_enabled: bool | None = None,
        excerpt_chars: int | None = None,
    ) -> None:
        """
        Args:
            cache: Driver cache (default from settings)
            client: Generative client (created lazily when AI is enabled)
            ai_enabled: Override settings.cost_estimation.ai_enabled
            excerpt_chars: Max characters of text sent to the model
        """
        config = settings.cost_estimation
        self.cache = cache if cache is not None else build_cache(DRIVER_LIST_ADAPTER, "drivers")
        self.ai_enabled = config.ai_enabled if ai_enabled is None else ai_enabled
        self.excerpt_chars = excerpt_chars or config.excerpt_chars
        self._client = client

    @property
    def client(self) -> GenerativeClient:
        if self._client is None:
            self._client = GenerativeClient()
        return self._client

    async def extract(self, regulation_text: str, regulation_title: str) -> list[CostDriver]:
        """
        Extract cost drivers, using the cache when possible.

        Args:
            regulation_text: Full regulation text
            regulation_title: Title, used in prompts and logs

        Returns:
            List of cost drivers (possibly empty); never raises on model failure
        """
        cache_key = make_cache_key(regulation_text, DRIVERS_CACHE_SUFFIX)
        cached = await self.cache.get(cache_key)
        if cached is not None:
            logger.info("cost_drivers_cache_hit", title=regulation_title, count=len(cached))
            return cached

        logger.info("cost_drivers_cache_miss", title=regulation_title)

        if self.ai_enabled and regulation_text.strip():
            drivers = await self._extract_with_ai(regulation_text, regulation_title)
        else:
            drivers = extract_deterministic(regulation_text)

        await self.cache.set(cache_key, drivers)
        return drivers

    def build_excerpt(self, regulation_text: str) -> str:
        """Bound the text sent to the model."""
        if len(regulation_text) > self.excerpt_chars:
            return regulation_text[: self.excerpt_chars] + "..."
        return regulation_text

    async def _extract_with_ai(self, regulation_text: str, regulation_title: str) -> list[CostDriver]:
        prompt = EXTRACTION_USER_PROMPT.format(
            title=regulation_title,
            excerpt=self.build_excerpt(regulation_text),
        )
        response = await self.client.request(
            EXTRACTION_SYSTEM_PROMPT,
            prompt,
            temperature=0.2,
            max_tokens=1500,
        )

        def fallback(reason: str) -> list[CostDriver]:
            logger.warning(
                "ai_extraction_failed",
                title=regulation_title,
                reason=reason,
                fallback="deterministic",
            )
            return extract_deterministic(regulation_text)

        drivers = response.and_then(parse_drivers).unwrap_or_else(fallback)
        logger.info(
            "cost_drivers_extracted",
            title=regulation_title,
            method=estimation_method_for(drivers).value,
            count=len(drivers),
        )
        return drivers
