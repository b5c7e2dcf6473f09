"""
Implementation Scenarios
========================

Derives four implementation strategies from a calibrated baseline:

    minimal        x0.7   MEDIUM risk
    standard       x1.0   LOW risk
    bestInClass    x1.4   MINIMAL risk
    delay90Days    one-time x1.25 + $15,000 penalty, recurring unchanged, HIGH risk

Version: 0.1.0
"""

from dataclasses import dataclass

from shared.logging import get_logger
from shared.models import (
    CompanyProfile,
    CostScenario,
    Industry,
    RiskLevel,
    ScenarioAnalysis,
    ScenarioKey,
)


logger = get_logger(__name__)

THREE_YEARS = 3
REGULATED_INDUSTRIES = frozenset({Industry.FINANCE, Industry.HEALTHCARE})


@dataclass(frozen=True)
class ScenarioTemplate:
    """How a scenario transforms the baseline."""

    name: str
    description: str
    one_time_multiplier: float
    recurring_multiplier: float
    risk_level: RiskLevel
    assumptions: tuple[str, ...]
    one_time_penalty: float = 0.0

    def apply(self, one_time_cost: float, recurring_cost_annual: float) -> CostScenario:
        one_time = one_time_cost * self.one_time_multiplier + self.one_time_penalty
        recurring = recurring_cost_annual * self.recurring_multiplier
        return CostScenario(
            name=self.name,
            description=self.description,
            one_time_cost=round(one_time),
            recurring_cost_annual=round(recurring),
            three_year_total=round(one_time + recurring * THREE_YEARS),
            risk_level=self.risk_level,
            assumptions=list(self.assumptions),
        )


MINIMAL = ScenarioTemplate(
    name="Minimal Compliance",
    description="Basic compliance with manual processes",
    one_time_multiplier=0.7,
    recurring_multiplier=0.7,
    risk_level=RiskLevel.MEDIUM,
    assumptions=(
        "Manual processes where possible",
        "Reactive compliance approach",
        "Minimal tooling investment",
    ),
)

STANDARD = ScenarioTemplate(
    name="Standard Compliance",
    description="Recommended baseline compliance approach",
    one_time_multiplier=1.0,
    recurring_multiplier=1.0,
    risk_level=RiskLevel.LOW,
    assumptions=(
        "Industry-standard tools and processes",
        "Proactive compliance monitoring",
        "Regular audits and assessments",
    ),
)

BEST_IN_CLASS = ScenarioTemplate(
    name="Best-in-Class",
    description="Industry-leading compliance program",
    one_time_multiplier=1.4,
    recurring_multiplier=1.4,
    risk_level=RiskLevel.MINIMAL,
    assumptions=(
        "Premium compliance platforms",
        "Dedicated compliance team",
        "Continuous monitoring and improvement",
        "Third-party validation",
    ),
)

DELAY_90_DAYS = ScenarioTemplate(
    name="90-Day Delay",
    description="Delayed implementation with potential penalties",
    one_time_multiplier=1.25,
    recurring_multiplier=1.0,
    one_time_penalty=15_000,
    risk_level=RiskLevel.HIGH,
    assumptions=(
        "Rush implementation fees (+25%)",
        "Potential regulatory penalties (~$15K)",
        "Higher risk of violations",
    ),
)


def recommend_scenario(profile: CompanyProfile) -> ScenarioKey:
    """
    Pick the recommended scenario for a company.

    High risk appetite leans minimal, but finance and healthcare always
    get the standard program regardless of stated appetite.
    """
    recommended = ScenarioKey.STANDARD
    if profile.risk_appetite in (RiskLevel.LOW, RiskLevel.MINIMAL):
        recommended = ScenarioKey.STANDARD
    elif profile.risk_appetite == RiskLevel.HIGH:
        recommended = ScenarioKey.MINIMAL

    # Industry overrides risk appetite
    if profile.industry in REGULATED_INDUSTRIES:
        recommended = ScenarioKey.STANDARD

    return recommended


class ScenarioGenerator:
    """Builds the four-scenario analysis for a baseline cost."""

    def generate_scenarios(
        self,
        one_time_cost: float,
        recurring_cost_annual: float,
        profile: CompanyProfile,
    ) -> ScenarioAnalysis:
        """
        Generate scenarios from a baseline.

        Args:
            one_time_cost: Baseline one-time cost (usually the band midpoint)
            recurring_cost_annual: Baseline annual recurring cost
            profile: Company profile, drives the recommendation

        Returns:
            ScenarioAnalysis with all four scenarios and a recommendation
        """
        analysis = ScenarioAnalysis(
            minimal=MINIMAL.apply(one_time_cost, recurring_cost_annual),
            standard=STANDARD.apply(one_time_cost, recurring_cost_annual),
            best_in_class=BEST_IN_CLASS.apply(one_time_cost, recurring_cost_annual),
            delay_90_days=DELAY_90_DAYS.apply(one_time_cost, recurring_cost_annual),
            recommended=recommend_scenario(profile),
        )

        logger.debug(
            "scenarios_generated",
            recommended=analysis.recommended.value,
            standard_three_year=analysis.standard.three_year_total,
        )
        return analysis
