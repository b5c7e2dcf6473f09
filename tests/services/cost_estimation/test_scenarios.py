"""
Scenario Generator Tests
========================

Version: 0.1.0
"""

import pytest

from services.cost_estimation.scenarios import ScenarioGenerator, recommend_scenario
from shared.models import (
    CompanyProfile,
    Industry,
    RiskLevel,
    ScenarioAnalysis,
    ScenarioKey,
)


@pytest.fixture
def generator() -> ScenarioGenerator:
    return ScenarioGenerator()


def profile(industry: Industry = Industry.TECHNOLOGY, risk: RiskLevel | None = None) -> CompanyProfile:
    return CompanyProfile(industry=industry, employee_count=250, risk_appetite=risk)


class TestGenerateScenarios:
    """Tests for ScenarioGenerator.generate_scenarios."""

    def test_scenario_values(self, generator: ScenarioGenerator) -> None:
        analysis = generator.generate_scenarios(100_000, 50_000, profile())

        assert analysis.minimal.one_time_cost == 70_000
        assert analysis.minimal.recurring_cost_annual == 35_000
        assert analysis.minimal.three_year_total == 175_000
        assert analysis.minimal.risk_level == RiskLevel.MEDIUM

        assert analysis.standard.three_year_total == 250_000
        assert analysis.standard.risk_level == RiskLevel.LOW

        assert analysis.best_in_class.one_time_cost == 140_000
        assert analysis.best_in_class.three_year_total == 350_000
        assert analysis.best_in_class.risk_level == RiskLevel.MINIMAL

    def test_delay_adds_rush_premium_and_penalty(self, generator: ScenarioGenerator) -> None:
        analysis = generator.generate_scenarios(100_000, 50_000, profile())

        delay = analysis.delay_90_days
        assert delay.one_time_cost == 140_000
        assert delay.recurring_cost_annual == 50_000
        assert delay.three_year_total == 290_000
        assert delay.risk_level == RiskLevel.HIGH

    @pytest.mark.parametrize(
        ("one_time", "recurring"),
        [(1_000, 0), (35_000, 80_000), (250_000, 12_500), (0, 40_000)],
    )
    def test_ordering_holds(
        self,
        generator: ScenarioGenerator,
        one_time: float,
        recurring: float,
    ) -> None:
        analysis = generator.generate_scenarios(one_time, recurring, profile())

        assert (
            analysis.minimal.three_year_total
            < analysis.standard.three_year_total
            < analysis.best_in_class.three_year_total
        )
        assert analysis.delay_90_days.one_time_cost > analysis.standard.one_time_cost

    def test_every_scenario_has_assumptions(self, generator: ScenarioGenerator) -> None:
        analysis = generator.generate_scenarios(10_000, 1_000, profile())

        for key in ScenarioKey:
            assert analysis.scenario(key).assumptions

    def test_recommended_scenario_lookup(self, generator: ScenarioGenerator) -> None:
        analysis = generator.generate_scenarios(10_000, 1_000, profile(risk=RiskLevel.HIGH))

        assert analysis.recommended == ScenarioKey.MINIMAL
        assert analysis.recommended_scenario is analysis.minimal

    def test_serialises_with_scenario_keys(self, generator: ScenarioGenerator) -> None:
        analysis = generator.generate_scenarios(10_000, 1_000, profile())

        assert analysis.model_dump(mode="json")["recommended"] == "standard"

    @pytest.mark.parametrize("risk", [None, RiskLevel.HIGH])
    def test_recommended_names_a_dumped_key(
        self,
        generator: ScenarioGenerator,
        risk: RiskLevel | None,
    ) -> None:
        data = generator.generate_scenarios(10_000, 1_000, profile(risk=risk)).model_dump(mode="json")

        assert set(data) == {"minimal", "standard", "bestInClass", "delay90Days", "recommended"}
        assert data["recommended"] in data

    def test_round_trips_through_json(self, generator: ScenarioGenerator) -> None:
        analysis = generator.generate_scenarios(10_000, 1_000, profile())

        assert ScenarioAnalysis.model_validate_json(analysis.model_dump_json()) == analysis


class TestRecommendScenario:
    """Tests for recommend_scenario."""

    @pytest.mark.parametrize(
        ("risk", "expected"),
        [
            (None, ScenarioKey.STANDARD),
            (RiskLevel.MINIMAL, ScenarioKey.STANDARD),
            (RiskLevel.LOW, ScenarioKey.STANDARD),
            (RiskLevel.MEDIUM, ScenarioKey.STANDARD),
            (RiskLevel.HIGH, ScenarioKey.MINIMAL),
        ],
    )
    def test_risk_appetite(self, risk: RiskLevel | None, expected: ScenarioKey) -> None:
        assert recommend_scenario(profile(risk=risk)) == expected

    @pytest.mark.parametrize("industry", [Industry.FINANCE, Industry.HEALTHCARE])
    def test_regulated_industry_overrides_appetite(self, industry: Industry) -> None:
        assert recommend_scenario(profile(industry, RiskLevel.HIGH)) == ScenarioKey.STANDARD
