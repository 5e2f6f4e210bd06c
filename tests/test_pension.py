"""
tests/test_pension.py - Pension Formula Tests

1. The $60,000 round trip: $80,000 × 30 years × 2.5% = $60,000 ($5,000/mo)
2. The 80% cap invariant over a grid of ages, service and groups
3. Ineligibility yields a zero result with a message
4. Current vs projected salary estimates and the retirement age table

Author: Retirement Income Project
License: MIT
"""

import pytest

from pension_projection.models import MemberProfile, PensionInputError
from pension_projection.pension import (
    apply_maximum_cap,
    calculate_annual_pension,
    calculate_pension,
    estimate_pension_dual,
    pension_for_profile,
    retirement_age_table,
    service_at_age,
)
from pension_projection.plan_config import (
    MembershipGroup,
    RetirementOption,
    ServiceEra,
    create_plan_rules,
)

G1 = MembershipGroup.GROUP_1
PRE, POST = ServiceEra.BEFORE_2012, ServiceEra.AFTER_2012


def make_profile(**overrides) -> MemberProfile:
    data = dict(
        birth_year=1970,
        current_age=55,
        current_salary=70000,
        years_of_service=20,
        group=MembershipGroup.GROUP_1,
        service_era=ServiceEra.BEFORE_2012,
        pension_start_age=65,
    )
    data.update(overrides)
    return MemberProfile(**data)


class TestFormulaRoundTrip:
    """$80,000 average salary, 30 years, 2.5% multiplier."""

    def test_annual_formula(self):
        annual = calculate_annual_pension(80000, 30, 0.025)
        assert annual == pytest.approx(60000.0)
        assert annual / 12 == pytest.approx(5000.0)

    def test_full_calculation_at_65(self):
        result = calculate_pension(80000, 30, 65, G1, PRE)
        assert result.multiplier == pytest.approx(0.025)
        assert result.base_pension_annual == pytest.approx(60000.0)
        assert result.capped_pension_annual == pytest.approx(60000.0)
        assert not result.capped
        assert result.option_adjusted_monthly == pytest.approx(5000.0)
        assert result.survivor_monthly is None
        assert result.eligible

    def test_group_1_at_60_uses_chart_factor(self):
        """The chart pays 2.0% at 60, so the same member gets $48,000, not $60,000."""
        result = calculate_pension(80000, 30, 60, G1, PRE)
        assert result.multiplier == pytest.approx(0.020)
        assert result.base_pension_annual == pytest.approx(48000.0)
        assert result.option_adjusted_monthly == pytest.approx(4000.0)

    def test_benefit_percentage(self):
        result = calculate_pension(80000, 30, 65, G1, PRE)
        assert result.total_benefit_percentage == pytest.approx(0.75)


class TestMaximumCap:
    """capped = min(base, 0.80 × salary) for every input."""

    def test_cap_applied(self):
        result = calculate_pension(80000, 40, 65, G1, PRE)
        assert result.base_pension_annual == pytest.approx(80000.0)
        assert result.capped_pension_annual == pytest.approx(64000.0)
        assert result.capped

    def test_cap_function(self):
        assert apply_maximum_cap(90000, 100000) == pytest.approx(80000.0)
        assert apply_maximum_cap(50000, 100000) == pytest.approx(50000.0)

    def test_cap_invariant_grid(self):
        salary = 95000.0
        for group in MembershipGroup:
            for era in ServiceEra:
                for age in range(45, 76, 3):
                    for yos in (0, 10, 20, 32, 45):
                        result = calculate_pension(salary, yos, age, group, era)
                        assert result.capped_pension_annual <= 0.80 * salary + 1e-9
                        assert result.capped_pension_annual == pytest.approx(
                            min(result.base_pension_annual, 0.80 * salary))

    def test_configured_cap(self):
        rules = create_plan_rules({"max_pension_fraction": 0.75})
        result = calculate_pension(80000, 40, 65, G1, PRE, rules=rules)
        assert result.capped_pension_annual == pytest.approx(60000.0)


class TestIneligibility:

    def test_zero_result_not_exception(self):
        result = calculate_pension(80000, 15, 58, G1, POST)
        assert not result.eligible
        assert result.multiplier == 0.0
        assert result.option_adjusted_annual == 0.0
        assert result.eligibility_message

    def test_eligible_but_below_chart(self):
        """Pre-2012 with 20 years at 50: eligible by service, no Group 1 factor."""
        result = calculate_pension(80000, 20, 50, G1, PRE)
        assert not result.eligible
        assert "No benefit factor" in result.eligibility_message


class TestValidation:

    def test_negative_salary(self):
        with pytest.raises(PensionInputError) as exc:
            calculate_annual_pension(-1, 30, 0.025)
        assert exc.value.field == "average_salary"

    def test_input_error_is_value_error(self):
        with pytest.raises(ValueError):
            calculate_pension(80000, -3, 65, G1, PRE)


class TestProfileCalculations:

    def test_service_accrues_to_start_age(self):
        profile = make_profile()
        assert service_at_age(profile, 65) == pytest.approx(30.0)
        assert service_at_age(profile, 50) == pytest.approx(20.0)

    def test_pension_for_profile_uses_average_salary(self):
        profile = make_profile(average_salary=80000)
        result = pension_for_profile(profile)
        assert result.average_salary == pytest.approx(80000.0)
        assert result.base_pension_annual == pytest.approx(60000.0)

    def test_dual_estimate(self):
        profile = make_profile(salary_growth_rate=0.025)
        dual = estimate_pension_dual(profile)
        expected_salary = 70000 * 1.025 ** 10
        assert dual.projected_salary == pytest.approx(expected_salary)
        assert dual.current.base_pension_annual == pytest.approx(52500.0)
        assert dual.projected.base_pension_annual == pytest.approx(
            expected_salary * 30 * 0.025)
        assert dual.projected.option_adjusted_annual > dual.current.option_adjusted_annual

    def test_profile_option_flows_through(self):
        profile = make_profile(average_salary=80000, option=RetirementOption.C,
                               beneficiary_age=65)
        result = pension_for_profile(profile)
        assert result.option_factor == pytest.approx(0.89)
        assert result.survivor_annual == pytest.approx(60000 * 0.89 * 2 / 3)


class TestRetirementAgeTable:

    def test_stops_at_cap(self):
        rows = retirement_age_table(G1, 65, 30, 80000, PRE)
        assert [r.retirement_age for r in rows] == [65, 66, 67]
        assert rows[-1].capped_pension_annual == pytest.approx(64000.0)

    def test_stops_at_group_max_age(self):
        rows = retirement_age_table(G1, 60, 20, 80000, PRE)
        assert rows[0].retirement_age == 60
        assert rows[-1].retirement_age == 70
        assert all(r.eligible for r in rows)

    def test_skips_ineligible_ages(self):
        rows = retirement_age_table(G1, 57, 15, 80000, POST)
        assert rows[0].retirement_age == 60
        amounts = [r.capped_pension_annual for r in rows]
        assert amounts == sorted(amounts)
