"""
tests/test_projection.py - Multi-Year Projection Tests

Reference scenario: Group 1, 30 years, $80,000 average salary, retire at
65, Social Security of $2,000/mo claimed at 67 (FRA 67).

1. Social Security is 0 at 65-66 and $2,000 from 67
2. The pension changes only by the COLA ($390/yr above $13,000)
3. Totals and the cumulative total add up
4. Undefined replacement ratio and row-level error markers

Author: Retirement Income Project
License: MIT
"""

import math

import pytest
from pydantic import ValidationError

from pension_projection.models import MemberProfile
from pension_projection.plan_config import (
    MembershipGroup,
    RetirementOption,
    ServiceEra,
)
from pension_projection.projection import (
    ProjectionParameters,
    generate_projection,
    projection_start_age,
    replacement_ratio,
    summarize_projection,
)


def make_profile(**overrides) -> MemberProfile:
    data = dict(
        birth_year=1960,
        current_age=65,
        current_salary=80000,
        average_salary=80000,
        years_of_service=30,
        group=MembershipGroup.GROUP_1,
        service_era=ServiceEra.BEFORE_2012,
        pension_start_age=65,
        ss_full_benefit=2000,
        ss_claiming_age=67,
    )
    data.update(overrides)
    return MemberProfile(**data)


def run(profile=None, **params):
    return generate_projection(ProjectionParameters(profile=profile or make_profile(),
                                                    **params))


def row_at(result, age):
    return next(r for r in result.rows if r.age == age)


class TestReferenceScenario:
    """Retire at 65, claim Social Security at 67."""

    def test_row_span(self):
        result = run()
        assert [r.age for r in result.rows] == list(range(65, 81))
        assert all(r.ok for r in result.rows)

    def test_social_security_starts_at_claiming_age(self):
        result = run()
        assert row_at(result, 65).social_security_monthly == 0.0
        assert row_at(result, 66).social_security_monthly == 0.0
        assert row_at(result, 67).social_security_monthly == pytest.approx(2000.0)
        assert row_at(result, 80).social_security_monthly == pytest.approx(2000.0)

    def test_pension_changes_only_by_cola(self):
        result = run()
        assert row_at(result, 65).pension_monthly == pytest.approx(5000.0)
        assert row_at(result, 65).cola_increase_annual == 0.0
        for prev, curr in zip(result.rows, result.rows[1:]):
            assert curr.cola_increase_annual == pytest.approx(390.0)
            assert curr.pension_annual - prev.pension_annual == pytest.approx(390.0)
        assert row_at(result, 67).pension_annual == pytest.approx(60780.0)

    def test_labels(self):
        result = run()
        assert row_at(result, 65).age_label == "Age 65 (retirement)"
        assert row_at(result, 66).age_label == "Age 66"
        assert row_at(result, 67).age_label == "Age 67 (Social Security begins)"

    def test_totals(self):
        result = run()
        running = 0.0
        for row in result.rows:
            expected = row.pension_monthly + row.social_security_monthly + row.other_monthly
            assert row.total_monthly == pytest.approx(expected)
            assert row.total_annual == pytest.approx(expected * 12)
            running += row.total_annual
            assert row.cumulative_total == pytest.approx(running)

    def test_service_echoed(self):
        result = run()
        assert all(r.years_of_service == pytest.approx(30.0) for r in result.rows)

    def test_other_income(self):
        result = run(make_profile(other_monthly_income=500))
        row = row_at(result, 67)
        assert row.other_monthly == 500
        assert row.total_monthly == pytest.approx(60780 / 12 + 2000 + 500)

    def test_without_cola(self):
        result = run(include_cola=False)
        assert all(r.pension_monthly == pytest.approx(5000.0) for r in result.rows)
        assert all(r.cola_increase_annual == 0.0 for r in result.rows)


class TestStartAge:

    def test_raised_to_group_minimum(self):
        profile = make_profile(current_age=50, years_of_service=15,
                               service_era=ServiceEra.AFTER_2012,
                               pension_start_age=58)
        assert projection_start_age(profile) == 60
        result = run(profile)
        assert result.rows[0].age == 60
        assert result.pension.eligible

    def test_group_3_any_age(self):
        profile = make_profile(birth_year=1980, current_age=45, years_of_service=22,
                               group=MembershipGroup.GROUP_3, pension_start_age=45,
                               average_salary=90000, ss_full_benefit=0)
        result = run(profile)
        assert result.start_age == 45
        assert result.pension.multiplier == pytest.approx(0.025)
        assert result.rows[0].pension_annual == pytest.approx(90000 * 22 * 0.025)

    def test_horizon_before_start(self):
        result = run(horizon_age=60)
        assert result.rows == []
        assert not result.replacement_ratio.defined


class TestSalaryBasis:

    def test_projected_salary(self):
        profile = make_profile(current_age=55, years_of_service=20,
                               current_salary=70000, average_salary=None,
                               salary_growth_rate=0.03)
        result = run(profile, use_projected_salary=True)
        assert result.salary_basis == pytest.approx(70000 * 1.03 ** 10)

    def test_survivor_option(self):
        profile = make_profile(option=RetirementOption.C, beneficiary_age=65)
        result = run(profile)
        assert result.pension.option_adjusted_monthly == pytest.approx(5000 * 0.89)
        assert result.pension.survivor_monthly == pytest.approx(5000 * 0.89 * 2 / 3)
        assert result.rows[0].pension_monthly == pytest.approx(5000 * 0.89)


class TestReplacementRatio:

    def test_default_reference_is_first_social_security_year(self):
        ratio = run().replacement_ratio
        assert ratio.defined
        assert ratio.reference_age == 67
        assert ratio.value == pytest.approx((60780 + 24000) / 80000)

    def test_explicit_reference_age(self):
        ratio = run(replacement_reference_age=65).replacement_ratio
        assert ratio.value == pytest.approx(60000 / 80000)

    def test_zero_salary_undefined(self):
        profile = make_profile(current_salary=0, average_salary=0)
        result = run(profile)
        ratio = result.replacement_ratio
        assert ratio.value is None
        assert not ratio.defined
        assert "undefined ratio" in ratio.reason

    def test_direct_zero_salary(self):
        ratio = replacement_ratio(run().rows, 0, 67)
        assert ratio.value is None
        assert ratio.reason.startswith("undefined ratio")

    def test_explicit_zero_average_salary(self):
        """An average salary of 0 is used as given, not replaced by the current salary."""
        profile = make_profile(current_salary=80000, average_salary=0)
        result = run(profile)
        assert result.salary_basis == 0
        assert result.pension.option_adjusted_annual == 0.0
        assert row_at(result, 65).pension_monthly == 0.0
        assert not result.replacement_ratio.defined
        assert "undefined ratio" in result.replacement_ratio.reason

    def test_fractional_start_age(self):
        """A whole reference age matches the row for that year of age."""
        profile = make_profile(current_age=62.5, pension_start_age=62.5)
        result = run(profile)
        assert result.rows[0].age == 62.5
        ratio = replacement_ratio(result.rows, 80000, 64)
        assert ratio.defined
        assert ratio.total_annual == pytest.approx(row_at(result, 64.5).total_annual)
        assert result.replacement_ratio.defined
        assert result.replacement_ratio.reference_age == 67.5

    def test_age_not_projected(self):
        ratio = replacement_ratio(run().rows, 80000, 95)
        assert not ratio.defined


class TestRowErrors:
    """Non-finite figures produce error rows, never a plausible $0."""

    def test_non_finite_income(self):
        result = run(make_profile(other_monthly_income=math.inf))
        assert result.rows
        for row in result.rows:
            assert not row.ok
            assert "other_monthly" in row.error
            assert row.pension_monthly is None
            assert row.total_monthly is None
            assert row.cumulative_total is None

    def test_error_row_ratio_undefined(self):
        result = run(make_profile(other_monthly_income=math.inf))
        assert not result.replacement_ratio.defined
        assert summarize_projection(result.rows) is None


class TestSummary:

    def test_reference_summary(self):
        summary = summarize_projection(run().rows)
        assert summary.start_age == 65
        assert summary.end_age == 80
        assert summary.initial_pension_monthly == pytest.approx(5000.0)
        assert summary.total_cola_gain_annual == pytest.approx(15 * 390.0)
        assert summary.final_pension_monthly == pytest.approx((60000 + 15 * 390) / 12)
        assert summary.years_with_social_security == 14
        assert summary.peak_total_monthly == pytest.approx(
            summary.final_pension_monthly + 2000)

    def test_empty(self):
        assert summarize_projection([]) is None


class TestParameters:

    def test_horizon_must_be_positive(self):
        with pytest.raises(ValidationError):
            ProjectionParameters(profile=make_profile(), horizon_age=0)

    def test_claiming_age_validated_on_profile(self):
        with pytest.raises(ValidationError):
            make_profile(ss_claiming_age=61)
