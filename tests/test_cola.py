"""
tests/test_cola.py - Partial COLA Tests

The COLA is 3% of the first $13,000 only: a $20,000 pension gains $390,
not $600.

Author: Retirement Income Project
License: MIT
"""

import pytest

from pension_projection.cola import (
    apply_cola,
    cola_adjusted_pension,
    compare_cola_policies,
    project_cola,
)
from pension_projection.models import PensionInputError
from pension_projection.plan_config import ColaPolicy


class TestApplyCola:

    def test_capped_base(self):
        step = apply_cola(20000)
        assert step.increase == pytest.approx(390.0)
        assert step.increase != pytest.approx(600.0)
        assert step.adjusted_pension == pytest.approx(20390.0)
        assert step.at_maximum

    def test_below_base(self):
        step = apply_cola(10000)
        assert step.increase == pytest.approx(300.0)
        assert not step.at_maximum

    def test_custom_policy(self):
        step = apply_cola(20000, ColaPolicy(rate=0.02, base_amount=15000))
        assert step.increase == pytest.approx(300.0)

    def test_negative_pension(self):
        with pytest.raises(PensionInputError):
            apply_cola(-100)


class TestCompounding:

    def test_compounds_below_base(self):
        assert cola_adjusted_pension(10000, 2) == pytest.approx(10300 + 309)

    def test_flat_increase_above_base(self):
        schedule = project_cola(20000, 3)
        assert [y.increase for y in schedule] == pytest.approx([390.0] * 3)
        assert schedule[-1].ending_pension == pytest.approx(21170.0)
        assert schedule[-1].cumulative_increase == pytest.approx(1170.0)

    def test_zero_years(self):
        assert cola_adjusted_pension(20000, 0) == 20000
        assert project_cola(20000, 0) == []

    def test_negative_years(self):
        with pytest.raises(PensionInputError):
            project_cola(20000, -1)


class TestPolicyComparison:

    def test_alternatives_pay_more(self):
        totals = compare_cola_policies(30000, years=10)
        assert totals["current"] == pytest.approx(3900.0)
        assert totals["increased_base"] > totals["current"]
        assert totals["increased_rate"] > totals["current"]

    def test_empty_scenarios(self):
        assert compare_cola_policies(20000, scenarios={}) == {}

    def test_custom_scenarios(self):
        totals = compare_cola_policies(20000, years=2,
                                       scenarios={"flat": ColaPolicy(rate=0.0)})
        assert totals == {"flat": 0.0}
