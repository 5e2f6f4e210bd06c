"""
tests/test_social_security.py - Social Security Claiming-Age Tests

1. Identity at full retirement age
2. 62 < FRA < 70 ordering (70% / 100% / 124% at FRA 67)
3. Full retirement age by birth year
4. Claiming-age validation

Author: Retirement Income Project
License: MIT
"""

import numpy as np
import pytest

from pension_projection.models import PensionInputError
from pension_projection.social_security import (
    adjust_for_claiming_age,
    claiming_age_factor,
    full_retirement_age,
)


class TestClaimingAdjustment:

    def test_identity_at_fra(self):
        assert adjust_for_claiming_age(2000, 67) == pytest.approx(2000.0)
        assert adjust_for_claiming_age(2000, 66, full_retirement_age=66) == pytest.approx(2000.0)

    def test_age_62_and_70(self):
        early = adjust_for_claiming_age(2000, 62)
        delayed = adjust_for_claiming_age(2000, 70)
        assert early == pytest.approx(1400.0)
        assert delayed == pytest.approx(2480.0)
        assert early < 2000 < delayed

    def test_monotonic_in_claiming_age(self):
        ages = np.arange(62, 70.01, 0.5)
        benefits = [adjust_for_claiming_age(2000, age) for age in ages]
        assert all(b1 < b2 for b1, b2 in zip(benefits, benefits[1:]))

    def test_first_36_months_rate(self):
        """Three years early: 36 × 5/9 of 1% = 20%."""
        assert claiming_age_factor(64) == pytest.approx(0.80)

    def test_fra_66(self):
        assert claiming_age_factor(62, full_retirement_age=66) == pytest.approx(0.75)
        assert claiming_age_factor(70, full_retirement_age=66) == pytest.approx(1.32)

    def test_zero_benefit(self):
        assert adjust_for_claiming_age(0, 62) == 0.0


class TestFullRetirementAge:

    @pytest.mark.parametrize("birth_year,fra", [
        (1937, 65.0),
        (1940, 65.5),
        (1950, 66.0),
        (1955, 66 + 2 / 12),
        (1959, 66 + 10 / 12),
        (1960, 67.0),
        (1975, 67.0),
    ])
    def test_schedule(self, birth_year, fra):
        assert full_retirement_age(birth_year) == pytest.approx(fra)


class TestValidation:

    @pytest.mark.parametrize("age", [61, 61.9, 70.5, 71])
    def test_claiming_age_out_of_range(self, age):
        with pytest.raises(PensionInputError) as exc:
            adjust_for_claiming_age(2000, age)
        assert exc.value.field == "ss_claiming_age"

    def test_negative_benefit(self):
        with pytest.raises(PensionInputError) as exc:
            adjust_for_claiming_age(-5, 67)
        assert exc.value.field == "ss_full_benefit"

    def test_fra_out_of_range(self):
        with pytest.raises(PensionInputError):
            adjust_for_claiming_age(2000, 67, full_retirement_age=68)
