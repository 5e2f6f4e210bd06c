"""
pension_projection/social_security.py - Social Security Claiming-Age Adjustment

Converts the full-retirement-age (FRA) monthly benefit into the benefit
payable at a claiming age between 62 and 70.

Reduction (early claiming), per SSA:
- 5/9 of 1% per month for the first 36 months before FRA
- 5/12 of 1% per month for each additional month

Delayed retirement credit:
- 8% per year (2/3 of 1% per month) after FRA, no credit past age 70

Author: Retirement Income Project
License: MIT
"""

import logging

from .models import (
    SS_MAX_CLAIMING_AGE,
    PensionInputError,
    require_claiming_age,
    require_non_negative,
)

logger = logging.getLogger(__name__)

DEFAULT_FULL_RETIREMENT_AGE = 67
EARLY_RATE_FIRST_36 = 5.0 / 9.0 / 100.0
EARLY_RATE_BEYOND_36 = 5.0 / 12.0 / 100.0
DELAYED_CREDIT_PER_YEAR = 0.08


def full_retirement_age(birth_year: int) -> float:
    """
    SSA full retirement age (in years) for a birth year.

    1937 or earlier: 65; 1938-1942: 65 + 2 months per year;
    1943-1954: 66; 1955-1959: 66 + 2 months per year; 1960 or later: 67.
    """
    if birth_year <= 1937:
        return 65.0
    if birth_year <= 1942:
        return 65.0 + 2 * (birth_year - 1937) / 12.0
    if birth_year <= 1954:
        return 66.0
    if birth_year <= 1959:
        return 66.0 + 2 * (birth_year - 1954) / 12.0
    return 67.0


def claiming_age_factor(claiming_age: float,
                        full_retirement_age: float = DEFAULT_FULL_RETIREMENT_AGE) -> float:
    """Multiplier applied to the FRA benefit when claiming at `claiming_age`."""
    require_claiming_age(claiming_age)

    months = int(round((claiming_age - full_retirement_age) * 12))
    if months == 0:
        return 1.0

    if months < 0:
        months_early = -months
        first = min(months_early, 36)
        beyond = max(0, months_early - 36)
        return 1.0 - (first * EARLY_RATE_FIRST_36 + beyond * EARLY_RATE_BEYOND_36)

    max_delay = int(round((SS_MAX_CLAIMING_AGE - full_retirement_age) * 12))
    months_delayed = min(months, max_delay)
    return 1.0 + months_delayed * DELAYED_CREDIT_PER_YEAR / 12.0


def adjust_for_claiming_age(full_retirement_benefit: float, claiming_age: float,
                            full_retirement_age: float = DEFAULT_FULL_RETIREMENT_AGE) -> float:
    """
    Monthly benefit payable at `claiming_age`.

    Args:
        full_retirement_benefit: Monthly benefit at FRA (PIA)
        claiming_age: Age benefits begin, 62-70
        full_retirement_age: FRA in years (default 67)

    Returns:
        Adjusted monthly benefit

    Raises:
        PensionInputError: benefit negative or claiming age outside [62, 70]
    """
    require_non_negative("ss_full_benefit", full_retirement_benefit)
    if not 62 <= full_retirement_age <= 67:
        raise PensionInputError(
            "full_retirement_age", f"must be between 62 and 67, got {full_retirement_age}"
        )
    factor = claiming_age_factor(claiming_age, full_retirement_age)
    return full_retirement_benefit * factor
