"""
pension_projection/benefit_factors.py - Benefit Factor (Multiplier) Tables

Percentage of average salary credited per year of service, by group, age
and service era. Values follow the official MSRB benefit chart.

Table selection:
- Default chart: members who joined before 2012-04-02, and post-reform
  members with 30+ years of service
- Reduced chart: post-reform members with fewer than 30 years of service

A multiplier of 0 means "not eligible at this age/service". It is a valid
result, never an exception; callers use check_eligibility() for the
guidance message.

Author: Retirement Income Project
License: MIT
"""

from datetime import date
from typing import Dict, Optional
import logging

import numpy as np

from .models import EligibilityResult, PensionInputError, require_non_negative
from .plan_config import DEFAULT_PLAN_RULES, MembershipGroup, PlanRules, ServiceEra

logger = logging.getLogger(__name__)

MAX_MULTIPLIER = 0.025
FULL_CHART_SERVICE_YEARS = 30
GROUP_3_ANY_AGE_SERVICE = 20


def _flat_from(first_age: int, last_age: int, rate: float) -> Dict[int, float]:
    return {age: rate for age in range(first_age, last_age + 1)}


# =============================================================================
# DEFAULT CHART (pre-2012 members, and post-2012 members with 30+ YOS)
# =============================================================================

DEFAULT_FACTORS: Dict[MembershipGroup, Dict[int, float]] = {
    MembershipGroup.GROUP_1: {
        60: 0.020, 61: 0.021, 62: 0.022, 63: 0.023, 64: 0.024,
        **_flat_from(65, 67, 0.025),
    },
    MembershipGroup.GROUP_2: {
        55: 0.020, 56: 0.021, 57: 0.022, 58: 0.023, 59: 0.024,
        **_flat_from(60, 67, 0.025),
    },
    MembershipGroup.GROUP_3: _flat_from(50, 67, 0.025),
    MembershipGroup.GROUP_4: {
        50: 0.020, 51: 0.021, 52: 0.022, 53: 0.023, 54: 0.024,
        **_flat_from(55, 67, 0.025),
    },
}

# =============================================================================
# REDUCED CHART (post-2012 members with fewer than 30 YOS)
# =============================================================================

POST_2012_REDUCED_FACTORS: Dict[MembershipGroup, Dict[int, float]] = {
    MembershipGroup.GROUP_1: {
        60: 0.0145, 61: 0.0160, 62: 0.0175, 63: 0.0190,
        64: 0.0205, 65: 0.0220, 66: 0.0235, 67: 0.0250,
    },
    MembershipGroup.GROUP_2: {
        55: 0.0145, 56: 0.0160, 57: 0.0175, 58: 0.0190,
        59: 0.0205, 60: 0.0220, 61: 0.0235,
        **_flat_from(62, 67, 0.025),
    },
    MembershipGroup.GROUP_3: _flat_from(50, 67, 0.025),
    MembershipGroup.GROUP_4: {
        50: 0.0145, 51: 0.0160, 52: 0.0175, 53: 0.0190,
        54: 0.0205, 55: 0.0220, 56: 0.0235,
        **_flat_from(57, 67, 0.025),
    },
}

MINIMUM_RETIREMENT_AGES = {
    MembershipGroup.GROUP_1: 60,
    MembershipGroup.GROUP_2: 55,
    MembershipGroup.GROUP_3: 55,
    MembershipGroup.GROUP_4: 50,
}


def minimum_retirement_age(group: MembershipGroup,
                           years_of_service: float = 0.0) -> Optional[int]:
    """
    Earliest age at which the group's chart pays a benefit.

    Returns None for Group 3 members with 20+ years of service, who may
    retire at any age.
    """
    if group == MembershipGroup.GROUP_3 and years_of_service >= GROUP_3_ANY_AGE_SERVICE:
        return None
    return MINIMUM_RETIREMENT_AGES[group]


def service_era_for_date(membership_date: date,
                         rules: PlanRules = DEFAULT_PLAN_RULES) -> ServiceEra:
    """Service era implied by the date the member joined."""
    if membership_date < rules.era_cutover_date:
        return ServiceEra.BEFORE_2012
    return ServiceEra.AFTER_2012


def _validate_enums(group, service_era) -> None:
    if not isinstance(group, MembershipGroup):
        raise PensionInputError("group", f"unknown membership group {group!r}")
    if not isinstance(service_era, ServiceEra):
        raise PensionInputError("service_era", f"unknown service era {service_era!r}")


def check_eligibility(age: float, years_of_service: float,
                      group: MembershipGroup,
                      service_era: ServiceEra) -> EligibilityResult:
    """
    Statutory age / service eligibility for a superannuation retirement.

    Rules:
    - Group 3: any age with 20+ YOS, otherwise age 55 with 10+ YOS
    - Pre-2012: 20+ YOS at any age, or age 55+ with 10+ YOS
    - Post-2012: 10+ YOS and the group minimum age (60/55/55/50)
    """
    _validate_enums(group, service_era)
    require_non_negative("age", age)
    require_non_negative("years_of_service", years_of_service)

    age = int(np.floor(age))

    if group == MembershipGroup.GROUP_3:
        if years_of_service >= GROUP_3_ANY_AGE_SERVICE:
            return EligibilityResult(True)
        if age >= 55 and years_of_service >= 10:
            return EligibilityResult(True)
        return EligibilityResult(
            False,
            "Not eligible: Group 3 requires 20+ years of service, "
            "or age 55 with 10+ years of service."
        )

    if service_era == ServiceEra.BEFORE_2012:
        if years_of_service >= 20:
            return EligibilityResult(True)
        if age >= 55 and years_of_service >= 10:
            return EligibilityResult(True)
        return EligibilityResult(
            False,
            "Not eligible: for service before 04/02/2012, requires 20+ years "
            "of service, or age 55+ with 10+ years of service."
        )

    if years_of_service < 10:
        return EligibilityResult(
            False,
            "Not eligible: requires at least 10 years of service for service "
            "on/after 04/02/2012."
        )
    min_age = MINIMUM_RETIREMENT_AGES[group]
    if age < min_age:
        return EligibilityResult(
            False,
            f"Not eligible: {group.label} requires minimum age {min_age} for "
            f"service on/after 04/02/2012."
        )
    return EligibilityResult(True)


def factor_table(group: MembershipGroup, service_era: ServiceEra,
                 years_of_service: float) -> Dict[int, float]:
    """Select the chart for this member."""
    if service_era == ServiceEra.AFTER_2012 and years_of_service < FULL_CHART_SERVICE_YEARS:
        return POST_2012_REDUCED_FACTORS[group]
    return DEFAULT_FACTORS[group]


def get_benefit_factor(age: float, group: MembershipGroup,
                       service_era: ServiceEra,
                       years_of_service: float) -> float:
    """
    Benefit multiplier for a member retiring at `age`.

    Args:
        age: Age at retirement (floored to whole years)
        group: Membership group
        service_era: Pre- or post-2012 membership
        years_of_service: Creditable service at retirement

    Returns:
        Multiplier in [0, 0.025]; 0 when not eligible
    """
    eligibility = check_eligibility(age, years_of_service, group, service_era)
    if not eligibility.eligible:
        logger.debug(f"Multiplier 0 for {group.label} age {age}: {eligibility.message}")
        return 0.0

    whole_age = int(np.floor(age))

    if group == MembershipGroup.GROUP_3 and years_of_service >= GROUP_3_ANY_AGE_SERVICE:
        return MAX_MULTIPLIER

    table = factor_table(group, service_era, years_of_service)
    ages = sorted(table)

    if whole_age < ages[0]:
        return 0.0
    if whole_age > ages[-1]:
        return table[ages[-1]]
    if whole_age in table:
        return table[whole_age]

    # Highest defined age at or below the member's age
    applicable = max(a for a in ages if a <= whole_age)
    return table[applicable]
