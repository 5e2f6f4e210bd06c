"""
pension_projection/options.py - Retirement Option Adjustment

Transforms the capped Option A allowance into the elected benefit shape:

    Option A: full allowance, no survivor benefit
    Option B: small age-banded reduction (annuity protection)
    Option C: joint and 2/3 survivor
    Option D: joint and full survivor (pop-up not modelled)

Survivor-option factors are resolved in order:
1. Published factor for the exact (member, beneficiary) age pair
   (group-specific entries win over general entries)
2. Linear interpolation by member age between published factors with the
   same age difference
3. Actuarial equivalence on the unisex retiree table (mortality.py)

Author: Retirement Income Project
License: MIT
"""

from typing import List, Optional, Tuple
import logging

from .models import OptionResult, PensionInputError, require_non_negative
from .mortality import AnnuityCalculator
from .plan_config import (
    DEFAULT_PLAN_RULES,
    JointSurvivorFactor,
    MembershipGroup,
    PlanRules,
    RetirementOption,
)

logger = logging.getLogger(__name__)


def _coerce_option(option) -> RetirementOption:
    if isinstance(option, RetirementOption):
        return option
    try:
        return RetirementOption(str(option).upper())
    except ValueError:
        raise PensionInputError("option", f"unknown retirement option {option!r}") from None


def option_b_reduction(retirement_age: float,
                       rules: PlanRules = DEFAULT_PLAN_RULES) -> float:
    """Option B reduction fraction for the member's retirement age."""
    for band in rules.option_b_bands:
        if retirement_age <= band.max_age:
            return band.reduction
    return rules.option_b_bands[-1].reduction


def _published_lookup(factors: List[JointSurvivorFactor], member_age: int,
                      beneficiary_age: int,
                      group: Optional[MembershipGroup]) -> Optional[float]:
    general = None
    for entry in factors:
        if entry.member_age != member_age or entry.beneficiary_age != beneficiary_age:
            continue
        if entry.group is not None and entry.group == group:
            return entry.factor
        if entry.group is None:
            general = entry.factor
    return general


def _interpolate_same_gap(factors: List[JointSurvivorFactor], member_age: float,
                          beneficiary_age: float,
                          group: Optional[MembershipGroup]) -> Optional[float]:
    gap = round(member_age - beneficiary_age)
    points = sorted(
        (f for f in factors
         if f.age_difference == gap and (f.group is None or f.group == group)),
        key=lambda f: f.member_age,
    )
    lower = [p for p in points if p.member_age <= member_age]
    upper = [p for p in points if p.member_age >= member_age]
    if not lower or not upper:
        return None
    lo, hi = lower[-1], upper[0]
    if lo.member_age == hi.member_age:
        return lo.factor
    ratio = (member_age - lo.member_age) / (hi.member_age - lo.member_age)
    return lo.factor + ratio * (hi.factor - lo.factor)


def joint_survivor_factor(option: RetirementOption, member_age: float,
                          beneficiary_age: float,
                          group: Optional[MembershipGroup] = None,
                          rules: PlanRules = DEFAULT_PLAN_RULES) -> Tuple[float, str]:
    """
    Percentage of Option A payable under a survivor option.

    Returns:
        (factor, source) where source is 'published', 'interpolated'
        or 'actuarial'
    """
    factors = rules.published_factors(option)
    member_rounded = int(round(member_age))
    beneficiary_rounded = int(round(beneficiary_age))

    published = _published_lookup(factors, member_rounded, beneficiary_rounded, group)
    if published is not None:
        return published, "published"

    interpolated = _interpolate_same_gap(factors, member_rounded, beneficiary_rounded, group)
    if interpolated is not None:
        logger.debug(
            f"Option {option.value} {member_rounded}/{beneficiary_rounded}: "
            f"interpolated factor {interpolated:.6f}"
        )
        return interpolated, "interpolated"

    calculator = AnnuityCalculator(
        interest_rate=rules.actuarial_interest_rate,
        load_factor=rules.mortality_load,
    )
    factor = calculator.survivor_option_factor(
        member_rounded, beneficiary_rounded, rules.survivor_fraction(option)
    )
    logger.debug(
        f"Option {option.value} {member_rounded}/{beneficiary_rounded}: "
        f"no published factor, actuarial factor {factor:.6f}"
    )
    return factor, "actuarial"


def apply_option(base_pension_annual: float, option, retirement_age: float,
                 beneficiary_age: Optional[float] = None,
                 group: Optional[MembershipGroup] = None,
                 rules: PlanRules = DEFAULT_PLAN_RULES) -> OptionResult:
    """
    Apply a retirement option to the capped annual Option A allowance.

    Args:
        base_pension_annual: Capped Option A annual pension
        option: RetirementOption (or 'A'..'D')
        retirement_age: Member age at retirement
        beneficiary_age: Beneficiary age, required for Options C and D
        group: Membership group, selects group-specific published factors
        rules: Plan rule configuration

    Returns:
        OptionResult with annual pension and, for C/D, survivor pension

    Raises:
        PensionInputError: unknown option, missing/invalid beneficiary age
    """
    option = _coerce_option(option)
    require_non_negative("base_pension_annual", base_pension_annual)
    require_non_negative("retirement_age", retirement_age)

    if option == RetirementOption.A:
        return OptionResult(
            option=option,
            pension=float(base_pension_annual),
            factor=1.0,
            description="Option A: Full Allowance",
        )

    if option == RetirementOption.B:
        reduction = option_b_reduction(retirement_age, rules)
        return OptionResult(
            option=option,
            pension=base_pension_annual * (1.0 - reduction),
            factor=1.0 - reduction,
            description=f"Option B: Annuity Protection ({reduction:.0%} reduction)",
        )

    if beneficiary_age is None:
        raise PensionInputError(
            "beneficiary_age", f"required for Option {option.value}"
        )
    if not beneficiary_age > 0:
        raise PensionInputError(
            "beneficiary_age", f"must be a positive age, got {beneficiary_age!r}"
        )

    factor, source = joint_survivor_factor(option, retirement_age, beneficiary_age,
                                           group, rules)
    pension = base_pension_annual * factor
    survivor_fraction = rules.survivor_fraction(option)
    if option == RetirementOption.C:
        label = f"Option C: Joint & Survivor ({survivor_fraction:.2%})"
    else:
        label = "Option D: Joint & Full Survivor"

    return OptionResult(
        option=option,
        pension=pension,
        factor=factor,
        description=(
            f"{label} - {(1.0 - factor) * 100:.2f}% reduction "
            f"(ages {round(retirement_age)}/{round(beneficiary_age)})"
        ),
        survivor_pension=pension * survivor_fraction,
        interpolated=source != "published",
        source=source,
    )
