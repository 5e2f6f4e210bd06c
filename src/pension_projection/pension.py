"""
pension_projection/pension.py - Defined-Benefit Pension Formula

Annual allowance = Average Salary × Years of Service × Benefit Factor,
limited to the statutory maximum of 80% of average salary.

    base    = S × n × m
    capped  = min(base, 0.80 × S)
    elected = capped × option_factor

A multiplier of 0 yields a $0 pension (ineligible), not an error.

Author: Retirement Income Project
License: MIT
"""

from typing import List, Optional
import logging

from .benefit_factors import check_eligibility, get_benefit_factor
from .models import (
    DualPensionEstimate,
    MemberProfile,
    PensionResult,
    require_non_negative,
)
from .options import apply_option
from .plan_config import (
    DEFAULT_PLAN_RULES,
    MembershipGroup,
    PlanRules,
    RetirementOption,
    ServiceEra,
)
from .salary import DEFAULT_GROWTH_RATE, project_salary

logger = logging.getLogger(__name__)

MAX_TABLE_ITERATIONS = 30


def calculate_annual_pension(average_salary: float, years_of_service: float,
                             multiplier: float) -> float:
    """Uncapped annual allowance: salary × years × multiplier."""
    require_non_negative("average_salary", average_salary)
    require_non_negative("years_of_service", years_of_service)
    require_non_negative("multiplier", multiplier)
    return average_salary * years_of_service * multiplier


def apply_maximum_cap(annual_amount: float, average_salary: float,
                      rules: PlanRules = DEFAULT_PLAN_RULES) -> float:
    """Limit the allowance to the statutory share of average salary."""
    return min(annual_amount, rules.max_pension_fraction * average_salary)


def calculate_pension(average_salary: float, years_of_service: float,
                      retirement_age: float, group: MembershipGroup,
                      service_era: ServiceEra,
                      option: RetirementOption = RetirementOption.A,
                      beneficiary_age: Optional[float] = None,
                      rules: PlanRules = DEFAULT_PLAN_RULES) -> PensionResult:
    """
    Full pension calculation at a single retirement age.

    Args:
        average_salary: Salary basis for the formula
        years_of_service: Creditable service at retirement
        retirement_age: Age at retirement
        group: Membership group
        service_era: Pre- or post-2012 membership
        option: Elected retirement option
        beneficiary_age: Required for Options C and D
        rules: Plan rule configuration

    Returns:
        PensionResult; eligible=False with zero amounts when the multiplier is 0
    """
    eligibility = check_eligibility(retirement_age, years_of_service, group, service_era)
    multiplier = get_benefit_factor(retirement_age, group, service_era, years_of_service)

    base = calculate_annual_pension(average_salary, years_of_service, multiplier)
    capped = apply_maximum_cap(base, average_salary, rules)

    option_result = apply_option(capped, option, retirement_age,
                                 beneficiary_age=beneficiary_age, group=group,
                                 rules=rules)

    message = eligibility.message
    if eligibility.eligible and multiplier == 0:
        message = (f"No benefit factor available for age {int(retirement_age)} "
                   f"in {group.label}")

    survivor_annual = option_result.survivor_pension
    result = PensionResult(
        retirement_age=retirement_age,
        years_of_service=years_of_service,
        average_salary=average_salary,
        multiplier=multiplier,
        base_pension_annual=base,
        capped_pension_annual=capped,
        capped=base > capped,
        option_adjusted_annual=option_result.pension,
        option_adjusted_monthly=option_result.pension / 12.0,
        option_factor=option_result.factor,
        option_description=option_result.description,
        survivor_annual=survivor_annual,
        survivor_monthly=survivor_annual / 12.0 if survivor_annual is not None else None,
        eligible=multiplier > 0,
        eligibility_message=message,
    )
    logger.debug(
        f"{group.label} age {retirement_age} yos {years_of_service}: "
        f"m={multiplier:.4f}, base=${base:,.2f}, capped=${capped:,.2f}, "
        f"{option_result.option.value}=${option_result.pension:,.2f}"
    )
    return result


def service_at_age(profile: MemberProfile, age: float) -> float:
    """Creditable service at `age`, accruing one year per year from today."""
    return profile.years_of_service + max(0.0, age - profile.current_age)


def pension_for_profile(profile: MemberProfile,
                        retirement_age: Optional[float] = None,
                        salary: Optional[float] = None,
                        rules: PlanRules = DEFAULT_PLAN_RULES) -> PensionResult:
    """calculate_pension() for a validated MemberProfile."""
    age = profile.pension_start_age if retirement_age is None else retirement_age
    return calculate_pension(
        average_salary=profile.salary_basis if salary is None else salary,
        years_of_service=service_at_age(profile, age),
        retirement_age=age,
        group=profile.group,
        service_era=profile.service_era,
        option=profile.option,
        beneficiary_age=profile.beneficiary_age,
        rules=rules,
    )


def estimate_pension_dual(profile: MemberProfile,
                          growth_rate: Optional[float] = None,
                          rules: PlanRules = DEFAULT_PLAN_RULES) -> DualPensionEstimate:
    """
    Pension on the current salary basis and on the projected salary.

    Both results are valid: the first is a conservative estimate, the
    second the planning estimate at the assumed growth rate.
    """
    if growth_rate is None:
        growth_rate = (profile.salary_growth_rate
                       if profile.salary_growth_rate is not None
                       else DEFAULT_GROWTH_RATE)
    projected_salary = project_salary(profile.current_salary, profile.current_age,
                                      profile.pension_start_age, growth_rate)
    return DualPensionEstimate(
        current=pension_for_profile(profile, rules=rules),
        projected=pension_for_profile(profile, salary=projected_salary, rules=rules),
        projected_salary=projected_salary,
        growth_rate=growth_rate,
    )


def retirement_age_table(group: MembershipGroup, start_age: float,
                         years_of_service: float, average_salary: float,
                         service_era: ServiceEra,
                         option: RetirementOption = RetirementOption.A,
                         beneficiary_age: Optional[float] = None,
                         rules: PlanRules = DEFAULT_PLAN_RULES) -> List[PensionResult]:
    """
    Benefit at each successive retirement age from `start_age`.

    Service accrues one year per year. Ages at which the member is not
    eligible are skipped. The table stops after the 80% maximum is
    reached or past the group's maximum projection age.
    """
    max_age = rules.group_max_projection_ages[group]
    rows = []
    for offset in range(MAX_TABLE_ITERATIONS):
        age = start_age + offset
        if int(age) > max_age:
            break
        result = calculate_pension(average_salary, years_of_service + offset, age,
                                   group, service_era, option, beneficiary_age, rules)
        if not result.eligible:
            continue
        rows.append(result)
        if result.capped_pension_annual >= rules.max_pension_fraction * average_salary:
            break
    return rows
