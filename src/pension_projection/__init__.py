"""
Public Pension + Social Security Retirement Income Engine

Estimates retirement income for members of a four-group public retirement
system by combining the defined-benefit formula (benefit factor chart,
80% maximum, retirement options A-D) with a Social Security claiming-age
adjustment, and projects the combined income year by year with the
partial COLA on the pension.

Version: 1.0.0

Rule basis:
- Official benefit factor chart, pre- and post-2012 reform
- Option B/C/D reductions and published joint-survivor factors
- 3% COLA on the first $13,000 of the annual allowance
- SSA early-reduction and delayed-retirement-credit schedule

Author: Retirement Income Project
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Retirement Income Project"

from .plan_config import (
    MembershipGroup,
    ServiceEra,
    RetirementOption,
    ColaPolicy,
    OptionBBand,
    JointSurvivorFactor,
    PlanRules,
    DEFAULT_PLAN_RULES,
    create_plan_rules,
    load_plan_rules,
)

from .models import (
    MemberProfile,
    PensionInputError,
    EligibilityResult,
    OptionResult,
    PensionResult,
    DualPensionEstimate,
    ProjectionRow,
    ReplacementRatio,
)

from .benefit_factors import (
    get_benefit_factor,
    check_eligibility,
    minimum_retirement_age,
    service_era_for_date,
)

from .pension import (
    calculate_annual_pension,
    apply_maximum_cap,
    calculate_pension,
    pension_for_profile,
    estimate_pension_dual,
    retirement_age_table,
)

from .options import (
    apply_option,
    option_b_reduction,
    joint_survivor_factor,
)

from .mortality import AnnuityCalculator

from .salary import (
    project_salary,
    salary_projection,
    average_highest_salary,
)

from .social_security import (
    adjust_for_claiming_age,
    claiming_age_factor,
    full_retirement_age,
)

from .cola import (
    apply_cola,
    project_cola,
    compare_cola_policies,
)

from .projection import (
    ProjectionParameters,
    ProjectionResult,
    ProjectionSummary,
    generate_projection,
    replacement_ratio,
    summarize_projection,
)

from .reporting import (
    projection_to_frame,
    export_projection_excel,
)

__all__ = [
    # Configuration
    "MembershipGroup",
    "ServiceEra",
    "RetirementOption",
    "ColaPolicy",
    "OptionBBand",
    "JointSurvivorFactor",
    "PlanRules",
    "DEFAULT_PLAN_RULES",
    "create_plan_rules",
    "load_plan_rules",

    # Inputs and results
    "MemberProfile",
    "PensionInputError",
    "EligibilityResult",
    "OptionResult",
    "PensionResult",
    "DualPensionEstimate",
    "ProjectionRow",
    "ReplacementRatio",

    # Benefit factors
    "get_benefit_factor",
    "check_eligibility",
    "minimum_retirement_age",
    "service_era_for_date",

    # Pension formula
    "calculate_annual_pension",
    "apply_maximum_cap",
    "calculate_pension",
    "pension_for_profile",
    "estimate_pension_dual",
    "retirement_age_table",

    # Options
    "apply_option",
    "option_b_reduction",
    "joint_survivor_factor",
    "AnnuityCalculator",

    # Salary
    "project_salary",
    "salary_projection",
    "average_highest_salary",

    # Social Security
    "adjust_for_claiming_age",
    "claiming_age_factor",
    "full_retirement_age",

    # COLA
    "apply_cola",
    "project_cola",
    "compare_cola_policies",

    # Projection
    "ProjectionParameters",
    "ProjectionResult",
    "ProjectionSummary",
    "generate_projection",
    "replacement_ratio",
    "summarize_projection",

    # Reporting
    "projection_to_frame",
    "export_projection_excel",
]
