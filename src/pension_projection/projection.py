"""
pension_projection/projection.py - Multi-Year Retirement Income Projection

Year-by-year combined income from the pension start age to the horizon:

    pension_t  = pension_{t-1} + 3% × min(pension_{t-1}, $13,000)   (COLA)
    ss_t       = SS_adj  if age_t >= claiming age, else 0           (no COLA)
    total_t    = pension_t + ss_t + other
    cumulative = Σ total

The pension is computed once at the start age with the elected option;
only the COLA changes it afterwards. A row whose figures are not finite
is returned with `error` set and no numbers, never as a plausible $0.

Author: Retirement Income Project
License: MIT
"""

from dataclasses import dataclass
from typing import List, Optional
import logging
import math

from pydantic import BaseModel, ConfigDict, Field

from .benefit_factors import minimum_retirement_age
from .cola import apply_cola
from .models import (
    MemberProfile,
    PensionResult,
    ProjectionRow,
    ReplacementRatio,
    require_non_negative,
)
from .pension import pension_for_profile, service_at_age
from .plan_config import DEFAULT_PLAN_RULES, PlanRules
from .salary import DEFAULT_GROWTH_RATE, project_salary
from .social_security import adjust_for_claiming_age, full_retirement_age

logger = logging.getLogger(__name__)

DEFAULT_HORIZON_AGE = 80
UNDEFINED_RATIO = "undefined ratio"


class ProjectionParameters(BaseModel):
    """Inputs to generate_projection()."""
    model_config = ConfigDict(frozen=True)

    profile: MemberProfile
    horizon_age: float = Field(DEFAULT_HORIZON_AGE, gt=0, le=120)
    include_cola: bool = True
    replacement_reference_age: Optional[float] = Field(None, gt=0, le=120)
    use_projected_salary: bool = False
    rules: PlanRules = Field(default_factory=lambda: DEFAULT_PLAN_RULES)


@dataclass(frozen=True)
class ProjectionResult:
    rows: List[ProjectionRow]
    pension: PensionResult
    social_security_monthly: float
    replacement_ratio: ReplacementRatio
    start_age: float
    salary_basis: float


@dataclass(frozen=True)
class ProjectionSummary:
    """Headline figures of a projection."""
    start_age: float
    end_age: float
    initial_pension_monthly: float
    final_pension_monthly: float
    peak_total_monthly: float
    total_cola_gain_annual: float
    years_with_social_security: int
    cumulative_total: float


def projection_start_age(profile: MemberProfile) -> float:
    """Planned pension start age, raised to the group's minimum age if needed."""
    service = service_at_age(profile, profile.pension_start_age)
    floor_age = minimum_retirement_age(profile.group, service)
    if floor_age is None:
        return profile.pension_start_age
    if profile.pension_start_age < floor_age:
        logger.info(
            f"Pension start age {profile.pension_start_age} is below the "
            f"{profile.group.label} minimum; projecting from age {floor_age}"
        )
    return max(profile.pension_start_age, float(floor_age))


def _age_label(age: float, is_start: bool, ss_begins: bool) -> str:
    notes = []
    if is_start:
        notes.append("retirement")
    if ss_begins:
        notes.append("Social Security begins")
    label = f"Age {age:g}"
    if notes:
        label += f" ({', '.join(notes)})"
    return label


def _build_row(age: float, label: str, years_of_service: float,
               pension_annual: float, cola_increase: float,
               ss_monthly: float, other_monthly: float,
               cumulative: float) -> ProjectionRow:
    values = {
        "pension_monthly": pension_annual / 12.0,
        "pension_annual": pension_annual,
        "cola_increase_annual": cola_increase,
        "social_security_monthly": ss_monthly,
        "social_security_annual": ss_monthly * 12.0,
        "other_monthly": other_monthly,
    }
    values["total_monthly"] = (values["pension_monthly"] + ss_monthly + other_monthly)
    values["total_annual"] = values["total_monthly"] * 12.0
    values["cumulative_total"] = cumulative + values["total_annual"]

    bad = [name for name, value in values.items() if not math.isfinite(value)]
    if bad:
        logger.error(f"{label}: non-finite value in {', '.join(bad)}")
        return ProjectionRow(
            age=age,
            age_label=label,
            years_of_service=years_of_service,
            error=f"calculation error: non-finite {', '.join(bad)}",
        )
    return ProjectionRow(age=age, age_label=label,
                         years_of_service=years_of_service, **values)


def generate_projection(params: ProjectionParameters) -> ProjectionResult:
    """
    Project combined retirement income from the pension start age.

    Args:
        params: Member profile, horizon and projection switches

    Returns:
        ProjectionResult; `rows` is empty when the horizon precedes the
        start age
    """
    profile = params.profile
    rules = params.rules

    start_age = projection_start_age(profile)

    if params.use_projected_salary:
        growth = (profile.salary_growth_rate
                  if profile.salary_growth_rate is not None
                  else DEFAULT_GROWTH_RATE)
        salary_basis = project_salary(profile.current_salary, profile.current_age,
                                      start_age, growth)
    else:
        salary_basis = profile.salary_basis

    pension = pension_for_profile(profile, retirement_age=start_age,
                                  salary=salary_basis, rules=rules)
    if not pension.eligible:
        logger.warning(f"No pension payable at age {start_age}: {pension.eligibility_message}")

    ss_monthly = adjust_for_claiming_age(
        profile.ss_full_benefit,
        profile.ss_claiming_age,
        full_retirement_age(profile.birth_year),
    )

    logger.info(
        f"Projecting {profile.group.label} from age {start_age} to {params.horizon_age}: "
        f"pension ${pension.option_adjusted_monthly:,.2f}/mo, "
        f"Social Security ${ss_monthly:,.2f}/mo from age {profile.ss_claiming_age}"
    )

    rows: List[ProjectionRow] = []
    years = int(math.floor(params.horizon_age - start_age))
    pension_annual = pension.option_adjusted_annual
    cumulative = 0.0
    ss_started = False

    for offset in range(years + 1):
        age = start_age + offset

        cola_increase = 0.0
        if offset > 0 and params.include_cola and math.isfinite(pension_annual):
            step = apply_cola(pension_annual, rules.cola)
            cola_increase = step.increase
            pension_annual = step.adjusted_pension

        ss_active = age >= profile.ss_claiming_age
        ss_begins = ss_active and not ss_started and ss_monthly > 0
        row = _build_row(
            age=age,
            label=_age_label(age, offset == 0, ss_begins),
            years_of_service=pension.years_of_service,
            pension_annual=pension_annual,
            cola_increase=cola_increase,
            ss_monthly=ss_monthly if ss_active else 0.0,
            other_monthly=profile.other_monthly_income,
            cumulative=cumulative,
        )
        ss_started = ss_started or ss_active
        if row.ok:
            cumulative = row.cumulative_total
        else:
            cumulative = math.nan
        rows.append(row)

    if not rows:
        logger.warning(f"Horizon age {params.horizon_age} precedes start age {start_age}")

    reference_age = params.replacement_reference_age
    if reference_age is None and rows:
        # First year with every income stream in payment
        with_ss = [r.age for r in rows if r.age >= profile.ss_claiming_age]
        reference_age = with_ss[0] if with_ss else rows[0].age

    return ProjectionResult(
        rows=rows,
        pension=pension,
        social_security_monthly=ss_monthly,
        replacement_ratio=replacement_ratio(rows, salary_basis, reference_age),
        start_age=start_age,
        salary_basis=salary_basis,
    )


def replacement_ratio(rows: List[ProjectionRow], average_salary: float,
                      reference_age: Optional[float] = None) -> ReplacementRatio:
    """
    Total annual income at `reference_age` as a fraction of average salary.

    Defaults to the first projected year. The ratio is undefined, never 0
    or infinite, when the salary is 0, the age is not projected, or the
    row carries an error.
    """
    require_non_negative("average_salary", average_salary)

    if reference_age is None and rows:
        reference_age = rows[0].age

    def undefined(reason: str, total: Optional[float] = None) -> ReplacementRatio:
        return ReplacementRatio(value=None, reference_age=reference_age,
                                total_annual=total, average_salary=average_salary,
                                reason=reason)

    # Fractional start ages give rows such as 64.5; match on the whole year
    row = next((r for r in rows
                if math.floor(r.age) == math.floor(reference_age)), None)
    if row is None:
        return undefined(f"{UNDEFINED_RATIO}: age {reference_age} not projected")
    if not row.ok:
        return undefined(f"{UNDEFINED_RATIO}: {row.error}")
    if average_salary <= 0:
        return undefined(f"{UNDEFINED_RATIO}: average salary is 0",
                         total=row.total_annual)

    return ReplacementRatio(
        value=row.total_annual / average_salary,
        reference_age=reference_age,
        total_annual=row.total_annual,
        average_salary=average_salary,
    )


def summarize_projection(rows: List[ProjectionRow]) -> Optional[ProjectionSummary]:
    """Headline figures over the valid rows; None when there are none."""
    valid = [r for r in rows if r.ok]
    if not valid:
        return None

    first, last = valid[0], valid[-1]
    return ProjectionSummary(
        start_age=first.age,
        end_age=last.age,
        initial_pension_monthly=first.pension_monthly,
        final_pension_monthly=last.pension_monthly,
        peak_total_monthly=max(r.total_monthly for r in valid),
        total_cola_gain_annual=last.pension_annual - first.pension_annual,
        years_with_social_security=sum(1 for r in valid if r.social_security_monthly > 0),
        cumulative_total=last.cumulative_total,
    )
