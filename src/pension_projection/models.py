"""
pension_projection/models.py - Member Inputs and Result Records

MemberProfile is the single validated input to a calculation. Every field
that changes the financial meaning of a result is checked here, before any
component runs:
- beneficiary_age is required when the option carries a survivor benefit
- ss_claiming_age must lie in [62, 70]
- salaries and years of service are non-negative

Result records are plain dataclasses, recomputed on every call.

Author: Retirement Income Project
License: MIT
"""

from dataclasses import dataclass
from typing import Optional
import logging

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .plan_config import MembershipGroup, RetirementOption, ServiceEra

logger = logging.getLogger(__name__)

SS_MIN_CLAIMING_AGE = 62
SS_MAX_CLAIMING_AGE = 70

SURVIVOR_OPTIONS = (RetirementOption.C, RetirementOption.D)


class PensionInputError(ValueError):
    """Invalid input to an engine function; `field` names the offending input."""

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(f"{field}: {message}")


def require_non_negative(field_name: str, value: float) -> None:
    if value is None or value != value or value < 0:
        raise PensionInputError(field_name, f"must be >= 0, got {value!r}")


def require_claiming_age(claiming_age: float, field_name: str = "ss_claiming_age") -> None:
    if not SS_MIN_CLAIMING_AGE <= claiming_age <= SS_MAX_CLAIMING_AGE:
        raise PensionInputError(
            field_name,
            f"claiming age must be between {SS_MIN_CLAIMING_AGE} and "
            f"{SS_MAX_CLAIMING_AGE}, got {claiming_age}"
        )


class MemberProfile(BaseModel):
    """Immutable member profile, validated on construction."""
    model_config = ConfigDict(frozen=True)

    birth_year: int = Field(..., ge=1900, le=2100)
    current_age: float = Field(..., ge=0, le=120)
    current_salary: float = Field(..., ge=0)
    average_salary: Optional[float] = Field(None, ge=0)
    years_of_service: float = Field(..., ge=0)

    group: MembershipGroup
    service_era: ServiceEra

    pension_start_age: float = Field(..., ge=0, le=120)
    option: RetirementOption = RetirementOption.A
    beneficiary_age: Optional[float] = Field(None, gt=0, le=120)

    ss_full_benefit: float = Field(0.0, ge=0)
    ss_claiming_age: float = Field(67, ge=SS_MIN_CLAIMING_AGE, le=SS_MAX_CLAIMING_AGE)

    other_monthly_income: float = Field(0.0, ge=0)
    salary_growth_rate: Optional[float] = Field(None, ge=0, le=0.10)

    @model_validator(mode="after")
    def _beneficiary_required_for_survivor_options(self) -> "MemberProfile":
        if self.option in SURVIVOR_OPTIONS and self.beneficiary_age is None:
            raise ValueError(
                f"beneficiary_age is required for Option {self.option.value}"
            )
        return self

    @property
    def salary_basis(self) -> float:
        """Average salary when given (including 0), otherwise the current salary."""
        if self.average_salary is not None:
            return self.average_salary
        return self.current_salary


@dataclass(frozen=True)
class EligibilityResult:
    eligible: bool
    message: str = ""


@dataclass(frozen=True)
class OptionResult:
    """Annual pension after the retirement option is applied."""
    option: RetirementOption
    pension: float
    factor: float
    description: str
    survivor_pension: Optional[float] = None
    interpolated: bool = False
    source: str = "statute"


@dataclass(frozen=True)
class PensionResult:
    """Complete pension calculation at a single retirement age."""
    retirement_age: float
    years_of_service: float
    average_salary: float
    multiplier: float
    base_pension_annual: float
    capped_pension_annual: float
    capped: bool
    option_adjusted_annual: float
    option_adjusted_monthly: float
    option_factor: float
    option_description: str
    survivor_annual: Optional[float] = None
    survivor_monthly: Optional[float] = None
    eligible: bool = True
    eligibility_message: str = ""

    @property
    def total_benefit_percentage(self) -> float:
        if self.average_salary <= 0:
            return 0.0
        return self.capped_pension_annual / self.average_salary


@dataclass(frozen=True)
class DualPensionEstimate:
    """Conservative (current salary) and planning (projected salary) results."""
    current: PensionResult
    projected: PensionResult
    projected_salary: float
    growth_rate: float


@dataclass
class ProjectionRow:
    """
    One projected year of retirement income.

    When `error` is set the numeric fields are None; a failed row is never
    reported as a plausible $0.
    """
    age: float
    age_label: str
    years_of_service: float
    pension_monthly: Optional[float] = None
    pension_annual: Optional[float] = None
    cola_increase_annual: Optional[float] = None
    social_security_monthly: Optional[float] = None
    social_security_annual: Optional[float] = None
    other_monthly: Optional[float] = None
    total_monthly: Optional[float] = None
    total_annual: Optional[float] = None
    cumulative_total: Optional[float] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ReplacementRatio:
    """Income-adequacy metric; `value` is None when the ratio is undefined."""
    value: Optional[float]
    reference_age: Optional[float]
    total_annual: Optional[float]
    average_salary: float
    reason: str = ""

    @property
    def defined(self) -> bool:
        return self.value is not None
