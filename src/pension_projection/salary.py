"""
pension_projection/salary.py - Salary Projection

Projects a current salary to the planned retirement date with compound
growth: S_r = S_0 × (1 + g)^(r - a)

The pension formula may be run on both the current salary (conservative)
and the projected salary (planning estimate); see
pension.estimate_pension_dual().

Author: Retirement Income Project
License: MIT
"""

from dataclasses import dataclass
from typing import Sequence
import logging

import numpy as np

from .models import PensionInputError, require_non_negative

logger = logging.getLogger(__name__)

DEFAULT_GROWTH_RATE = 0.025
MAX_GROWTH_RATE = 0.10
HIGH_GROWTH_WARNING = 0.06


@dataclass(frozen=True)
class SalaryProjection:
    current_salary: float
    projected_salary: float
    years_to_retirement: float
    growth_rate: float

    @property
    def total_growth(self) -> float:
        return self.projected_salary - self.current_salary

    @property
    def total_growth_percentage(self) -> float:
        if self.current_salary <= 0:
            return 0.0
        return (self.projected_salary / self.current_salary - 1.0) * 100.0


def _validate_growth_rate(growth_rate: float) -> None:
    if growth_rate is None or not 0 <= growth_rate <= MAX_GROWTH_RATE:
        raise PensionInputError(
            "salary_growth_rate",
            f"must be between 0 and {MAX_GROWTH_RATE:.0%}, got {growth_rate!r}"
        )
    if growth_rate > HIGH_GROWTH_WARNING:
        logger.warning(f"Unusual salary growth assumption: {growth_rate:.2%}")


def project_salary(current_salary: float, current_age: float,
                   planned_retirement_age: float,
                   growth_rate: float = DEFAULT_GROWTH_RATE) -> float:
    """
    Compound the current salary forward to the planned retirement age.

    Returns the current salary unchanged when retirement is not in the
    future.
    """
    require_non_negative("current_salary", current_salary)
    _validate_growth_rate(growth_rate)

    years = planned_retirement_age - current_age
    if years <= 0:
        return float(current_salary)
    return float(current_salary * np.power(1.0 + growth_rate, years))


def salary_projection(current_salary: float, current_age: float,
                      planned_retirement_age: float,
                      growth_rate: float = DEFAULT_GROWTH_RATE) -> SalaryProjection:
    """project_salary() with the supporting figures for display."""
    projected = project_salary(current_salary, current_age,
                               planned_retirement_age, growth_rate)
    return SalaryProjection(
        current_salary=float(current_salary),
        projected_salary=projected,
        years_to_retirement=max(0.0, planned_retirement_age - current_age),
        growth_rate=growth_rate,
    )


def average_highest_salary(salaries: Sequence[float], years: int = 3) -> float:
    """
    Highest average of `years` consecutive annual salaries.

    With fewer salaries than `years`, all of them are averaged.
    """
    if years < 1:
        raise PensionInputError("years", f"must be >= 1, got {years}")
    values = np.asarray(list(salaries), dtype=np.float64)
    if values.size == 0:
        raise PensionInputError("salaries", "at least one salary is required")
    if np.any(values < 0) or not np.all(np.isfinite(values)):
        raise PensionInputError("salaries", "salaries must be finite and >= 0")

    if values.size <= years:
        return float(values.mean())

    window_means = np.convolve(values, np.ones(years) / years, mode="valid")
    return float(window_means.max())
