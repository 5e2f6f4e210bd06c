"""
pension_projection/cola.py - Partial Cost-of-Living Adjustment

The retirement system grants its COLA on a capped base only:

    increase_t = rate × min(P_t, base)         (3% of the first $13,000)
    P_{t+1}    = P_t + increase_t

so a $20,000 pension gains $390 in a year, not $600. The adjusted
allowance compounds: next year's COLA is computed on the increased
benefit, but never on more than the base amount.

Author: Retirement Income Project
License: MIT
"""

from dataclasses import dataclass
from typing import Dict, List, Optional
import logging

from .models import PensionInputError, require_non_negative
from .plan_config import DEFAULT_PLAN_RULES, ColaPolicy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ColaIncrease:
    starting_pension: float
    eligible_amount: float
    increase: float
    adjusted_pension: float
    at_maximum: bool


@dataclass(frozen=True)
class ColaYear:
    year: int
    starting_pension: float
    increase: float
    ending_pension: float
    cumulative_increase: float


def apply_cola(annual_pension: float,
               policy: Optional[ColaPolicy] = None) -> ColaIncrease:
    """One year's COLA on an annual pension."""
    policy = policy or DEFAULT_PLAN_RULES.cola
    require_non_negative("annual_pension", annual_pension)

    eligible = min(annual_pension, policy.base_amount)
    increase = eligible * policy.rate
    return ColaIncrease(
        starting_pension=annual_pension,
        eligible_amount=eligible,
        increase=increase,
        adjusted_pension=annual_pension + increase,
        at_maximum=increase >= policy.max_annual_increase,
    )


def cola_adjusted_pension(initial_pension: float, years: int,
                          policy: Optional[ColaPolicy] = None) -> float:
    """Annual pension after `years` COLA increments; years <= 0 returns it unchanged."""
    pension = initial_pension
    for _ in range(max(0, years)):
        pension = apply_cola(pension, policy).adjusted_pension
    return pension


def project_cola(initial_pension: float, years: int,
                 policy: Optional[ColaPolicy] = None) -> List[ColaYear]:
    """Year-by-year COLA schedule for `years` years after retirement."""
    if years < 0:
        raise PensionInputError("years", f"must be >= 0, got {years}")

    schedule = []
    pension = initial_pension
    cumulative = 0.0
    for year in range(1, years + 1):
        step = apply_cola(pension, policy)
        cumulative += step.increase
        schedule.append(ColaYear(
            year=year,
            starting_pension=pension,
            increase=step.increase,
            ending_pension=step.adjusted_pension,
            cumulative_increase=cumulative,
        ))
        pension = step.adjusted_pension
    return schedule


COLA_POLICY_SCENARIOS: Dict[str, ColaPolicy] = {
    "current": ColaPolicy(rate=0.03, base_amount=13000.0),
    "increased_base": ColaPolicy(rate=0.03, base_amount=20000.0),
    "increased_rate": ColaPolicy(rate=0.035, base_amount=13000.0),
}


def compare_cola_policies(initial_pension: float, years: int = 20,
                          scenarios: Optional[Dict[str, ColaPolicy]] = None) -> Dict[str, float]:
    """
    Total COLA received over `years` under alternative policies.

    Returns:
        Mapping of scenario name to cumulative increase
    """
    if scenarios is None:
        scenarios = COLA_POLICY_SCENARIOS
    totals = {}
    for name, policy in scenarios.items():
        schedule = project_cola(initial_pension, years, policy)
        totals[name] = schedule[-1].cumulative_increase if schedule else 0.0
    return totals
