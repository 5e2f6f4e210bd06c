"""
pension_projection/plan_config.py - Plan Rule Configuration

DESIGN PRINCIPLE: statutory coefficients are data, not code.
The engine asks PlanRules: "What is the cap? What is the Option B band?"
and never hardcodes a published factor inside a formula.

Configurable rule data:
- Maximum benefit as a fraction of average salary (80%)
- COLA policy (rate applied to a fixed base amount)
- Option B reduction bands by retirement age
- Published Option C / D joint-survivor factors (MSRB calculator output)
- Survivor continuation fractions and the actuarial interest rate used
  when no published factor covers an age pair
- Group maximum projection ages and the service-era cutover date

Author: Retirement Income Project
License: MIT
"""

import json
from datetime import date
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import logging

from pydantic import BaseModel, ConfigDict, Field, field_validator

logger = logging.getLogger(__name__)


# =============================================================================
# ENUMS
# =============================================================================

class MembershipGroup(Enum):
    """Job classification groups of the retirement system."""
    GROUP_1 = 1  # General employees
    GROUP_2 = 2  # Hazardous duty / certain health care
    GROUP_3 = 3  # State police
    GROUP_4 = 4  # Public safety (police, fire, corrections)

    @property
    def label(self) -> str:
        return f"Group {self.value}"


class ServiceEra(Enum):
    """Statutory rule set, keyed on membership date vs. the 2012 reform."""
    BEFORE_2012 = "before_2012"
    AFTER_2012 = "after_2012"


class RetirementOption(Enum):
    """Benefit shape elected at retirement."""
    A = "A"  # Full allowance, no survivor
    B = "B"  # Annuity protection (residual refund)
    C = "C"  # Joint and 2/3 survivor
    D = "D"  # Joint and full survivor with pop-up


# =============================================================================
# PYDANTIC MODELS FOR CONFIGURATION
# =============================================================================

class ColaPolicy(BaseModel):
    """Partial COLA: `rate` applied only to the first `base_amount` per year."""
    model_config = ConfigDict(frozen=True)

    rate: float = Field(0.03, ge=0, le=0.10)
    base_amount: float = Field(13000.0, ge=0)

    @property
    def max_annual_increase(self) -> float:
        return self.rate * self.base_amount


class OptionBBand(BaseModel):
    """Option B reduction for members retiring at or below `max_age`."""
    model_config = ConfigDict(frozen=True)

    max_age: float
    reduction: float = Field(..., ge=0, lt=1)


class JointSurvivorFactor(BaseModel):
    """
    A published percentage-of-Option-A factor for a member/beneficiary pair.

    `group` is optional; when given, the entry only applies to that group
    and takes precedence over a general entry for the same ages.
    """
    model_config = ConfigDict(frozen=True)

    member_age: int
    beneficiary_age: int
    factor: float = Field(..., gt=0, le=1)
    group: Optional[MembershipGroup] = None

    @property
    def age_difference(self) -> int:
        return self.member_age - self.beneficiary_age


DEFAULT_OPTION_B_BANDS = [
    OptionBBand(max_age=50, reduction=0.01),
    OptionBBand(max_age=60, reduction=0.03),
    OptionBBand(max_age=200, reduction=0.05),
]

DEFAULT_OPTION_C_FACTORS = [
    # MSRB calculator output, member two years older than beneficiary
    JointSurvivorFactor(member_age=55, beneficiary_age=53, factor=0.9295),
    JointSurvivorFactor(member_age=56, beneficiary_age=54, factor=0.9253),
    JointSurvivorFactor(member_age=57, beneficiary_age=55, factor=0.9209),
    JointSurvivorFactor(member_age=58, beneficiary_age=56, factor=0.9163),
    # Published chart points
    JointSurvivorFactor(member_age=55, beneficiary_age=55, factor=0.94),
    JointSurvivorFactor(member_age=65, beneficiary_age=55, factor=0.84),
    JointSurvivorFactor(member_age=65, beneficiary_age=65, factor=0.89),
    JointSurvivorFactor(member_age=70, beneficiary_age=65, factor=0.83),
    JointSurvivorFactor(member_age=70, beneficiary_age=70, factor=0.86),
]

DEFAULT_GROUP_MAX_PROJECTION_AGES = {
    MembershipGroup.GROUP_1: 70,
    MembershipGroup.GROUP_2: 68,
    MembershipGroup.GROUP_3: 68,
    MembershipGroup.GROUP_4: 65,
}


class PlanRules(BaseModel):
    """Complete rule configuration for the benefit engine."""
    model_config = ConfigDict(frozen=True)

    plan_name: str = "Massachusetts State Employees' Retirement System"
    era_cutover_date: date = date(2012, 4, 2)

    # Statutory maximum
    max_pension_fraction: float = Field(0.80, gt=0, le=1)

    cola: ColaPolicy = Field(default_factory=ColaPolicy)

    # Option coefficients
    option_b_bands: List[OptionBBand] = Field(
        default_factory=lambda: list(DEFAULT_OPTION_B_BANDS)
    )
    option_c_factors: List[JointSurvivorFactor] = Field(
        default_factory=lambda: list(DEFAULT_OPTION_C_FACTORS)
    )
    option_d_factors: List[JointSurvivorFactor] = Field(default_factory=list)
    option_c_survivor_fraction: float = Field(2.0 / 3.0, gt=0, le=1)
    option_d_survivor_fraction: float = Field(1.0, gt=0, le=1)

    # Actuarial fallback for unpublished age pairs
    actuarial_interest_rate: float = Field(0.07, ge=0, lt=0.20)
    mortality_load: float = Field(1.0, gt=0)

    group_max_projection_ages: Dict[MembershipGroup, int] = Field(
        default_factory=lambda: dict(DEFAULT_GROUP_MAX_PROJECTION_AGES)
    )

    @field_validator("option_b_bands")
    @classmethod
    def _bands_sorted(cls, bands: List[OptionBBand]) -> List[OptionBBand]:
        if not bands:
            raise ValueError("option_b_bands must contain at least one band")
        return sorted(bands, key=lambda b: b.max_age)

    @field_validator("option_c_factors", "option_d_factors")
    @classmethod
    def _younger_beneficiary_costs_more(
            cls, factors: List[JointSurvivorFactor]) -> List[JointSurvivorFactor]:
        # At a fixed member age, a wider gap to a younger beneficiary never
        # yields a higher factor
        by_member: Dict[tuple, List[JointSurvivorFactor]] = {}
        for entry in factors:
            by_member.setdefault((entry.member_age, entry.group), []).append(entry)
        for (member_age, _), entries in by_member.items():
            entries = sorted(entries, key=lambda e: e.age_difference)
            for narrow, wide in zip(entries, entries[1:]):
                if wide.factor > narrow.factor:
                    raise ValueError(
                        f"factor {member_age}/{wide.beneficiary_age} ({wide.factor}) "
                        f"exceeds {member_age}/{narrow.beneficiary_age} ({narrow.factor})"
                    )
        return factors

    def survivor_fraction(self, option: RetirementOption) -> float:
        if option == RetirementOption.C:
            return self.option_c_survivor_fraction
        if option == RetirementOption.D:
            return self.option_d_survivor_fraction
        return 0.0

    def published_factors(self, option: RetirementOption) -> List[JointSurvivorFactor]:
        if option == RetirementOption.C:
            return self.option_c_factors
        if option == RetirementOption.D:
            return self.option_d_factors
        return []


DEFAULT_PLAN_RULES = PlanRules()


def create_plan_rules(config: Optional[Dict[str, Any]] = None) -> PlanRules:
    """
    Factory function to create PlanRules from a configuration dictionary.

    Keys not present fall back to the statutory defaults.
    """
    if not config:
        return DEFAULT_PLAN_RULES
    rules = PlanRules(**config)
    logger.debug(
        f"PlanRules created: cap={rules.max_pension_fraction:.0%}, "
        f"COLA={rules.cola.rate:.1%} on ${rules.cola.base_amount:,.0f}"
    )
    return rules


def load_plan_rules(path: Union[str, Path]) -> PlanRules:
    """Load PlanRules from a JSON file."""
    path = Path(path)
    with open(path, "r", encoding="utf-8") as f:
        config = json.load(f)
    logger.info(f"Loaded plan rules from {path}")
    return create_plan_rules(config)
