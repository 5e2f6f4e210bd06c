"""
pension_projection/mortality.py - Joint-Life Annuity Factors

Supplies the actuarial values behind survivor-option reductions when no
published factor covers a member/beneficiary age pair.

Mathematical Framework:
- Base rates: Pub-2010 Healthy Retirees (Headcount-Weighted), unisex blend
- Ages below 50: Gompertz extrapolation anchored at age 50
- Annuity-due: ä_x = Σ v^t · tp_x,  joint: ä_xy = Σ v^t · tp_x · tp_y
- Survivor option equivalence: P · [ä_x + f(ä_y - ä_xy)] = A · ä_x

Author: Retirement Income Project
License: MIT
"""

import logging

import numpy as np

logger = logging.getLogger(__name__)

MAX_AGE = 110
GOMPERTZ_SLOPE = 0.09

# =============================================================================
# PUB-2010 HEALTHY RETIREES (HEADCOUNT-WEIGHTED), AGES 50-110
# Source: Society of Actuaries Pub-2010 Public Retirement Plans Mortality Tables
# =============================================================================

RETIREE_MALE_50 = np.array([
    0.003145, 0.003531, 0.003957, 0.004428, 0.004949,  # 50-54
    0.005529, 0.006171, 0.006887, 0.007683, 0.008569,  # 55-59
    0.009558, 0.010665, 0.011905, 0.013299, 0.014866,  # 60-64
    0.016633, 0.018628, 0.020885, 0.023442, 0.026343,  # 65-69
    0.029639, 0.033390, 0.037666, 0.042549, 0.048137,  # 70-74
    0.054543, 0.061899, 0.070353, 0.080077, 0.091263,  # 75-79
    0.104124, 0.118895, 0.135830, 0.155196, 0.177267,  # 80-84
    0.202321, 0.230631, 0.262453, 0.298010, 0.337476,  # 85-89
    0.380966, 0.428505, 0.480020, 0.535318, 0.594056,  # 90-94
    0.655739, 0.719714, 0.785177, 0.851199, 0.916744,  # 95-99
    0.980649, 1.000000, 1.000000, 1.000000, 1.000000,  # 100-104
    1.000000, 1.000000, 1.000000, 1.000000, 1.000000,  # 105-109
    1.000000,                                           # 110
], dtype=np.float64)

RETIREE_FEMALE_50 = np.array([
    0.001891, 0.002153, 0.002447, 0.002778, 0.003150,  # 50-54
    0.003569, 0.004039, 0.004567, 0.005159, 0.005822,  # 55-59
    0.006564, 0.007394, 0.008322, 0.009361, 0.010524,  # 60-64
    0.011826, 0.013285, 0.014920, 0.016755, 0.018817,  # 65-69
    0.021134, 0.023743, 0.026685, 0.030007, 0.033765,  # 70-74
    0.038022, 0.042854, 0.048348, 0.054606, 0.061744,  # 75-79
    0.069900, 0.079231, 0.089921, 0.102179, 0.116241,  # 80-84
    0.132370, 0.150855, 0.172016, 0.196193, 0.223749,  # 85-89
    0.255053, 0.290464, 0.330294, 0.374780, 0.424052,  # 90-94
    0.478088, 0.536687, 0.599463, 0.665841, 0.735058,  # 95-99
    0.806165, 0.878008, 0.949244, 1.000000, 1.000000,  # 100-104
    1.000000, 1.000000, 1.000000, 1.000000, 1.000000,  # 105-109
    1.000000,                                           # 110
], dtype=np.float64)


def _build_unisex_qx() -> np.ndarray:
    """Unisex q_x for ages 0-110 (index = age)."""
    qx = np.zeros(MAX_AGE + 1, dtype=np.float64)
    qx[50:] = 0.5 * (RETIREE_MALE_50 + RETIREE_FEMALE_50)
    young_ages = np.arange(50)
    qx[:50] = qx[50] * np.exp(-GOMPERTZ_SLOPE * (50 - young_ages))
    return qx


UNISEX_QX = _build_unisex_qx()


class AnnuityCalculator:
    """
    Life annuity factors on a unisex retiree table.

    Attributes:
        interest_rate: Valuation interest rate
        load_factor: Mortality load (1.0 = table rates)
    """

    def __init__(self, interest_rate: float = 0.07, load_factor: float = 1.0):
        self.interest_rate = interest_rate
        self.load_factor = load_factor
        self._qx = np.clip(UNISEX_QX * load_factor, 0.0, 1.0)
        self._qx[MAX_AGE] = 1.0
        self._v = 1.0 / (1.0 + interest_rate)

    def survival_curve(self, age: int) -> np.ndarray:
        """tp_x for t = 0 .. (MAX_AGE - age + 1)."""
        age = int(max(0, min(age, MAX_AGE)))
        px = 1.0 - self._qx[age:]
        return np.concatenate(([1.0], np.cumprod(px)))

    def _discount(self, n: int) -> np.ndarray:
        return np.power(self._v, np.arange(n))

    def single_life_annuity(self, age: int) -> float:
        """ä_x: annuity-due of 1 per year while (x) lives."""
        tpx = self.survival_curve(age)
        return float(np.sum(tpx * self._discount(tpx.size)))

    def joint_life_annuity(self, age_x: int, age_y: int) -> float:
        """ä_xy: annuity-due of 1 per year while both (x) and (y) live."""
        tpx = self.survival_curve(age_x)
        tpy = self.survival_curve(age_y)
        n = min(tpx.size, tpy.size)
        return float(np.sum(tpx[:n] * tpy[:n] * self._discount(n)))

    def survivor_option_factor(self, member_age: int, beneficiary_age: int,
                               survivor_fraction: float) -> float:
        """
        Fraction of the single-life benefit payable under a joint-and-survivor
        option with the given continuation fraction.

        Formula: ä_x / (ä_x + f · (ä_y - ä_xy))
        """
        a_x = self.single_life_annuity(member_age)
        a_y = self.single_life_annuity(beneficiary_age)
        a_xy = self.joint_life_annuity(member_age, beneficiary_age)
        factor = a_x / (a_x + survivor_fraction * (a_y - a_xy))
        logger.debug(
            f"Survivor factor {member_age}/{beneficiary_age} f={survivor_fraction:.4f}: "
            f"a_x={a_x:.4f}, a_y={a_y:.4f}, a_xy={a_xy:.4f} -> {factor:.6f}"
        )
        return factor

