# -*- coding: utf-8 -*-
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

from .util import round_fixed

VO2_INTERCEPT = 138.1
VO2_AGE_COEF = 11.49
VO2_HR_COEF = 0.378

HUFNER = 1.36
O2_SOLUBILITY = 0.0031


@dataclass(frozen=True)
class CalcResult:
    value: float
    formula: Optional[str] = None


def ln(x: float) -> float:
    """Natural log returning -inf for 0 and NaN for negatives instead of raising."""
    if math.isnan(x) or x < 0:
        return math.nan
    if x == 0:
        return -math.inf
    return math.log(x)


def guarded_divisor(d: float) -> float:
    # zero (either sign) and NaN fall back to 1
    if d == 0 or math.isnan(d):
        return 1.0
    return d


def calc_vo2_estimate(age: float, hr: float) -> CalcResult:
    """
    LaFarge-style VO₂ index estimate (mL/min/m²):
      138.1 - 11.49·ln(age) + 0.378·HR, rounded to 2 decimals.
    age <= 0 is not guarded and yields a non-finite value.
    """
    vo2 = VO2_INTERCEPT - VO2_AGE_COEF * ln(age) + VO2_HR_COEF * hr
    return CalcResult(
        round_fixed(vo2, 2),
        formula=f"138.1 - 11.49·ln({age}) + 0.378·{hr}",
    )


def calc_o2_content(hgb: float, sat: float, po2: float = 0.0, include_dissolved: bool = False) -> CalcResult:
    # O₂ content (mL O₂/dL) = bound + optional dissolved fraction
    bound = HUFNER * hgb * (sat / 100.0)
    if include_dissolved:
        return CalcResult(
            round_fixed(bound + O2_SOLUBILITY * po2, 2),
            formula=f"1.36·{hgb}·({sat}/100) + 0.0031·{po2}",
        )
    return CalcResult(round_fixed(bound, 2), formula=f"1.36·{hgb}·({sat}/100)")


def calc_flow(vo2: float, content_diff: float) -> CalcResult:
    """Fick flow: VO₂ / content difference, with a divisor of 1 when the difference is 0."""
    div = guarded_divisor(content_diff)
    return CalcResult(vo2 / div, formula=f"{vo2}/{div}")


def calc_qp_qs(qp: float, qs: float) -> CalcResult:
    if qs == 0:
        return CalcResult(0.0, formula="Qs = 0")
    return CalcResult(qp / qs, formula=f"{qp}/{qs}")


def calc_tpg(mpap: float, pcwp: float) -> CalcResult:
    return CalcResult(mpap - pcwp, formula=f"{mpap} - {pcwp}")


def calc_pvri(tpg: float, qp: float) -> CalcResult:
    # PVRi = TPG / Qp  (WU·m²)
    div = guarded_divisor(qp)
    return CalcResult(tpg / div, formula=f"{tpg}/{div}")
