# -*- coding: utf-8 -*-
from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, List


def to_number(x: Any) -> float:
    """Host coercion of a raw field value. Empty/invalid -> 0.0."""
    if x is None:
        return 0.0
    if isinstance(x, bool):
        return 0.0
    if isinstance(x, (int, float)):
        try:
            v = float(x)
        except OverflowError:
            return math.inf if x > 0 else -math.inf
    else:
        s = str(x).strip().replace(",", ".")
        if not s:
            return 0.0
        try:
            v = float(s)
        except ValueError:
            return 0.0
    if math.isnan(v):
        return 0.0
    return v


def is_finite(v: float) -> bool:
    return not (math.isnan(v) or math.isinf(v))


def round_fixed(v: float, decimals: int = 2) -> float:
    """
    Round to a fixed number of decimals on the exact binary value.
    Ties go away from zero (0.125 -> 0.13, -0.125 -> -0.13).
    Non-finite values are returned unchanged.
    """
    if not is_finite(v):
        return v
    if v == 0:
        return 0.0
    if abs(v) >= 1e21:
        return v
    q = Decimal(1).scaleb(-decimals)
    return float(Decimal(v).quantize(q, rounding=ROUND_HALF_UP))


def _non_finite_label(v: float) -> str:
    if math.isnan(v):
        return "NaN"
    return "Infinity" if v > 0 else "-Infinity"


def fmt_fixed(v: float, decimals: int = 2) -> str:
    if not is_finite(v):
        return _non_finite_label(v)
    # no fixed notation from 1e21 on
    if abs(v) >= 1e21:
        return fmt_plain(v)
    return f"{round_fixed(v, decimals):.{decimals}f}"


def fmt_plain(v: float) -> str:
    """
    Shortest round-trip digits, laid out like a browser prints a number:
    plain notation for 1e-7 < |v| < 1e21, otherwise "1.5e+21" / "1e-7".
    """
    if not is_finite(v):
        return _non_finite_label(v)
    if v == 0:
        return "0"
    sign = "-" if v < 0 else ""
    tup = Decimal(repr(abs(float(v)))).normalize().as_tuple()
    digits = "".join(str(d) for d in tup.digits)
    k = len(digits)
    n = tup.exponent + k  # position of the decimal point
    if k <= n <= 21:
        return sign + digits + "0" * (n - k)
    if 0 < n <= 21:
        return sign + digits[:n] + "." + digits[n:]
    if -6 < n <= 0:
        return sign + "0." + "0" * (-n) + digits
    e = n - 1
    exp = f"e{'+' if e >= 0 else '-'}{abs(e)}"
    if k == 1:
        return sign + digits + exp
    return sign + digits[0] + "." + digits[1:] + exp


@dataclass(frozen=True)
class ValidationReport:
    missing: List[str]
    warnings: List[str]

    @property
    def ok(self) -> bool:
        return not self.missing and not self.warnings

    def to_markdown(self) -> str:
        lines: List[str] = []
        if self.missing:
            lines.append("### Missing key values")
            for m in self.missing:
                lines.append(f"- {m}")
        if self.warnings:
            lines.append("### Plausibility notes")
            for w in self.warnings:
                lines.append(f"- {w}")
        if not lines:
            return "—"
        return "\n".join(lines)
