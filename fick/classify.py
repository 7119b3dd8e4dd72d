# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import List, Optional

from .engine import ClinicalInputs, DerivedResults, ModeFlags
from .util import ValidationReport, fmt_fixed, is_finite

SATURATIONS = (
    ("SaO₂", "arterial_sat"),
    ("SvO₂", "venous_sat"),
    ("PA O₂ sat", "pulm_artery_sat"),
    ("PV O₂ sat", "pulm_vein_sat"),
)


def validate_inputs(
    inputs: ClinicalInputs,
    flags: ModeFlags,
    results: Optional[DerivedResults] = None,
) -> ValidationReport:
    """
    Non-blocking hints for the host. Computation always runs; this only
    explains degenerate numbers (zero fields, divisor fallback, non-finite results).
    """
    missing: List[str] = []
    warnings: List[str] = []

    if flags.use_manual_vo2:
        if inputs.manual_vo2 == 0:
            missing.append("Manual VO₂")
    else:
        if inputs.age == 0:
            missing.append("Age")
        if inputs.age <= 0:
            warnings.append("Age ≤ 0: ln(age) is undefined, estimated VO₂ is not a finite number.")
    if inputs.hemoglobin == 0:
        missing.append("Hemoglobin")

    for label, attr in SATURATIONS:
        sat = getattr(inputs, attr)
        if sat < 0 or sat > 100:
            warnings.append(f"{label} outside 0–100 % ({fmt_fixed(sat, 1)}).")

    if flags.include_dissolved and inputs.arterial_po2_mmhg == 0:
        warnings.append("Dissolved O₂ enabled but arterial pO₂ is 0 mmHg.")

    if results is not None:
        c = results.contents
        if c.arterial - c.venous == 0:
            warnings.append("Arterial and venous O₂ content are equal: CO/Qs use a divisor of 1.")
        if c.pulm_vein - c.pulm_artery == 0:
            warnings.append("Pulmonary vein and artery O₂ content are equal: Qp uses a divisor of 1.")
        for label, v in (
            ("VO₂", results.vo2),
            ("Cardiac output", results.cardiac_output),
            ("Qp", results.qp),
            ("Qp:Qs", results.qp_qs),
            ("PVR index", results.pvri),
        ):
            if not is_finite(v):
                warnings.append(f"{label} is not a finite number ({fmt_fixed(v)}).")

    return ValidationReport(missing=missing, warnings=warnings)
