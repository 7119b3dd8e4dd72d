# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from .classify import validate_inputs
from .engine import DerivedResults, ModeFlags, compute, inputs_from_ui
from .util import fmt_fixed, fmt_plain

Row = Tuple[str, str, str]


def result_rows(res: DerivedResults, flags: ModeFlags) -> List[Row]:
    """(label, unit, display value) in on-screen order and precision."""
    # manual VO₂ is shown as entered, the estimate is already rounded
    vo2_txt = fmt_plain(res.vo2)
    vo2_label = "VO₂ (manual)" if flags.use_manual_vo2 else "Estimated VO₂"
    return [
        (vo2_label, "mL/min/m²", vo2_txt),
        ("Cardiac Output", "L/min", fmt_fixed(res.cardiac_output, 2)),
        ("Qp", "L/min", fmt_fixed(res.qp, 2)),
        ("Qp:Qs Ratio", "", fmt_fixed(res.qp_qs, 2)),
        ("Transpulmonary Gradient", "mmHg", fmt_fixed(res.tpg, 1)),
        ("PVR Index", "WU·m²", fmt_fixed(res.pvri, 2)),
    ]


def content_rows(res: DerivedResults) -> List[Row]:
    c = res.contents
    return [
        ("CaO₂ (arterial)", "mL/dL", fmt_fixed(c.arterial, 2)),
        ("CvO₂ (venous)", "mL/dL", fmt_fixed(c.venous, 2)),
        ("CpaO₂ (pulmonary artery)", "mL/dL", fmt_fixed(c.pulm_artery, 2)),
        ("CpvO₂ (pulmonary vein)", "mL/dL", fmt_fixed(c.pulm_vein, 2)),
    ]


def _rows_to_markdown(rows: List[Row]) -> List[str]:
    lines = ["| Parameter | Value | Unit |", "|---|---:|---|"]
    for label, unit, txt in rows:
        lines.append(f"| {label} | **{txt}** | {unit} |")
    return lines


def results_to_markdown(res: DerivedResults, flags: ModeFlags, show_contents: bool = False) -> str:
    lines = ["### Results"]
    lines += _rows_to_markdown(result_rows(res, flags))
    if show_contents:
        lines.append("")
        lines.append("### O₂ content")
        lines += _rows_to_markdown(content_rows(res))
    return "\n".join(lines)


def formula_trace(res: DerivedResults) -> str:
    lines = ["### Formula trace"]
    for key, formula in res.formulas.items():
        if formula:
            lines.append(f"- `{key}`: {formula}")
    return "\n".join(lines)


def render_ui(ui: Dict[str, Any], show_contents: bool = False) -> Tuple[str, str]:
    """
    One host round-trip: raw field dict -> (results markdown, validation markdown).
    """
    inputs, flags = inputs_from_ui(ui)
    res = compute(inputs, flags)
    md = results_to_markdown(res, flags, show_contents=show_contents)
    if show_contents:
        md = md + "\n\n" + formula_trace(res)
    validation = validate_inputs(inputs, flags, res)
    return md, validation.to_markdown()
