# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from .calcs import (
    calc_flow,
    calc_o2_content,
    calc_pvri,
    calc_qp_qs,
    calc_tpg,
    calc_vo2_estimate,
)
from .util import to_number

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClinicalInputs:
    age: float = 0.0
    heart_rate: float = 0.0
    manual_vo2: float = 0.0
    hemoglobin: float = 0.0
    arterial_sat: float = 0.0
    venous_sat: float = 0.0
    pulm_artery_sat: float = 0.0
    pulm_vein_sat: float = 0.0
    arterial_po2_mmhg: float = 0.0
    pulm_vein_po2_mmhg: float = 0.0
    mean_pap: float = 0.0
    pcwp: float = 0.0
    # accepted, not used by any formula
    bsa: float = 0.0


@dataclass(frozen=True)
class ModeFlags:
    include_dissolved: bool = False
    use_manual_vo2: bool = False


@dataclass(frozen=True)
class OxygenContents:
    arterial: float
    venous: float
    pulm_artery: float
    pulm_vein: float


@dataclass(frozen=True)
class DerivedResults:
    vo2: float
    cardiac_output: float
    qp: float
    qs: float
    qp_qs: float
    tpg: float
    pvri: float

    contents: OxygenContents
    formulas: Dict[str, str] = field(default_factory=dict, compare=False)


# UI field id -> ClinicalInputs attribute
UI_FIELDS: Dict[str, str] = {
    "age": "age",
    "hr": "heart_rate",
    "manual_vo2": "manual_vo2",
    "hgb": "hemoglobin",
    "sa_o2": "arterial_sat",
    "sv_o2": "venous_sat",
    "pa_o2": "pulm_artery_sat",
    "pv_o2": "pulm_vein_sat",
    "pa_o2_mmhg": "arterial_po2_mmhg",
    "pv_o2_mmhg": "pulm_vein_po2_mmhg",
    "mean_pap": "mean_pap",
    "pcwp": "pcwp",
    "bsa": "bsa",
}

FLAG_FIELDS: Tuple[str, ...] = ("include_dissolved", "use_manual_vo2")


def inputs_from_ui(ui: Dict[str, Any]) -> Tuple[ClinicalInputs, ModeFlags]:
    """
    Build an immutable snapshot from a flat field dict.
    Missing, empty or unparsable values become 0.0.
    """
    values = {attr: to_number(ui.get(fid)) for fid, attr in UI_FIELDS.items()}
    flags = ModeFlags(
        include_dissolved=bool(ui.get("include_dissolved")),
        use_manual_vo2=bool(ui.get("use_manual_vo2")),
    )
    return ClinicalInputs(**values), flags


def _pick_vo2(inputs: ClinicalInputs, flags: ModeFlags) -> Tuple[float, str]:
    if flags.use_manual_vo2:
        return inputs.manual_vo2, "manual"
    res = calc_vo2_estimate(inputs.age, inputs.heart_rate)
    return res.value, res.formula or ""


def compute(inputs: ClinicalInputs, flags: ModeFlags) -> DerivedResults:
    vo2, vo2_formula = _pick_vo2(inputs, flags)

    hgb = inputs.hemoglobin
    dissolved = flags.include_dissolved
    # venous and PA content take the arterial pO₂ for the dissolved term
    ca = calc_o2_content(hgb, inputs.arterial_sat, inputs.arterial_po2_mmhg, dissolved)
    cv = calc_o2_content(hgb, inputs.venous_sat, inputs.arterial_po2_mmhg, dissolved)
    cpv = calc_o2_content(hgb, inputs.pulm_vein_sat, inputs.pulm_vein_po2_mmhg, dissolved)
    cpa = calc_o2_content(hgb, inputs.pulm_artery_sat, inputs.arterial_po2_mmhg, dissolved)

    co = calc_flow(vo2, ca.value - cv.value)
    qp = calc_flow(vo2, cpv.value - cpa.value)
    qs = calc_flow(vo2, ca.value - cv.value)
    ratio = calc_qp_qs(qp.value, qs.value)
    tpg = calc_tpg(inputs.mean_pap, inputs.pcwp)
    pvri = calc_pvri(tpg.value, qp.value)

    logger.debug("fick compute: vo2=%s co=%s qp=%s", vo2, co.value, qp.value)

    return DerivedResults(
        vo2=vo2,
        cardiac_output=co.value,
        qp=qp.value,
        qs=qs.value,
        qp_qs=ratio.value,
        tpg=tpg.value,
        pvri=pvri.value,
        contents=OxygenContents(
            arterial=ca.value,
            venous=cv.value,
            pulm_artery=cpa.value,
            pulm_vein=cpv.value,
        ),
        formulas={
            "vo2": vo2_formula,
            "ca_o2": ca.formula or "",
            "cv_o2": cv.formula or "",
            "cpv_o2": cpv.formula or "",
            "cpa_o2": cpa.formula or "",
            "co": co.formula or "",
            "qp": qp.formula or "",
            "qs": qs.formula or "",
            "qp_qs": ratio.formula or "",
            "tpg": tpg.formula or "",
            "pvri": pvri.formula or "",
        },
    )
