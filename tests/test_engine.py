import math
import sys
from dataclasses import FrozenInstanceError, replace
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest

from fick.engine import ClinicalInputs, ModeFlags, compute, inputs_from_ui


SCENARIO_A = ClinicalInputs(
    age=40,
    heart_rate=70,
    hemoglobin=14,
    arterial_sat=98,
    venous_sat=70,
    pulm_artery_sat=75,
    pulm_vein_sat=98,
    mean_pap=25,
    pcwp=10,
)


def test_scenario_a_estimated_vo2():
    res = compute(SCENARIO_A, ModeFlags())
    assert res.vo2 == 122.17
    assert res.contents.arterial == 18.66
    assert res.contents.venous == 13.33
    assert res.contents.pulm_artery == 14.28
    assert res.contents.pulm_vein == 18.66
    assert res.cardiac_output == res.vo2 / (18.66 - 13.33)
    assert res.cardiac_output == pytest.approx(22.9212, abs=1e-3)
    assert res.qp == pytest.approx(122.17 / 4.38)
    assert res.qp_qs == pytest.approx(res.qp / res.qs)
    assert res.tpg == 15
    assert res.pvri == pytest.approx(15 / res.qp)


def test_qs_equals_cardiac_output():
    res = compute(SCENARIO_A, ModeFlags())
    assert res.qs == res.cardiac_output


def test_scenario_b_manual_vo2_scales_flows():
    a = compute(SCENARIO_A, ModeFlags())
    b = compute(replace(SCENARIO_A, manual_vo2=250), ModeFlags(use_manual_vo2=True))
    assert b.vo2 == 250
    assert b.contents == a.contents
    k = 250 / a.vo2
    assert b.cardiac_output == pytest.approx(a.cardiac_output * k)
    assert b.qp == pytest.approx(a.qp * k)
    assert b.qp_qs == pytest.approx(a.qp_qs)


def test_manual_vo2_is_not_rounded():
    inputs = replace(SCENARIO_A, manual_vo2=123.4567)
    assert compute(inputs, ModeFlags(use_manual_vo2=True)).vo2 == 123.4567


def test_manual_mode_ignores_age_and_hr():
    flags = ModeFlags(use_manual_vo2=True)
    a = compute(replace(SCENARIO_A, manual_vo2=180), flags)
    b = compute(replace(SCENARIO_A, manual_vo2=180, age=0, heart_rate=-50), flags)
    assert a == b


def test_dissolved_term_excluded_when_off():
    base = compute(SCENARIO_A, ModeFlags())
    noisy = replace(SCENARIO_A, arterial_po2_mmhg=math.nan, pulm_vein_po2_mmhg=math.inf)
    assert compute(noisy, ModeFlags()) == base


def test_dissolved_term_reuses_arterial_po2():
    inputs = replace(SCENARIO_A, arterial_po2_mmhg=100, pulm_vein_po2_mmhg=0)
    res = compute(inputs, ModeFlags(include_dissolved=True))
    # +0.31 on arterial, venous and PA; pulmonary vein uses its own pO₂
    assert res.contents.arterial == 18.97
    assert res.contents.venous == 13.64
    assert res.contents.pulm_artery == 14.59
    assert res.contents.pulm_vein == 18.66


def test_equal_contents_use_divisor_one():
    inputs = replace(SCENARIO_A, venous_sat=98, pulm_artery_sat=98, manual_vo2=250)
    res = compute(inputs, ModeFlags(use_manual_vo2=True))
    assert res.cardiac_output == 250
    assert res.qp == 250
    assert res.qp_qs == 1


def test_zero_qs_gives_zero_ratio():
    inputs = replace(SCENARIO_A, manual_vo2=0)
    res = compute(inputs, ModeFlags(use_manual_vo2=True))
    assert res.qs == 0
    assert res.qp_qs == 0
    # Qp is 0 too, so PVRi falls back to TPG / 1
    assert res.pvri == 15


def test_scenario_c_all_zero_estimate_branch():
    res = compute(ClinicalInputs(), ModeFlags())
    assert math.isinf(res.vo2) and res.vo2 > 0
    assert res.contents.arterial == 0
    assert res.contents.venous == 0
    assert math.isinf(res.cardiac_output)
    assert math.isinf(res.qp)
    assert math.isnan(res.qp_qs)
    assert res.tpg == 0
    assert res.pvri == 0


def test_scenario_c_all_zero_manual_branch():
    res = compute(ClinicalInputs(), ModeFlags(use_manual_vo2=True))
    assert res.vo2 == 0
    assert res.cardiac_output == 0
    assert res.qp == 0
    assert res.qp_qs == 0
    assert res.tpg == 0
    assert res.pvri == 0


def test_negative_inputs_do_not_raise():
    inputs = ClinicalInputs(age=-1, heart_rate=-10, hemoglobin=-14, arterial_sat=150, mean_pap=-5, pcwp=20)
    res = compute(inputs, ModeFlags(include_dissolved=True))
    assert math.isnan(res.vo2)
    assert res.tpg == -25


def test_compute_is_deterministic():
    flags = ModeFlags(include_dissolved=True)
    inputs = replace(SCENARIO_A, arterial_po2_mmhg=95, pulm_vein_po2_mmhg=100)
    assert compute(inputs, flags) == compute(inputs, flags)
    first = compute(ClinicalInputs(), ModeFlags())
    second = compute(ClinicalInputs(), ModeFlags())
    assert repr(first) == repr(second)


def test_bsa_not_consumed():
    a = compute(SCENARIO_A, ModeFlags())
    b = compute(replace(SCENARIO_A, bsa=2.1), ModeFlags())
    assert a == b


def test_inputs_from_ui_coercion():
    ui = {
        "age": "",
        "hr": None,
        "hgb": "14,5",
        "sa_o2": "abc",
        "sv_o2": 70,
        "use_manual_vo2": 1,
    }
    inputs, flags = inputs_from_ui(ui)
    assert inputs.age == 0.0
    assert inputs.heart_rate == 0.0
    assert inputs.hemoglobin == 14.5
    assert inputs.arterial_sat == 0.0
    assert inputs.venous_sat == 70.0
    assert inputs.pcwp == 0.0
    assert flags == ModeFlags(include_dissolved=False, use_manual_vo2=True)


def test_inputs_are_immutable():
    with pytest.raises(FrozenInstanceError):
        SCENARIO_A.age = 50  # type: ignore[misc]
