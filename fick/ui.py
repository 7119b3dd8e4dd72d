# -*- coding: utf-8 -*-
from __future__ import annotations

import logging
import traceback
from typing import Any, Dict, List, Optional, Sequence, Tuple

import gradio as gr

from .engine import FLAG_FIELDS
from .report import render_ui
from .settings import DEFAULT_SETTINGS
from .version import APP_NAME, APP_VERSION

logger = logging.getLogger(__name__)

CSS = """
.fick-container { max-width: 720px; margin: 0 auto; }
.result-card {
    border: 1px solid rgba(0,0,0,0.08);
    border-radius: 12px;
    padding: 12px;
}
.small-note { font-size: 12px; opacity: 0.75; }
"""


# registration order of the input components in build_demo
FIELD_ORDER: Tuple[str, ...] = (
    "include_dissolved",
    "use_manual_vo2",
    "manual_vo2",
    "age",
    "hr",
    "hgb",
    "sa_o2",
    "sv_o2",
    "pa_o2",
    "pv_o2",
    "pa_o2_mmhg",
    "pv_o2_mmhg",
    "mean_pap",
    "pcwp",
    "bsa",
)


def ui_get_raw(vals: Sequence[Any]) -> Dict[str, Any]:
    return {fid: v for fid, v in zip(FIELD_ORDER, vals)}


def recompute(vals: Sequence[Any], show_contents: bool = False):
    """Returns (results markdown, validation markdown, error panel update)."""
    try:
        res_md, val_md = render_ui(ui_get_raw(vals), show_contents=show_contents)
        return res_md, val_md, gr.update(visible=False, value="")
    except Exception:
        logger.exception("recompute failed")
        tb = traceback.format_exc()
        return "—", "—", gr.update(visible=True, value=f"### Error\n```\n{tb}\n```")


def blank_values() -> List[Any]:
    return [False if fid in FLAG_FIELDS else None for fid in FIELD_ORDER]


def example_values(example_case: Dict[str, Any]) -> List[Any]:
    return [example_case.get(fid, False if fid in FLAG_FIELDS else None) for fid in FIELD_ORDER]


def toggle_manual(on: bool):
    # manual VO₂ field vs. age / heart rate
    return gr.update(visible=on), gr.update(visible=not on), gr.update(visible=not on)


def toggle_dissolved(on: bool):
    # PaO₂ / PvO₂ fields
    return gr.update(visible=on), gr.update(visible=on)


def build_demo(settings: Optional[Dict[str, Any]] = None) -> gr.Blocks:
    settings = settings or DEFAULT_SETTINGS
    show_contents = bool((settings.get("ui") or {}).get("show_contents", False))
    example_case: Dict[str, Any] = dict(settings.get("example_case") or {})

    # --- UI registry: ensures mapping is always consistent ---
    field_components: List[Tuple[str, Any]] = []

    def reg(field_id: str, comp: Any) -> Any:
        field_components.append((field_id, comp))
        return comp

    with gr.Blocks(title=f"{APP_NAME} v{APP_VERSION}") as demo:
        gr.HTML(
            f"<div class='fick-container'><h2 style='margin-bottom:0'>{APP_NAME} "
            f"<span style='opacity:0.6;font-size:14px'>v{APP_VERSION}</span></h2>"
            "<div class='small-note'>Decision support only. Verify every value clinically.</div></div>"
        )

        with gr.Row():
            include_dissolved = reg("include_dissolved", gr.Checkbox(label="Include dissolved O₂ (0.0031 × PaO₂)", value=False))
            use_manual_vo2 = reg("use_manual_vo2", gr.Checkbox(label="Use manual VO₂", value=False))

        with gr.Row():
            manual_vo2 = reg("manual_vo2", gr.Number(label="Manual VO₂ (mL/min/m²)", visible=False))
            age = reg("age", gr.Number(label="Age (years)"))
            hr = reg("hr", gr.Number(label="Heart rate (bpm)"))

        with gr.Row():
            reg("hgb", gr.Number(label="Hemoglobin (g/dL)"))
            reg("sa_o2", gr.Number(label="Arterial O₂ sat (%)"))
            reg("sv_o2", gr.Number(label="Venous O₂ sat (%)"))
        with gr.Row():
            reg("pa_o2", gr.Number(label="PA O₂ sat (%)"))
            reg("pv_o2", gr.Number(label="PV O₂ sat (%)"))
        with gr.Row():
            pa_o2_mmhg = reg("pa_o2_mmhg", gr.Number(label="PaO₂ (mmHg)", visible=False))
            pv_o2_mmhg = reg("pv_o2_mmhg", gr.Number(label="PvO₂ (mmHg)", visible=False))
        with gr.Row():
            reg("mean_pap", gr.Number(label="Mean PAP (mmHg)"))
            reg("pcwp", gr.Number(label="PCWP (mmHg)"))
            reg("bsa", gr.Number(label="BSA (m²)"))

        error_md = gr.Markdown("", visible=False)
        results_md = gr.Markdown("—", elem_classes=["result-card"])
        validation_md = gr.Markdown("—", elem_classes=["result-card"])

        with gr.Row():
            btn_example = gr.Button("Load example", variant="secondary")
            btn_reset = gr.Button("Reset all", variant="stop")

        if tuple(fid for fid, _ in field_components) != FIELD_ORDER:
            raise RuntimeError("input registry does not match FIELD_ORDER")

        def _recompute(*vals):
            return recompute(vals, show_contents=show_contents)

        def _load_example() -> List[Any]:
            logger.info("loading example case")
            return example_values(example_case)

        # Bind actions
        input_components = [c for _, c in field_components]
        outputs = [results_md, validation_md, error_md]

        for comp in input_components:
            comp.change(_recompute, inputs=input_components, outputs=outputs)

        btn_example.click(_load_example, outputs=input_components)
        btn_reset.click(blank_values, outputs=input_components)

        use_manual_vo2.change(toggle_manual, inputs=[use_manual_vo2], outputs=[manual_vo2, age, hr])
        include_dissolved.change(toggle_dissolved, inputs=[include_dissolved], outputs=[pa_o2_mmhg, pv_o2_mmhg])

        demo.load(_recompute, inputs=input_components, outputs=outputs)

    return demo


def launch(settings: Dict[str, Any]) -> None:
    server = settings.get("server") or {}
    demo = build_demo(settings)
    logger.info("starting %s v%s on %s:%s", APP_NAME, APP_VERSION, server.get("name"), server.get("port"))
    launch_kwargs = dict(
        server_name=server.get("name", "0.0.0.0"),
        server_port=int(server.get("port", 7860)),
    )
    app = demo.queue(default_concurrency_limit=int(server.get("concurrency_limit", 16)))
    try:
        app.launch(**launch_kwargs, css=CSS)
    except TypeError:
        # Older Gradio versions do not accept css in launch()
        app.launch(**launch_kwargs)
