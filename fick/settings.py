# -*- coding: utf-8 -*-
"""
Host settings for the web app.

Defaults live in DEFAULT_SETTINGS. An optional YAML file (path argument or
$FICK_SETTINGS) is deep-merged on top; $PORT overrides server.port.
Nothing here reaches the calculation engine.
"""
from __future__ import annotations

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

logger = logging.getLogger(__name__)

SETTINGS_ENV = "FICK_SETTINGS"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "server": {
        "name": "0.0.0.0",
        "port": 7860,
        "concurrency_limit": 16,
    },
    "logging": {
        "level": "INFO",
    },
    "ui": {
        # show O₂ contents + formula trace under the results
        "show_contents": False,
    },
    # loaded by the "Load example" button
    "example_case": {
        "age": 40,
        "hr": 70,
        "hgb": 14,
        "sa_o2": 98,
        "sv_o2": 70,
        "pa_o2": 75,
        "pv_o2": 98,
        "pa_o2_mmhg": 95,
        "pv_o2_mmhg": 100,
        "mean_pap": 25,
        "pcwp": 10,
        "bsa": 1.9,
        "manual_vo2": None,
        "include_dissolved": False,
        "use_manual_vo2": False,
    },
}


def deep_merge_dict(base: Dict[str, Any], patch: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Recursive merge:
    - dict + dict -> merge
    - otherwise patch replaces base
    """
    out = copy.deepcopy(base)
    for k, v in patch.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge_dict(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        logger.info("settings file %s not found, using defaults", path)
        return {}
    with path.open("r", encoding="utf-8") as f:
        obj = yaml.safe_load(f) or {}
    if not isinstance(obj, dict):
        raise ValueError(f"{path}: expected a mapping at top level, got {type(obj).__name__}")
    return obj


def load_settings(
    path: Optional[Union[str, Path]] = None,
    env: Optional[Mapping[str, str]] = None,
) -> Dict[str, Any]:
    env = os.environ if env is None else env
    settings = copy.deepcopy(DEFAULT_SETTINGS)

    if path is None and env.get(SETTINGS_ENV):
        path = env[SETTINGS_ENV]
    if path is not None:
        settings = deep_merge_dict(settings, load_yaml(Path(path)))

    port = env.get("PORT")
    if port:
        try:
            settings["server"]["port"] = int(port)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {port!r}") from None
    return settings


def configure_logging(settings: Mapping[str, Any]) -> None:
    level_name = str((settings.get("logging") or {}).get("level", "INFO")).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise ValueError(f"unknown logging level {level_name!r}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
