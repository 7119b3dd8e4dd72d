#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
fick_app_web.py

Starts the Fick calculator web UI.

Usage:
    python fick_app_web.py [settings.yaml]

$FICK_SETTINGS may point to a YAML settings file, $PORT overrides the port.
"""
from __future__ import annotations

import sys

from fick.settings import configure_logging, load_settings
from fick.ui import launch


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    settings = load_settings(argv[0] if argv else None)
    configure_logging(settings)
    launch(settings)
    return 0


if __name__ == "__main__":
    sys.exit(main())
