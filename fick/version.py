# -*- coding: utf-8 -*-
APP_NAME = "Fick Calculator"
APP_VERSION = "1.0.0"
