# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import sys as _sys
import os as _os


def _envBool(key: str) -> bool:
    return _os.environ.get(key, "") not in ["", "0"]


APP_VERSION = "1.0.0"
APP_DISPLAY_NAME = "HunkBlame"

APP_TESTMODE = _envBool("APP_TESTMODE") or "pytest" in _sys.modules
"""
Unit testing mode.
Can be forced with environment variable APP_TESTMODE.
"""

APP_DEBUG = APP_TESTMODE or _envBool("APP_DEBUG")
"""
Enable expensive assertions (e.g. line conservation after each replayed commit).
Can be forced with environment variable APP_DEBUG.
Implied by APP_TESTMODE.
"""

APP_PREFS_ENV = "HUNKBLAME_PREFS"
"""
Environment variable pointing to a JSON prefs file.
"""

NULL_HASH = ""
"""
Attribution of lines that no commit accounts for (e.g. lines that survive
untouched until the end of history, in a future blame vector).
"""

if APP_TESTMODE:
    APP_DISPLAY_NAME += "TestMode"
