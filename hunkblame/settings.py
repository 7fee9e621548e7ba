# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import dataclasses
import enum
import json
import logging
import os

from hunkblame.appconsts import APP_PREFS_ENV, APP_TESTMODE
from hunkblame.toolbox.benchmark import BENCHMARK_LOGGING_LEVEL

logger = logging.getLogger(__name__)


class LoggingLevel(enum.IntEnum):
    Benchmark = BENCHMARK_LOGGING_LEVEL
    Debug = logging.DEBUG
    Info = logging.INFO
    Warning = logging.WARNING


@dataclasses.dataclass
class Prefs:
    hashLength                  : int                   = 16
    maxCommits                  : int                   = 1_000_000
    maxLines                    : int                   = 10_000_000
    loggingLevel                : LoggingLevel          = LoggingLevel.Warning

    @classmethod
    def load(cls, path: str = "") -> "Prefs":
        """
        Load prefs from a JSON file.

        If no path is given, fall back to the file named by the HUNKBLAME_PREFS
        environment variable (ignored in test mode). Missing keys keep their
        default values; unknown keys are ignored with a warning.
        """
        prefs = cls()

        if not path and not APP_TESTMODE:
            path = os.environ.get(APP_PREFS_ENV, "")
        if not path:
            return prefs

        with open(path, encoding="utf-8") as f:
            jsonObject = json.load(f)

        if not isinstance(jsonObject, dict):
            raise ValueError(f"prefs file must contain a JSON object: {path}")

        prefs.update(jsonObject)
        logger.debug(f"Loaded prefs from {path}")
        return prefs

    def update(self, values: dict):
        fieldTypes = {f.name: f.type for f in dataclasses.fields(self)}

        for key, value in values.items():
            try:
                fieldType = fieldTypes[key]
            except KeyError:
                logger.warning(f"Unknown pref: {key}")
                continue

            if issubclass(fieldType, enum.Enum):
                # Accept either the value (5, 10...) or the name ("Debug"...)
                try:
                    value = fieldType(value)
                except ValueError:
                    try:
                        value = fieldType[value]
                    except KeyError:
                        raise ValueError(f"pref {key}: unknown value {value!r}") from None
            elif not isinstance(value, fieldType) or isinstance(value, bool):
                raise TypeError(f"pref {key} should be {fieldType.__name__}, got {type(value).__name__}")
            elif value <= 0:
                raise ValueError(f"pref {key} must be positive")

            setattr(self, key, value)
