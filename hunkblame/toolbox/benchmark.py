# -----------------------------------------------------------------------------
# Copyright (C) 2025 Iliyas Jorio.
# This file is part of HunkBlame, distributed under the GNU GPL v3.
# For full terms, see the included LICENSE file.
# -----------------------------------------------------------------------------

import logging
import os
import time

import psutil

BENCHMARK_LOGGING_LEVEL = 5

logger = logging.getLogger(__name__)
logging.addLevelName(BENCHMARK_LOGGING_LEVEL, "BENCHMARK")


def getRSS() -> int:
    return psutil.Process(os.getpid()).memory_info().rss


class Benchmark:
    """
    Context manager that reports how long a piece of code takes to run.

    Set `units` inside the block (e.g. number of commits replayed) to also
    get a throughput figure in the report.
    """

    nesting: list[str] = []

    def __init__(self, name: str, unitName: str = ""):
        self.name = name
        self.unitName = unitName
        self.units = 0
        self.startTime = 0.0
        self.startBytes = 0
        self.elapsedMs = 0.0

    def __enter__(self):
        Benchmark.nesting.append(self.name)
        self.units = 0
        self.startBytes = getRSS()
        self.startTime = time.perf_counter()
        return self

    def __exit__(self, exc_type=None, exc_value=None, traceback=None):
        self.elapsedMs = 1000 * (time.perf_counter() - self.startTime)
        kb = (getRSS() - self.startBytes) // 1024

        description = "/".join(Benchmark.nesting)
        if self.unitName and self.units:
            description += f" ({self.units:,d} {self.unitName}, {self.elapsedMs / self.units:.3f} ms each)"
        if exc_type:
            description += f" (EXCEPTION RAISED! {exc_type.__name__})"
        logger.log(BENCHMARK_LOGGING_LEVEL, f"{self.elapsedMs:8.1f} ms {kb:6,d}K {description}")

        Benchmark.nesting.pop()
        self.startTime = 0.0
