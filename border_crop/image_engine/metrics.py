"""Outcome counters and processing-time aggregates for the auto-crop pipeline.

``process_image`` bumps one counter per outcome (``autocrop.cropped``,
``autocrop.unchanged``) plus ``autocrop.failed.<kind>`` for real failures,
and times itself under ``autocrop.process``. Timings are folded into a fixed
size aggregate per key, so a long-lived host does not grow with every image.

Usage:
    from border_crop.image_engine.metrics import metrics
    with metrics.timed("autocrop.process"):
        ...
    metrics.inc("autocrop.cropped")
    metrics.timing("autocrop.process").mean
"""

from __future__ import annotations

import time
from collections import defaultdict
from contextlib import contextmanager
from dataclasses import dataclass
from threading import RLock


@dataclass
class Timing:
    count: int = 0
    total: float = 0.0
    max: float = 0.0

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0

    def add(self, elapsed: float) -> None:
        self.count += 1
        self.total += elapsed
        if elapsed > self.max:
            self.max = elapsed


class _Metrics:
    def __init__(self) -> None:
        self._counters: dict[str, int] = defaultdict(int)
        self._timings: dict[str, Timing] = defaultdict(Timing)
        self._lock = RLock()

    def inc(self, key: str, amount: int = 1) -> None:
        with self._lock:
            self._counters[key] += int(amount)

    def count(self, key: str) -> int:
        with self._lock:
            return self._counters.get(key, 0)

    def add_timing(self, key: str, elapsed: float) -> None:
        with self._lock:
            self._timings[key].add(elapsed)

    def timing(self, key: str) -> Timing:
        """A copy of the aggregate for ``key``; all zeros when nothing was timed."""
        with self._lock:
            agg = self._timings.get(key)
            return Timing(agg.count, agg.total, agg.max) if agg else Timing()

    @contextmanager
    def timed(self, key: str):
        start = time.perf_counter()
        try:
            yield
        finally:
            self.add_timing(key, time.perf_counter() - start)

    def reset(self) -> None:
        with self._lock:
            self._counters.clear()
            self._timings.clear()


metrics = _Metrics()
