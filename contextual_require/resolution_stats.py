"""Counters and timings collected while resolving imports."""

import json
import time
from collections import Counter
from pathlib import Path
from typing import Any

COUNTER_NAMES = (
    "requests",
    "passthrough",
    "direct",
    "context_cache_hits",
    "global_cache_hits",
    "absolute_resolutions",
    "ambiguous_resolutions",
    "fallback_resolutions",
    "failures",
)


class ResolutionStats:
    """Collects resolver instrumentation for one generator.

    Counters are only recorded when `instrumentation` is on and durations only
    when `track_performance` is on, so a disabled collector costs nothing.
    """

    def __init__(
        self, *, instrumentation: bool = False, track_performance: bool = False
    ) -> None:
        """Initialize empty counters and timings."""
        self.instrumentation = instrumentation
        self.track_performance = track_performance
        self.counters: Counter[str] = Counter()
        self.durations: list[float] = []
        self.slowest: tuple[str, float] | None = None
        self.start_time = time.time()

    def count(self, name: str) -> None:
        """Increment a named counter."""
        if self.instrumentation:
            self.counters[name] += 1

    def record_duration(self, request: str, seconds: float) -> None:
        """Record how long one request took."""
        if not self.track_performance:
            return
        self.durations.append(seconds)
        if self.slowest is None or seconds > self.slowest[1]:
            self.slowest = (request, seconds)

    def summary(self) -> dict[str, Any]:
        """Return counters and timing aggregates."""
        total = sum(self.durations)
        count = len(self.durations)
        return {
            "counters": {name: self.counters.get(name, 0) for name in COUNTER_NAMES},
            "timings": {
                "samples": count,
                "total_seconds": total,
                "mean_seconds": (total / count) if count else 0.0,
                "max_seconds": max(self.durations) if self.durations else 0.0,
                "slowest_request": self.slowest[0] if self.slowest else None,
            },
        }

    def write_report(self, path: str | Path) -> None:
        """Write the summary to a JSON file."""
        report = {
            "meta": {
                "timestamp": time.time(),
                "duration": time.time() - self.start_time,
                "instrumentation": self.instrumentation,
                "track_performance": self.track_performance,
            },
            "stats": self.summary(),
        }
        Path(path).write_text(json.dumps(report, indent=2), encoding="utf-8")
