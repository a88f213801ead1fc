"""In-memory telemetry for tests and local runs without a metrics endpoint."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field

type Labels = tuple[tuple[str, str], ...]
type SeriesKey = tuple[str, Labels]


def _series(name: str, labels: Labels) -> SeriesKey:
    # Label order does not identify a series.
    return name, tuple(sorted(labels))


@dataclass
class InMemoryTelemetry:
    """Keeps every relay metric series in plain dicts keyed by ``(name, labels)``."""

    counters: dict[SeriesKey, int] = field(default_factory=lambda: defaultdict(int))
    gauges: dict[SeriesKey, float] = field(default_factory=dict)
    timings: dict[SeriesKey, list[float]] = field(default_factory=lambda: defaultdict(list))

    def incr(self, name: str, value: int = 1, labels: Labels = ()) -> None:
        self.counters[_series(name, labels)] += value

    def gauge(self, name: str, value: float, labels: Labels = ()) -> None:
        self.gauges[_series(name, labels)] = value

    def timing(self, name: str, value: float, labels: Labels = ()) -> None:
        self.timings[_series(name, labels)].append(value)

    def get_counter(self, name: str, labels: Labels = ()) -> int:
        return self.counters.get(_series(name, labels), 0)

    def get_gauge(self, name: str, labels: Labels = ()) -> float | None:
        return self.gauges.get(_series(name, labels))

    def get_timing_values(self, name: str, labels: Labels = ()) -> list[float]:
        return list(self.timings.get(_series(name, labels), ()))

    def total(self, name: str) -> int:
        """Sum of a counter across all label combinations."""
        return sum(v for (series, _), v in self.counters.items() if series == name)

    def reset(self) -> None:
        self.counters.clear()
        self.gauges.clear()
        self.timings.clear()
