"""
Metrics sink for generation stages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

logger = logging.getLogger(__name__)


class MetricsListener(Protocol):
    """Receives one measurement per pipeline stage."""

    def emit_metric(self, name: str, duration_ms: float, item_count: int | None = None) -> None: ...

    def on_complete(self) -> None: ...


@dataclass
class Metric:
    name: str
    duration_ms: float
    item_count: int | None = None


@dataclass
class SimpleMetricsCollector:
    """Collects metrics in memory and logs a summary when verbose."""

    verbose: bool = False
    metrics: list[Metric] = field(default_factory=list)

    def emit_metric(self, name: str, duration_ms: float, item_count: int | None = None) -> None:
        self.metrics.append(Metric(name, duration_ms, item_count))
        if self.verbose:
            suffix = f" ({item_count} items)" if item_count is not None else ""
            logger.info("%s: %.2fms%s", name, duration_ms, suffix)

    def on_complete(self) -> None:
        if not self.verbose:
            return
        total = sum(m.duration_ms for m in self.metrics if m.name == "total-generation")
        slowest = sorted(
            (m for m in self.metrics if m.name != "total-generation"),
            key=lambda m: m.duration_ms,
            reverse=True,
        )[:5]
        logger.info("Generation finished in %.2fms", total)
        for metric in slowest:
            logger.info("  %-28s %10.2fms", metric.name, metric.duration_ms)

    def get(self, name: str) -> Metric | None:
        for metric in self.metrics:
            if metric.name == name:
                return metric
        return None
