"""Metric data structures shared by the scrape engine and collectors."""

from dataclasses import dataclass, field
from typing import Optional, Dict
import time
from .status import BUILD_STATES


SCRAPE_SOURCES = ("builds", "agents")


@dataclass
class ScrapeResult:
    """Standard result format from every sub-scrape."""

    collector_name: str
    success: bool
    count: int = 0  # Items returned by the API
    error: Optional[str] = None
    timestamp: Optional[float] = None

    def __post_init__(self):
        """Set timestamp if not provided."""
        if self.timestamp is None:
            self.timestamp = time.time()


@dataclass
class MetricSnapshot:
    """
    Current values exposed on the metrics endpoint.

    Created once at startup and mutated in place by the scrape engine
    while the collector lock is held.
    """

    builds_by_state: Dict[str, int] = field(
        default_factory=lambda: {state: 0 for state in BUILD_STATES}
    )
    agent_count: int = 0
    up: bool = False
    last_scrape_error: bool = False
    last_scrape_duration_seconds: float = 0.0
    scrapes_total: int = 0
    scrape_errors_total: Dict[str, int] = field(
        default_factory=lambda: {source: 0 for source in SCRAPE_SOURCES}
    )

    def reset_builds(self) -> None:
        """Zero every known build state label."""
        for state in BUILD_STATES:
            self.builds_by_state[state] = 0

    def record_scrape_error(self, collector_name: str) -> None:
        """Increment the error counter of one sub-scrape."""
        self.scrape_errors_total[collector_name] = (
            self.scrape_errors_total.get(collector_name, 0) + 1
        )
