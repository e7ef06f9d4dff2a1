"""Prometheus collector exposing the Buildkite scrape snapshot."""

import threading
from typing import Iterable, List

from prometheus_client.core import CounterMetricFamily, GaugeMetricFamily, Metric
from prometheus_client.registry import Collector

from .exporter import ScrapeEngine
from .utils.metrics import MetricSnapshot


class BuildkiteCollector(Collector):
    """
    Custom collector that scrapes Buildkite on every pull.

    Concurrent pulls are fully serialized: a second collect() waits until
    the running cycle, network round-trips included, has finished.
    """

    def __init__(self, engine: ScrapeEngine, namespace: str = "buildkite"):
        """
        Initialize collector.

        Args:
            engine: Scrape engine used for every cycle
            namespace: Metric name prefix
        """
        self.engine = engine
        self.namespace = namespace
        self._lock = threading.Lock()
        self._snapshot = MetricSnapshot()

    @property
    def snapshot(self) -> MetricSnapshot:
        return self._snapshot

    def describe(self) -> Iterable[Metric]:
        """Static metric families, no scrape performed."""
        return self._families(None)

    def collect(self) -> Iterable[Metric]:
        """
        Run one scrape cycle and emit the resulting snapshot.

        Families are built while the lock is held and yielded after release,
        so a reader never sees a half-updated snapshot. If the engine raises,
        nothing is emitted.
        """
        with self._lock:
            self._snapshot.reset_builds()
            self.engine.run(self._snapshot)
            families = self._families(self._snapshot)

        yield from families

    def _name(self, suffix: str) -> str:
        return f"{self.namespace}_{suffix}"

    def _families(self, snapshot: MetricSnapshot = None) -> List[Metric]:
        builds = GaugeMetricFamily(
            self._name("builds"),
            "Number of builds per state.",
            labels=["state"]
        )
        scrape_errors = CounterMetricFamily(
            self._name("scrape_errors_total"),
            "Total number of times an error occurred scraping Buildkite.",
            labels=["collector"]
        )
        agents = GaugeMetricFamily(
            self._name("agents"),
            "Number of agents."
        )
        duration = GaugeMetricFamily(
            self._name("last_scrape_duration_seconds"),
            "Duration of the last scrape of metrics from Buildkite."
        )
        scrapes = CounterMetricFamily(
            self._name("scrapes_total"),
            "Total number of times Buildkite was scraped for metrics."
        )
        error = GaugeMetricFamily(
            self._name("last_scrape_error"),
            "Whether the last scrape of builds from Buildkite resulted in an error "
            "(1 for error, 0 for success)."
        )
        up = GaugeMetricFamily(
            self._name("up"),
            "Whether the last scrape cycle of Buildkite completed."
        )

        if snapshot is not None:
            for state, count in snapshot.builds_by_state.items():
                builds.add_metric([state], count)
            for collector_name, count in snapshot.scrape_errors_total.items():
                scrape_errors.add_metric([collector_name], count)
            agents.add_metric([], snapshot.agent_count)
            duration.add_metric([], snapshot.last_scrape_duration_seconds)
            scrapes.add_metric([], snapshot.scrapes_total)
            error.add_metric([], 1 if snapshot.last_scrape_error else 0)
            up.add_metric([], 1 if snapshot.up else 0)

        return [builds, scrape_errors, agents, duration, scrapes, error, up]
