"""Scrape engine: one sequential scrape cycle against the Buildkite API."""

import time
import logging
from typing import Dict

from .config.models import ExporterConfig
from .services.buildkite_client import BuildkiteClient
from .utils.metrics import MetricSnapshot, ScrapeResult
from .utils.logger import setup_logger

from .collectors.builds_collector import BuildsCollector
from .collectors.agents_collector import AgentsCollector


class ScrapeEngine:
    """
    Runs the builds and agents sub-scrapes and records scrape health.

    Sub-scrapes run one after another; a failing builds scrape never skips
    the agents scrape. Errors are counted per sub-scrape and never raised.
    """

    def __init__(
        self,
        client: BuildkiteClient,
        config: ExporterConfig,
        logger: logging.Logger = None
    ):
        """
        Initialize scrape engine.

        Args:
            client: Shared Buildkite API client
            config: Exporter configuration
            logger: Optional logger instance
        """
        self.config = config
        self.logger = logger or setup_logger("exporter")

        self.builds = BuildsCollector(client, config, self.logger)
        self.agents = AgentsCollector(client, config, self.logger)

    def run(self, snapshot: MetricSnapshot) -> Dict[str, ScrapeResult]:
        """
        Execute one scrape cycle, updating the snapshot in place.

        The caller holds the snapshot lock and has already zeroed the build
        counters.

        Args:
            snapshot: Snapshot to update

        Returns:
            Dict[str, ScrapeResult]: Sub-scrape results keyed by collector name
        """
        snapshot.scrapes_total += 1
        start_time = time.monotonic()

        builds_result = self.builds.collect(snapshot)
        agents_result = self.agents.collect(snapshot)

        snapshot.up = True
        snapshot.last_scrape_duration_seconds = time.monotonic() - start_time
        # Only the builds scrape drives the error gauge; agents failures show
        # up in scrape_errors_total alone.
        snapshot.last_scrape_error = not builds_result.success

        self.logger.debug(
            f"Scrape cycle finished in {snapshot.last_scrape_duration_seconds:.3f}s",
            extra={
                "builds_ok": builds_result.success,
                "agents_ok": agents_result.success,
                "builds": builds_result.count,
                "agents": agents_result.count,
            }
        )

        return {
            builds_result.collector_name: builds_result,
            agents_result.collector_name: agents_result,
        }
