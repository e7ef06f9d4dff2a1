"""Base collector abstract class for Buildkite sub-scrapes."""

from abc import ABC, abstractmethod
import logging
from functools import wraps

from ..config.models import ExporterConfig
from ..services.buildkite_client import BuildkiteClient
from ..utils.metrics import MetricSnapshot, ScrapeResult


class BaseCollector(ABC):
    """Abstract base class for the builds and agents sub-scrapes."""

    name: str = ""

    def __init__(self, client: BuildkiteClient, config: ExporterConfig, logger: logging.Logger):
        """
        Initialize base collector.

        Args:
            client: Shared Buildkite API client
            config: Exporter configuration
            logger: Logger instance
        """
        self.client = client
        self.config = config
        self.logger = logger.getChild(self.__class__.__name__)

    @abstractmethod
    def collect(self, snapshot: MetricSnapshot) -> ScrapeResult:
        """
        Fetch from the API and update the snapshot in place.

        Args:
            snapshot: Snapshot owned by the collector, lock already held

        Returns:
            ScrapeResult: Outcome of the sub-scrape

        Raises:
            Exception: Any fetch errors (will be caught by safe_collect)

        Note:
            Implementations should use the @safe_collect decorator so that
            failures are counted and never escape the scrape engine.
        """
        pass


def safe_collect(func):
    """
    Decorator to handle sub-scrape exceptions gracefully.

    A failure increments the per-collector error counter on the snapshot,
    is logged, and comes back as a failed ScrapeResult.

    Args:
        func: Collector method to wrap

    Returns:
        Wrapped function that never raises
    """
    @wraps(func)
    def wrapper(self, snapshot: MetricSnapshot, *args, **kwargs):
        try:
            return func(self, snapshot, *args, **kwargs)
        except Exception as e:
            snapshot.record_scrape_error(self.name)
            self.logger.error(
                f"Scrape failed: {e}",
                exc_info=True,
                extra={"collector": self.name, "error_type": type(e).__name__}
            )
            return ScrapeResult(
                collector_name=self.name,
                success=False,
                error=str(e)
            )
    return wrapper
