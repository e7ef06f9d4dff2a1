"""Agent count collector."""

from ..utils.metrics import MetricSnapshot, ScrapeResult
from .base import BaseCollector, safe_collect


class AgentsCollector(BaseCollector):
    """Tracks how many agents are connected to the organization."""

    name = "agents"

    @safe_collect
    def collect(self, snapshot: MetricSnapshot) -> ScrapeResult:
        # On failure agent_count keeps the last successful value
        agents = self.client.list_agents(self.config.org_name)
        snapshot.agent_count = len(agents)

        return ScrapeResult(
            collector_name=self.name,
            success=True,
            count=len(agents)
        )
