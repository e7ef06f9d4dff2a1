"""Build state collector."""

from collections import Counter

from ..utils.metrics import MetricSnapshot, ScrapeResult
from ..utils.status import BuildState
from .base import BaseCollector, safe_collect


class BuildsCollector(BaseCollector):
    """Counts the organization's builds per state."""

    name = "builds"

    @safe_collect
    def collect(self, snapshot: MetricSnapshot) -> ScrapeResult:
        """
        Fetch builds and increment one state bucket per build.

        The snapshot's build counters are expected to be zeroed beforehand,
        so a failed fetch leaves them at zero.

        Args:
            snapshot: Snapshot to update

        Returns:
            ScrapeResult: Number of builds counted
        """
        builds = self.client.list_builds(self.config.org_name)

        states = Counter(BuildState.from_api(build.state) for build in builds)

        if states[BuildState.UNKNOWN]:
            raw = sorted({str(b.state) for b in builds
                          if BuildState.from_api(b.state) is BuildState.UNKNOWN})
            self.logger.warning(
                f"{states[BuildState.UNKNOWN]} build(s) with unrecognized state: {', '.join(raw)}",
                extra={"collector": self.name}
            )

        for state, count in states.items():
            snapshot.builds_by_state[state.value] += count

        self.logger.debug(f"Counted {len(builds)} builds", extra={"collector": self.name})

        return ScrapeResult(
            collector_name=self.name,
            success=True,
            count=len(builds)
        )
