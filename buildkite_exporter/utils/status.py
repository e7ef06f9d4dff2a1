"""Buildkite build state enumeration."""

from enum import Enum
from typing import Optional, Tuple


class BuildState(Enum):
    """Build states reported by the Buildkite REST API."""

    RUNNING = "running"
    SCHEDULED = "scheduled"
    PASSED = "passed"
    FAILED = "failed"
    BLOCKED = "blocked"
    CANCELED = "canceled"
    CANCELING = "canceling"
    SKIPPED = "skipped"
    NOT_RUN = "not_run"
    FINISHED = "finished"
    UNKNOWN = "unknown"

    @classmethod
    def from_api(cls, value: Optional[str]) -> "BuildState":
        """
        Map a raw API state string to a build state.

        Args:
            value: State string from the API payload (may be None)

        Returns:
            BuildState: Matching member, or UNKNOWN for anything outside the fixed set
        """
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.lower())
        except ValueError:
            return cls.UNKNOWN


# Label values pre-seeded on every scrape cycle
BUILD_STATES: Tuple[str, ...] = tuple(state.value for state in BuildState)
