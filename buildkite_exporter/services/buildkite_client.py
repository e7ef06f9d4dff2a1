"""Buildkite REST API client."""

import logging
from typing import Any, List, Optional

import httpx
from pydantic import BaseModel, ConfigDict, ValidationError

from ..config.models import ExporterConfig


class BuildkiteAPIError(Exception):
    """Transport or API-level failure talking to Buildkite."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class Build(BaseModel):
    """Subset of a Buildkite build used by the exporter."""
    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    number: Optional[int] = None
    state: Optional[str] = None


class Agent(BaseModel):
    """Buildkite agent record, kept opaque."""
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None


class BuildkiteClient:
    """
    Thin synchronous client for the Buildkite organization endpoints.

    The underlying httpx.Client is shared by every scrape and is not
    reconfigured after construction.
    """

    def __init__(
        self,
        config: ExporterConfig,
        logger: logging.Logger = None,
        transport: httpx.BaseTransport = None
    ):
        """
        Initialize Buildkite client.

        Args:
            config: Exporter configuration (token, API URL, timeout)
            logger: Optional logger instance
            transport: Optional httpx transport, used by tests
        """
        self.logger = logger or logging.getLogger(__name__)
        self._http = httpx.Client(
            base_url=config.api_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Accept": "application/json",
            },
            timeout=config.timeout_seconds,
            transport=transport,
        )

    def list_builds(self, org: str) -> List[Build]:
        """
        List builds of an organization (first page).

        Args:
            org: Organization slug

        Returns:
            List[Build]: Builds returned by the API

        Raises:
            BuildkiteAPIError: On transport, HTTP or payload errors
        """
        payload = self._get_list(f"organizations/{org}/builds")
        try:
            return [Build.model_validate(item) for item in payload]
        except ValidationError as e:
            raise BuildkiteAPIError(f"Malformed builds payload: {e}") from e

    def list_agents(self, org: str) -> List[Agent]:
        """
        List agents connected to an organization (first page).

        Args:
            org: Organization slug

        Returns:
            List[Agent]: Agents returned by the API

        Raises:
            BuildkiteAPIError: On transport, HTTP or payload errors
        """
        payload = self._get_list(f"organizations/{org}/agents")
        try:
            return [Agent.model_validate(item) for item in payload]
        except ValidationError as e:
            raise BuildkiteAPIError(f"Malformed agents payload: {e}") from e

    def _get_list(self, path: str) -> List[Any]:
        """
        GET a JSON list, releasing the response on every exit path.

        Args:
            path: Path relative to the API base URL

        Returns:
            List[Any]: Decoded JSON array

        Raises:
            BuildkiteAPIError: On transport, HTTP or payload errors
        """
        self.logger.debug(f"GET {path}")

        try:
            with self._http.stream("GET", path) as response:
                response.read()
                if response.status_code >= 400:
                    raise BuildkiteAPIError(
                        f"HTTP {response.status_code} from {path}",
                        status_code=response.status_code
                    )
                payload = response.json()

        except httpx.TimeoutException as e:
            raise BuildkiteAPIError(f"Request timeout for {path}") from e

        except httpx.RequestError as e:
            raise BuildkiteAPIError(f"Request error for {path}: {e}") from e

        except ValueError as e:
            raise BuildkiteAPIError(f"Invalid JSON from {path}: {e}") from e

        if not isinstance(payload, list):
            raise BuildkiteAPIError(f"Expected a JSON array from {path}")

        return payload

    def close(self) -> None:
        """Release pooled connections."""
        self._http.close()

    def __enter__(self) -> "BuildkiteClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
