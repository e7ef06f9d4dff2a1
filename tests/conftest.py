"""Shared pytest configuration and fixtures."""

import pytest
from unittest.mock import Mock

from buildkite_exporter.config.models import ExporterConfig
from buildkite_exporter.services.buildkite_client import Agent, Build, BuildkiteClient
from buildkite_exporter.utils.logger import setup_logger
from buildkite_exporter.utils.metrics import MetricSnapshot


@pytest.fixture
def config():
    """Minimal valid exporter configuration."""
    return ExporterConfig(token="test-token", org_name="acme", timeout_seconds=2.0)


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test")


@pytest.fixture
def snapshot():
    """Fresh zeroed snapshot."""
    return MetricSnapshot()


def _builds(*states):
    return [Build(id=f"b{i}", number=i, state=state) for i, state in enumerate(states)]


def _agents(count):
    return [Agent(id=f"a{i}", name=f"agent-{i}") for i in range(count)]


@pytest.fixture
def make_builds():
    """Factory for build records with the given states."""
    return _builds


@pytest.fixture
def make_agents():
    """Factory for opaque agent records."""
    return _agents


@pytest.fixture
def client():
    """Mocked Buildkite client returning no builds and no agents."""
    mock_client = Mock(spec=BuildkiteClient)
    mock_client.list_builds.return_value = []
    mock_client.list_agents.return_value = []
    return mock_client
