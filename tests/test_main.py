"""Tests for the CLI entry point and application wiring."""

import pytest

from buildkite_exporter import main as main_module
from buildkite_exporter.main import ExporterApp, build_parser, main
from buildkite_exporter.services.buildkite_client import BuildkiteClient


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for var in ("BUILDKITE_TOKEN", "BUILDKITE_ORGNAME", "BUILDKITE_TIMEOUT", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def offline(monkeypatch):
    """Keep the real client class but never touch the network."""
    monkeypatch.setattr(BuildkiteClient, "list_builds", lambda self, org: [])
    monkeypatch.setattr(BuildkiteClient, "list_agents", lambda self, org: [])


def test_parser_dotted_flags():
    """Test the historical flag names map onto config fields."""
    args = build_parser().parse_args([
        "--buildkite.token", "tok",
        "--buildkite.orgname", "acme",
        "--buildkite.timeout", "2.5",
        "--web.listen-address", "127.0.0.1:9300",
        "--web.telemetry-path", "/bk",
    ])

    assert args.token == "tok"
    assert args.org_name == "acme"
    assert args.timeout_seconds == 2.5
    assert args.listen_address == "127.0.0.1:9300"
    assert args.metrics_path == "/bk"
    assert args.config is None


def test_version_flag(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert capsys.readouterr().out.startswith("buildkite_exporter ")


def test_missing_token_is_fatal():
    """Test the exporter refuses to start without credentials."""
    with pytest.raises(SystemExit) as exc_info:
        ExporterApp(overrides={"org_name": "acme"})

    assert exc_info.value.code == 1


def test_missing_config_file_is_fatal(tmp_path):
    with pytest.raises(SystemExit) as exc_info:
        ExporterApp(overrides={"token": "t", "org_name": "acme"},
                    config_path=str(tmp_path / "nope.yaml"))

    assert exc_info.value.code == 1


def test_app_registers_collector_and_build_info(offline):
    """Test the registry exposes scrape metrics and the version info."""
    app = ExporterApp(overrides={"token": "t", "org_name": "acme", "metrics_path": "/bk"})
    try:
        assert app.config.metrics_path == "/bk"
        assert app.registry.get_sample_value("buildkite_up") == 1
        info = app.registry.get_sample_value(
            "buildkite_exporter_build_info",
            {"version": main_module.get_version(), "python": main_module.sys.version.split()[0]}
        )
        assert info == 1
    finally:
        app.client.close()


def test_main_passes_flags_to_app(monkeypatch):
    """Test main() builds the app from CLI flags and runs it."""
    created = {}

    class FakeApp:
        def __init__(self, overrides=None, config_path=None):
            created["overrides"] = overrides
            created["config_path"] = config_path

        def run(self):
            created["ran"] = True

    monkeypatch.setattr(main_module, "ExporterApp", FakeApp)

    main(["--buildkite.token", "tok", "--buildkite.orgname", "acme", "--config", "c.yaml"])

    assert created["ran"] is True
    assert created["config_path"] == "c.yaml"
    assert created["overrides"]["token"] == "tok"
    assert created["overrides"]["org_name"] == "acme"
    assert created["overrides"]["metrics_path"] is None
