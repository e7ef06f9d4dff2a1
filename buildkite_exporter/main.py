"""Main application entry point for the Buildkite Prometheus exporter."""

import argparse
import logging
import signal
import sys
import threading
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict, Optional

from prometheus_client import CollectorRegistry, Info
from pydantic import ValidationError

from .collector import BuildkiteCollector
from .config.loader import ConfigLoader
from .config.models import ExporterConfig
from .config.settings import Settings
from .exporter import ScrapeEngine
from .server import create_app, serve
from .services.buildkite_client import BuildkiteClient
from .utils.logger import setup_logger


def get_version() -> str:
    try:
        return version("buildkite-exporter")
    except PackageNotFoundError:
        return "0.0.0+unknown"


class ExporterApp:
    """
    Main exporter application.

    Wires configuration, API client, scrape engine and collector together
    and serves the metrics endpoint until interrupted.
    """

    def __init__(
        self,
        overrides: Optional[Dict[str, Any]] = None,
        config_path: Optional[str] = None
    ):
        """
        Initialize exporter application.

        Args:
            overrides: Configuration values from the command line
            config_path: Optional YAML configuration file

        Raises:
            SystemExit: If configuration is invalid
        """
        self.logger = setup_logger("buildkite_exporter")
        self.server = None

        self.config = self._load_config(overrides, config_path)
        self.logger.setLevel(self.config.log_level)

        self.client = BuildkiteClient(self.config, self.logger)
        self.engine = ScrapeEngine(self.client, self.config, self.logger)
        self.collector = BuildkiteCollector(self.engine, namespace=self.config.namespace)

        self.registry = CollectorRegistry()
        self.registry.register(self.collector)
        build_info = Info(
            "exporter_build",
            "Build information of the Buildkite exporter.",
            namespace=self.config.namespace,
            registry=self.registry
        )
        build_info.info({"version": get_version(), "python": sys.version.split()[0]})

        self.logger.info("Exporter initialized", extra={
            "version": get_version(),
            "org": self.config.org_name,
        })

    def _load_config(
        self,
        overrides: Optional[Dict[str, Any]],
        config_path: Optional[str]
    ) -> ExporterConfig:
        """
        Load and validate configuration.

        Returns:
            ExporterConfig: Loaded configuration

        Raises:
            SystemExit: If configuration is invalid or missing
        """
        try:
            return ConfigLoader.from_sources(overrides, config_path)

        except FileNotFoundError as e:
            self.logger.error(str(e))
            sys.exit(1)

        except ValidationError as e:
            self.logger.error(
                f"Invalid configuration: {e}",
                extra={"error_type": type(e).__name__}
            )
            sys.exit(1)

    def _signal_handler(self, signum, frame):
        """
        Handle shutdown signals.

        Args:
            signum: Signal number
            frame: Current stack frame
        """
        signal_name = signal.Signals(signum).name
        self.logger.info(f"Received {signal_name}, initiating graceful shutdown...")
        if self.server is not None:
            # shutdown() blocks until serve_forever returns, so call it off-thread
            threading.Thread(target=self.server.shutdown, daemon=True).start()

    def run(self):
        """Serve the metrics endpoint until SIGTERM/SIGINT."""
        signal.signal(signal.SIGTERM, self._signal_handler)
        signal.signal(signal.SIGINT, self._signal_handler)

        app = create_app(self.registry, self.config.metrics_path)
        host, port = self.config.listen()
        self.server = serve(app, host, port)

        self.logger.info(f"Listening on {self.config.listen_address}", extra={
            "metrics_path": self.config.metrics_path,
        })

        try:
            self.server.serve_forever()
        finally:
            self.server.server_close()
            self.client.close()
            self.logger.info("Exporter stopped")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Prometheus exporter for Buildkite builds and agents',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Token and organization from the environment
  BUILDKITE_TOKEN=... BUILDKITE_ORGNAME=my-org buildkite-exporter

  # Explicit flags
  buildkite-exporter --buildkite.token ... --buildkite.orgname my-org --web.listen-address :9209

  # YAML configuration file
  buildkite-exporter --config /etc/buildkite-exporter.yaml
        """
    )

    parser.add_argument('--version', action='store_true',
                        help='Print version information and exit')
    parser.add_argument('--config', default=None,
                        help='Path to YAML configuration file')
    parser.add_argument('--buildkite.token', dest='token', default=None,
                        help='Buildkite API token [BUILDKITE_TOKEN]')
    parser.add_argument('--buildkite.orgname', dest='org_name', default=None,
                        help='Buildkite organization name [BUILDKITE_ORGNAME]')
    parser.add_argument('--buildkite.timeout', dest='timeout_seconds', type=float, default=None,
                        help='Timeout in seconds on HTTP requests to the Buildkite API (default: 5)')
    parser.add_argument('--web.listen-address', dest='listen_address', default=None,
                        help='Address on which to expose metrics and web interface (default: :9209)')
    parser.add_argument('--web.telemetry-path', dest='metrics_path', default=None,
                        help='Path under which to expose metrics (default: /metrics)')
    parser.add_argument('--log-level', dest='log_level', default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default: INFO or LOG_LEVEL env var)')
    return parser


def main(argv=None):
    """
    CLI entry point.

    Parses command-line arguments and starts the exporter.
    """
    args = build_parser().parse_args(argv)

    if args.version:
        print(f"buildkite_exporter {get_version()}")
        sys.exit(0)

    logging.getLogger().setLevel((args.log_level or Settings().LOG_LEVEL).upper())

    overrides = {
        "token": args.token,
        "org_name": args.org_name,
        "timeout_seconds": args.timeout_seconds,
        "listen_address": args.listen_address,
        "metrics_path": args.metrics_path,
        "log_level": args.log_level,
    }

    app = ExporterApp(overrides=overrides, config_path=args.config)
    app.run()


if __name__ == '__main__':
    main()
