"""HTTP exposition: metrics endpoint and landing page."""

import logging
from socketserver import ThreadingMixIn
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import CollectorRegistry, make_wsgi_app


LANDING_PAGE = """<html>
<head><title>Buildkite exporter</title></head>
<body>
<h1>Buildkite exporter</h1>
<p><a href='{metrics_path}'>Metrics</a></p>
</body>
</html>
"""


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    """One thread per request so concurrent pulls reach the collector."""
    daemon_threads = True


class _SilentHandler(WSGIRequestHandler):
    """Route access logs through the application logger at DEBUG."""

    def log_message(self, format, *args):
        logging.getLogger("buildkite_exporter.http").debug(format % args)


def create_app(registry: CollectorRegistry, metrics_path: str = "/metrics"):
    """
    Build the WSGI application.

    Args:
        registry: Registry holding the Buildkite collector
        metrics_path: Path serving the text exposition

    Returns:
        WSGI callable
    """
    metrics_app = make_wsgi_app(registry)
    landing = LANDING_PAGE.format(metrics_path=metrics_path).encode("utf-8")

    def app(environ, start_response):
        if environ.get("PATH_INFO", "/") == metrics_path:
            return metrics_app(environ, start_response)

        start_response("200 OK", [
            ("Content-Type", "text/html; charset=utf-8"),
            ("Content-Length", str(len(landing))),
        ])
        return [landing]

    return app


def serve(app, host: str, port: int) -> WSGIServer:
    """
    Create a threaded WSGI server bound to host:port.

    Args:
        app: WSGI application from create_app
        host: Interface to bind
        port: TCP port

    Returns:
        WSGIServer: Bound server; call serve_forever() to run it
    """
    return make_server(
        host, port, app,
        server_class=_ThreadingWSGIServer,
        handler_class=_SilentHandler
    )
