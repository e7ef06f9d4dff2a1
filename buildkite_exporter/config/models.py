"""Pydantic configuration models for the exporter."""

from pydantic import BaseModel, Field, field_validator
from typing import Tuple


DEFAULT_API_URL = "https://api.buildkite.com/v2/"


class ExporterConfig(BaseModel):
    """Root configuration, built once at startup and passed to every component."""
    token: str
    org_name: str
    timeout_seconds: float = Field(default=5.0, gt=0)
    listen_address: str = ":9209"
    metrics_path: str = "/metrics"
    log_level: str = "INFO"
    api_url: str = DEFAULT_API_URL
    namespace: str = "buildkite"

    @field_validator('token', 'org_name')
    @classmethod
    def not_blank(cls, v: str, info) -> str:
        """Reject empty credentials and organization names."""
        v = v.strip()
        if not v:
            raise ValueError(f'{info.field_name} must not be empty')
        return v

    @field_validator('metrics_path')
    @classmethod
    def validate_metrics_path(cls, v: str) -> str:
        """Metrics path must be absolute."""
        if not v.startswith('/'):
            raise ValueError('metrics_path must start with /')
        return v

    @field_validator('api_url')
    @classmethod
    def validate_api_url(cls, v: str) -> str:
        """Validate URL format and keep a trailing slash for relative joins."""
        if not v.startswith(('http://', 'https://')):
            raise ValueError('URL must start with http:// or https://')
        return v if v.endswith('/') else v + '/'

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalize and check the log level name."""
        v = v.upper()
        if v not in ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'):
            raise ValueError(f'Unknown log level: {v}')
        return v

    @field_validator('listen_address')
    @classmethod
    def validate_listen_address(cls, v: str) -> str:
        """Expect host:port, host may be empty."""
        host, sep, port = v.rpartition(':')
        if not sep or not port.isdigit():
            raise ValueError('listen_address must look like [host]:port')
        return v

    @property
    def listen_host(self) -> str:
        host = self.listen_address.rpartition(':')[0]
        return host.strip('[]') or "0.0.0.0"

    @property
    def listen_port(self) -> int:
        return int(self.listen_address.rpartition(':')[2])

    def listen(self) -> Tuple[str, int]:
        return self.listen_host, self.listen_port
