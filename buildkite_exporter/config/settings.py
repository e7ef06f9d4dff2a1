"""Environment settings and validation."""

import os
from typing import Optional


class Settings:
    """Application settings from environment variables."""

    @staticmethod
    def get(key: str, default: Optional[str] = None, required: bool = False) -> str:
        """
        Get environment variable value.

        Args:
            key: Environment variable name
            default: Default value if not set
            required: Whether the variable is required

        Returns:
            str: Environment variable value

        Raises:
            ValueError: If required variable is not set
        """
        value = os.getenv(key, default)
        if required and not value:
            raise ValueError(f"Required environment variable not set: {key}")
        return value or ""

    @staticmethod
    def from_env() -> dict:
        """
        Collect configuration values present in the environment.

        Returns:
            dict: ExporterConfig field values, unset variables omitted
        """
        mapping = {
            "token": "BUILDKITE_TOKEN",
            "org_name": "BUILDKITE_ORGNAME",
            "timeout_seconds": "BUILDKITE_TIMEOUT",
            "log_level": "LOG_LEVEL",
        }
        return {field: os.environ[var] for field, var in mapping.items() if os.getenv(var)}

    # Convenience accessors
    LOG_LEVEL = property(lambda self: Settings.get("LOG_LEVEL", "INFO"))
