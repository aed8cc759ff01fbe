"""
Runtime configuration for the parrot agent service.

Values come from the environment (a `.env` file is loaded by the server
entry point); command-line flags override them.
"""

import logging
import os
from dataclasses import dataclass

import structlog


DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
DEFAULT_SPEAKER_URI = "tag:openfloor-demo.com,2025:parrot-agent"
DEFAULT_SERVICE_URL = "https://kmhhywpw32.us-east-1.awsapprunner.com/"
DEFAULT_ALLOWED_ORIGIN = "https://openfloor.azettl.net"
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class AgentConfig:
    """Configuration for one parrot agent process."""
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    speaker_uri: str = DEFAULT_SPEAKER_URI
    service_url: str = DEFAULT_SERVICE_URL
    allowed_origin: str = DEFAULT_ALLOWED_ORIGIN
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> "AgentConfig":
        port_str = os.environ.get("PORT")
        if port_str:
            try:
                port = int(port_str)
            except ValueError:
                raise ValueError(f"PORT must be an integer, got {port_str!r}")
        else:
            port = DEFAULT_PORT

        return cls(
            host=os.environ.get("HOST", DEFAULT_HOST),
            port=port,
            speaker_uri=os.environ.get("SPEAKER_URI", DEFAULT_SPEAKER_URI),
            service_url=os.environ.get("SERVICE_URL", DEFAULT_SERVICE_URL),
            allowed_origin=os.environ.get("CORS_ALLOWED_ORIGIN", DEFAULT_ALLOWED_ORIGIN),
            log_level=os.environ.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).upper(),
        )


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Filter structlog output below `level` (e.g. "DEBUG", "INFO")."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
    )
