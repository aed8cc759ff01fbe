"""
Unit tests for AgentConfig, logging setup and server argument parsing.
"""

import pytest
import structlog

from parrot_agent.config import (
    DEFAULT_ALLOWED_ORIGIN,
    DEFAULT_PORT,
    DEFAULT_SERVICE_URL,
    DEFAULT_SPEAKER_URI,
    AgentConfig,
    configure_logging,
)
from parrot_agent.server import parse_args


ENV_VARS = ["PORT", "HOST", "SERVICE_URL", "SPEAKER_URI", "CORS_ALLOWED_ORIGIN", "LOG_LEVEL"]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestAgentConfig:
    """Test AgentConfig.from_env."""

    def test_defaults(self, clean_env):
        config = AgentConfig.from_env()
        assert config.port == DEFAULT_PORT == 8080
        assert config.host == "0.0.0.0"
        assert config.speaker_uri == DEFAULT_SPEAKER_URI
        assert config.service_url == DEFAULT_SERVICE_URL
        assert config.allowed_origin == DEFAULT_ALLOWED_ORIGIN
        assert config.log_level == "INFO"

    def test_env_overrides(self, clean_env):
        clean_env.setenv("PORT", "9090")
        clean_env.setenv("SERVICE_URL", "https://parrot.example.com/")
        clean_env.setenv("SPEAKER_URI", "tag:example.com,2025:polly")
        clean_env.setenv("CORS_ALLOWED_ORIGIN", "https://floor.example.com")
        clean_env.setenv("LOG_LEVEL", "debug")

        config = AgentConfig.from_env()

        assert config.port == 9090
        assert config.service_url == "https://parrot.example.com/"
        assert config.speaker_uri == "tag:example.com,2025:polly"
        assert config.allowed_origin == "https://floor.example.com"
        assert config.log_level == "DEBUG"

    def test_invalid_port(self, clean_env):
        clean_env.setenv("PORT", "eighty")
        with pytest.raises(ValueError, match="PORT"):
            AgentConfig.from_env()


class TestConfigureLogging:
    """Test structlog level configuration."""

    def teardown_method(self):
        structlog.reset_defaults()

    def test_known_level(self):
        configure_logging("warning")
        assert structlog.get_config()["wrapper_class"] is structlog.make_filtering_bound_logger(30)

    def test_unknown_level(self):
        with pytest.raises(ValueError, match="Unknown log level"):
            configure_logging("chatty")


class TestParseArgs:
    """Test server command-line parsing."""

    def test_defaults_come_from_config(self):
        defaults = AgentConfig(port=7000, service_url="https://env.example.com/")
        args = parse_args([], defaults=defaults)

        assert args.port == 7000
        assert args.service_url == "https://env.example.com/"
        assert args.host == "0.0.0.0"

    def test_flags_override(self):
        args = parse_args(["--port", "9001", "--service-url", "https://cli.example.com/", "--log-level", "DEBUG"])

        assert args.port == 9001
        assert args.service_url == "https://cli.example.com/"
        assert args.log_level == "DEBUG"
