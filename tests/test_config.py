"""
Tests for client configuration.
"""

import pytest

from logstitch.config import DEFAULT_BASE_URL, ClientConfig, RetryConfig
from logstitch.errors import ConfigurationError


class TestClientConfig:
    """Defaults, normalization and validation."""

    def test_defaults(self):
        """Unset options take documented defaults."""
        config = ClientConfig(project_key="pk")

        assert config.base_url == DEFAULT_BASE_URL
        assert config.batch_size == 10
        assert config.flush_interval == 5.0
        assert config.max_queue_size == 1000
        assert config.strict is False
        assert config.on_error is None
        assert config.retry == RetryConfig()

    def test_strips_trailing_slashes(self):
        """Any number of trailing slashes is removed."""
        assert ClientConfig(project_key="pk", base_url="https://x.test//").base_url == "https://x.test"

    def test_auth_header(self):
        assert ClientConfig(project_key="pk_1").auth_header == "Bearer pk_1"

    def test_is_immutable(self):
        """Config cannot change after construction."""
        config = ClientConfig(project_key="pk")
        with pytest.raises(AttributeError):
            config.strict = True

    @pytest.mark.parametrize("kwargs", [
        {"project_key": ""},
        {"project_key": None},
        {"project_key": "pk", "batch_size": 0},
        {"project_key": "pk", "max_queue_size": 0},
        {"project_key": "pk", "flush_interval": 0},
    ])
    def test_rejects_invalid(self, kwargs):
        """Invalid values raise ConfigurationError."""
        with pytest.raises(ConfigurationError):
            ClientConfig(**kwargs)

    def test_configuration_error_is_value_error(self):
        """Callers can catch it as ValueError."""
        with pytest.raises(ValueError):
            ClientConfig(project_key="")


class TestRetryConfig:
    """Retry policy validation."""

    def test_defaults(self):
        config = RetryConfig()
        assert (config.max_attempts, config.base_delay, config.max_delay) == (3, 0.5, 30.0)

    def test_rejects_zero_attempts(self):
        with pytest.raises(ConfigurationError):
            RetryConfig(max_attempts=0)
