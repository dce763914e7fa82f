"""
Tests for client configuration
"""

import pytest
from unittest.mock import patch

from presto_driver.config import (
    ClientConfig,
    load_environment,
    DEFAULT_USER_AGENT,
)


class TestClientConfigDefaults:
    """Test documented defaults"""

    def test_defaults(self):
        """Test values without arguments or environment"""
        with patch.dict('os.environ', {}, clear=True):
            config = ClientConfig()

        assert config.user == "presto"
        assert config.schema == "default"
        assert config.user_agent == DEFAULT_USER_AGENT
        assert config.source is None
        assert config.poll_interval == 0.05
        assert config.initial_retry_delay == 0.05
        assert config.max_retry_delay == 0.8
        assert config.max_retries is None
        assert config.request_timeout is None

    def test_explicit_arguments_win(self):
        """Test arguments override the environment"""
        with patch.dict('os.environ', {'PRESTO_USER': 'env_user', 'PRESTO_POLL_INTERVAL': '2'}, clear=True):
            config = ClientConfig(user="arg_user", poll_interval=0.5)

        assert config.user == "arg_user"
        assert config.poll_interval == 0.5

    def test_zero_poll_interval_argument_kept(self):
        """Test falsy numeric arguments are not replaced by defaults"""
        with patch.dict('os.environ', {}, clear=True):
            config = ClientConfig(poll_interval=0, max_retries=0)

        assert config.poll_interval == 0
        assert config.max_retries == 0


class TestClientConfigFromEnvironment:
    """Test environment fallbacks"""

    def test_environment_values(self):
        env = {
            'PRESTO_USER': 'etl',
            'PRESTO_SCHEMA': 'warehouse',
            'PRESTO_USER_AGENT': 'nightly-job/2.0',
            'PRESTO_SOURCE': 'airflow',
            'PRESTO_POLL_INTERVAL': '0.25',
            'PRESTO_INITIAL_RETRY_DELAY': '0.1',
            'PRESTO_MAX_RETRY_DELAY': '3.2',
            'PRESTO_MAX_RETRIES': '10',
            'PRESTO_REQUEST_TIMEOUT': '60',
        }
        with patch.dict('os.environ', env, clear=True):
            config = ClientConfig()

        assert config.to_dict() == {
            'user': 'etl',
            'schema': 'warehouse',
            'user_agent': 'nightly-job/2.0',
            'source': 'airflow',
            'poll_interval': 0.25,
            'initial_retry_delay': 0.1,
            'max_retry_delay': 3.2,
            'max_retries': 10,
            'request_timeout': 60.0,
        }

    def test_invalid_number(self):
        with patch.dict('os.environ', {'PRESTO_POLL_INTERVAL': 'soon'}, clear=True):
            with pytest.raises(ValueError, match="PRESTO_POLL_INTERVAL must be a number"):
                ClientConfig()

    def test_invalid_integer(self):
        with patch.dict('os.environ', {'PRESTO_MAX_RETRIES': '2.5'}, clear=True):
            with pytest.raises(ValueError, match="PRESTO_MAX_RETRIES must be an integer"):
                ClientConfig()

    def test_blank_values_ignored(self):
        with patch.dict('os.environ', {'PRESTO_USER': '', 'PRESTO_MAX_RETRIES': ' '}, clear=True):
            config = ClientConfig()

        assert config.user == "presto"
        assert config.max_retries is None


class TestClientConfigValidation:
    """Test rejected settings"""

    @pytest.mark.parametrize("kwargs", [
        {'poll_interval': -1},
        {'initial_retry_delay': 0},
        {'initial_retry_delay': 1.0, 'max_retry_delay': 0.5},
        {'max_retries': -1},
        {'request_timeout': 0},
    ])
    def test_invalid_settings(self, kwargs):
        with patch.dict('os.environ', {}, clear=True):
            with pytest.raises(ValueError):
                ClientConfig(**kwargs)


class TestIdentificationHeaders:
    """Test protocol headers"""

    def test_headers(self):
        with patch.dict('os.environ', {}, clear=True):
            config = ClientConfig(user="analyst", schema="sales")

        assert config.identification_headers("hive") == {
            'User-Agent': DEFAULT_USER_AGENT,
            'X-Presto-User': 'analyst',
            'X-Presto-Catalog': 'hive',
            'X-Presto-Schema': 'sales',
        }

    def test_source_header_when_configured(self):
        with patch.dict('os.environ', {}, clear=True):
            config = ClientConfig(source="reporting")

        assert config.identification_headers("hive")['X-Presto-Source'] == "reporting"


class TestLoadEnvironment:
    """Test dotenv loading"""

    def test_loads_file(self, tmp_path):
        env_file = tmp_path / ".env.dev"
        env_file.write_text('PRESTO_USER="from_file"\nPRESTO_SCHEMA=staging\n')

        with patch.dict('os.environ', {}, clear=True):
            assert load_environment(env_file) is True
            config = ClientConfig()

        assert config.user == "from_file"
        assert config.schema == "staging"

    def test_does_not_override(self, tmp_path):
        env_file = tmp_path / ".env.dev"
        env_file.write_text('PRESTO_USER=from_file\n')

        with patch.dict('os.environ', {'PRESTO_USER': 'already_set'}, clear=True):
            load_environment(env_file)
            config = ClientConfig()

        assert config.user == "already_set"

    def test_missing_file(self, tmp_path):
        assert load_environment(tmp_path / "missing.env") is False
