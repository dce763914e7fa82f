"""
Pytest configuration and shared fixtures
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import Mock, patch

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from presto_driver import ClientConfig, PrestoClient
from presto_fakes import STATEMENT_URL


@pytest.fixture
def no_sleep():
    """Patch time.sleep for poll intervals and backoff"""
    with patch('presto_driver.client.time.sleep') as mock_sleep:
        yield mock_sleep


@pytest.fixture
def config():
    """Client config independent of the environment"""
    with patch.dict('os.environ', {}, clear=True):
        return ClientConfig(user="tester", schema="sales", source="pytest")


@pytest.fixture
def make_client(config, no_sleep):
    """Build a client whose transport answers with the given responses"""
    def _make(responses, catalog="hive"):
        client = PrestoClient(STATEMENT_URL, catalog, config=config)
        client.executor.session.send = Mock(side_effect=responses)
        return client
    return _make


# Configure pytest
def pytest_configure(config):
    """Pytest configuration"""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
