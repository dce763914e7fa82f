"""
Pytest configuration and fixtures
Loads environment variables and sets up test infrastructure
"""

import pytest
import os
from pathlib import Path

from presto_driver.config import load_environment


def pytest_configure(config):
    """Configure pytest and load environment"""
    # Load environment first
    load_environment(Path(__file__).parent / '.env.dev')
    
    # Register custom markers
    config.addinivalue_line(
        "markers", "presto: marks tests as requiring a running Presto server"
    )


@pytest.fixture(scope="session")
def presto_url():
    """Statement endpoint of a live server, if configured"""
    return os.getenv("PRESTO_URL", "")


@pytest.fixture(scope="session")
def skip_if_no_presto(presto_url):
    """Skip test if no Presto server is configured"""
    if not presto_url:
        pytest.skip("Presto not configured (set PRESTO_URL)")
