"""
Client Configuration - Identification headers and timing for the driver

Every value can be passed explicitly, falls back to an environment variable,
and finally to a documented default:

    user                 PRESTO_USER                 "presto"
    schema               PRESTO_SCHEMA               "default"
    user_agent           PRESTO_USER_AGENT           "presto-driver/1.0"
    source               PRESTO_SOURCE               None (header not sent)
    poll_interval        PRESTO_POLL_INTERVAL        0.05 seconds
    initial_retry_delay  PRESTO_INITIAL_RETRY_DELAY  0.05 seconds
    max_retry_delay      PRESTO_MAX_RETRY_DELAY      0.8 seconds
    max_retries          PRESTO_MAX_RETRIES          None (unbounded)
    request_timeout      PRESTO_REQUEST_TIMEOUT      None (transport default)

Usage:
    from presto_driver.config import ClientConfig, load_environment

    load_environment(".env.dev")
    config = ClientConfig(user="analyst")
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional, Union

import structlog
from dotenv import load_dotenv

logger = structlog.get_logger(__name__)

VERSION = "1.0"

USER_HEADER = "X-Presto-User"
SOURCE_HEADER = "X-Presto-Source"
CATALOG_HEADER = "X-Presto-Catalog"
SCHEMA_HEADER = "X-Presto-Schema"

DEFAULT_USER = "presto"
DEFAULT_SCHEMA = "default"
DEFAULT_USER_AGENT = f"presto-driver/{VERSION}"

# Seconds
DEFAULT_POLL_INTERVAL = 0.05
DEFAULT_INITIAL_RETRY_DELAY = 0.05
DEFAULT_MAX_RETRY_DELAY = 0.8


def load_environment(env_file: Optional[Union[str, Path]] = None) -> bool:
    """
    Load environment variables from a dotenv file

    Variables already present in the environment are not overridden.

    Args:
        env_file: Path to the dotenv file (defaults to .env.dev in the
            current directory)

    Returns:
        True if a file was found and loaded
    """
    path = Path(env_file) if env_file else Path.cwd() / ".env.dev"

    if not path.exists():
        logger.debug("env_file_not_found", path=str(path))
        return False

    load_dotenv(path, override=False)
    logger.info("env_file_loaded", path=str(path))
    return True


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")


def _first(*values):
    for value in values:
        if value is not None:
            return value
    return None


class ClientConfig:
    """
    Static identification and timing settings for one driver instance

    Replaces fixed package-level defaults so that several drivers with
    different users or schemas can coexist in one process.
    """

    def __init__(self,
                 user: Optional[str] = None,
                 schema: Optional[str] = None,
                 user_agent: Optional[str] = None,
                 source: Optional[str] = None,
                 poll_interval: Optional[float] = None,
                 initial_retry_delay: Optional[float] = None,
                 max_retry_delay: Optional[float] = None,
                 max_retries: Optional[int] = None,
                 request_timeout: Optional[float] = None):
        """
        Initialize client configuration

        Args:
            user: Value of the X-Presto-User header
            schema: Value of the X-Presto-Schema header
            user_agent: Value of the User-Agent header
            source: Value of the X-Presto-Source header (omitted if None)
            poll_interval: Fixed sleep between polls, in seconds
            initial_retry_delay: First backoff delay on HTTP 503, in seconds
            max_retry_delay: Backoff ceiling, in seconds
            max_retries: Maximum 503 retries per request (None = unbounded)
            request_timeout: Per-request timeout passed to requests
        """
        self.user = user or os.getenv("PRESTO_USER") or DEFAULT_USER
        self.schema = schema or os.getenv("PRESTO_SCHEMA") or DEFAULT_SCHEMA
        self.user_agent = user_agent or os.getenv("PRESTO_USER_AGENT") or DEFAULT_USER_AGENT
        self.source = source or os.getenv("PRESTO_SOURCE") or None

        self.poll_interval = _first(
            poll_interval, _env_float("PRESTO_POLL_INTERVAL"), DEFAULT_POLL_INTERVAL
        )
        self.initial_retry_delay = _first(
            initial_retry_delay, _env_float("PRESTO_INITIAL_RETRY_DELAY"), DEFAULT_INITIAL_RETRY_DELAY
        )
        self.max_retry_delay = _first(
            max_retry_delay, _env_float("PRESTO_MAX_RETRY_DELAY"), DEFAULT_MAX_RETRY_DELAY
        )
        self.max_retries = _first(max_retries, _env_int("PRESTO_MAX_RETRIES"))
        self.request_timeout = _first(request_timeout, _env_float("PRESTO_REQUEST_TIMEOUT"))

        self._validate()

    def _validate(self) -> None:
        if self.poll_interval < 0:
            raise ValueError("poll_interval must be >= 0")
        if self.initial_retry_delay <= 0:
            raise ValueError("initial_retry_delay must be > 0")
        if self.max_retry_delay < self.initial_retry_delay:
            raise ValueError("max_retry_delay must be >= initial_retry_delay")
        if self.max_retries is not None and self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValueError("request_timeout must be > 0")

    def identification_headers(self, catalog: str) -> Dict[str, str]:
        """Headers sent with every protocol request"""
        headers = {
            "User-Agent": self.user_agent,
            USER_HEADER: self.user,
            CATALOG_HEADER: catalog,
            SCHEMA_HEADER: self.schema,
        }

        if self.source:
            headers[SOURCE_HEADER] = self.source

        return headers

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'user': self.user,
            'schema': self.schema,
            'user_agent': self.user_agent,
            'source': self.source,
            'poll_interval': self.poll_interval,
            'initial_retry_delay': self.initial_retry_delay,
            'max_retry_delay': self.max_retry_delay,
            'max_retries': self.max_retries,
            'request_timeout': self.request_timeout,
        }
