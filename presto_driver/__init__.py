"""
Presto Driver - Client for the asynchronous Presto REST query protocol
"""

from .client import PrestoClient, finished_query_url
from .config import ClientConfig, load_environment
from .errors import (
    PrestoError,
    TransportError,
    UnexpectedStatusError,
    ProtocolError,
    IncoherentStateError,
    ResponseDecodeError,
    SessionClosedError,
    QueryNotSubmittedError,
)
from .models import QueryResult, QueryStats
from .request_executor import RequestExecutor
from .retry_handler import RetryHandler
from .session import QuerySession, QueryState

__version__ = "1.0.0"

__all__ = [
    'PrestoClient',
    'finished_query_url',
    'ClientConfig',
    'load_environment',
    'PrestoError',
    'TransportError',
    'UnexpectedStatusError',
    'ProtocolError',
    'IncoherentStateError',
    'ResponseDecodeError',
    'SessionClosedError',
    'QueryNotSubmittedError',
    'QueryResult',
    'QueryStats',
    'RequestExecutor',
    'RetryHandler',
    'QuerySession',
    'QueryState',
]
