"""
Query Session - Lifecycle state and accumulated results of one query
"""

from typing import Dict, Any, List, Optional
from enum import Enum

from .models import QueryResult, QueryStats


class QueryState(Enum):
    """Query lifecycle states"""
    UNINITIALIZED = "NONE"
    QUEUED = "QUEUED"
    PLANNING = "PLANNING"
    STARTING = "STARTING"
    RUNNING = "RUNNING"
    BLOCKED = "BLOCKED"
    FINISHING = "FINISHING"
    FINISHED = "FINISHED"
    FAILED = "FAILED"
    CANCELED = "CANCELED"


class QuerySession:
    """
    Mutable state of the single query a driver instance manages

    The state is stored as the raw server string so that states not listed
    in QueryState are still tracked.
    """

    def __init__(self,
                 submission_url: str,
                 catalog: str,
                 schema: str,
                 user: str,
                 user_agent: str,
                 source: Optional[str] = None):
        self.submission_url = submission_url
        self.catalog = catalog
        self.schema = schema
        self.user = user
        self.user_agent = user_agent
        self.source = source

        self.next_uri = ""
        self.info_uri = ""
        self.partial_cancel_uri = ""
        self.state = QueryState.UNINITIALIZED.value
        self.query_id: Optional[str] = None
        self.stats = QueryStats()
        self.pages_received = 0

        self.rows: List[Any] = []
        self.columns: List[str] = []
        self.closed = False

    @property
    def finished(self) -> bool:
        return self.state == QueryState.FINISHED.value

    def reset(self) -> None:
        """Clear per-query results before a new submission"""
        self.rows = []
        self.next_uri = ""
        self.stats = QueryStats()
        self.pages_received = 0

    def fold(self, page: QueryResult) -> None:
        """
        Merge one page into the session

        Args:
            page: Decoded page, in arrival order
        """
        self.next_uri = page.next_uri or ""

        if page.data:
            self.rows.extend(page.data)

        if page.info_uri:
            self.info_uri = page.info_uri

        if page.partial_cancel_uri:
            self.partial_cancel_uri = page.partial_cancel_uri

        if page.state:
            self.state = page.state

        # Captured once per session lifetime
        if not self.columns and page.columns:
            self.columns = page.column_names

        self.stats = page.stats
        self.pages_received += 1

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'submission_url': self.submission_url,
            'catalog': self.catalog,
            'schema': self.schema,
            'user': self.user,
            'query_id': self.query_id,
            'state': self.state,
            'next_uri': self.next_uri,
            'info_uri': self.info_uri,
            'partial_cancel_uri': self.partial_cancel_uri,
            'row_count': len(self.rows),
            'columns': list(self.columns),
            'pages_received': self.pages_received,
            'stats': self.stats.to_dict(),
            'closed': self.closed,
        }
