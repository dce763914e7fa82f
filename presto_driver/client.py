"""
Presto Client - Drives one query through the asynchronous REST protocol

The server executes a statement asynchronously and hands out results as a
chain of pages, each pointing at the next through nextUri. This client
submits the statement, follows the chain until it ends, and accumulates the
rows of every page in arrival order.

Usage:
    from presto_driver import PrestoClient

    with PrestoClient("http://presto:8080/v1/statement", catalog="hive") as client:
        client.submit("SELECT * FROM orders LIMIT 10")
        client.wait_query_exec()
        rows = client.get_data()
        columns = client.columns()

One instance manages one query at a time. Create one client per query when
running queries concurrently.
"""

import time
from typing import Dict, Any, List, Optional

import requests
import structlog

from .config import ClientConfig
from .errors import (
    PrestoError,
    ProtocolError,
    IncoherentStateError,
    SessionClosedError,
    QueryNotSubmittedError,
)
from .models import QueryResult, decode_document
from .request_executor import RequestExecutor
from .retry_handler import RetryHandler
from .session import QuerySession, QueryState

logger = structlog.get_logger(__name__)


class PrestoClient:
    """Protocol driver for a single Presto query"""

    def __init__(self,
                 url: str,
                 catalog: str,
                 config: Optional[ClientConfig] = None,
                 executor: Optional[RequestExecutor] = None):
        """
        Initialize Presto client

        Args:
            url: Statement submission endpoint (e.g. http://host:8080/v1/statement)
            catalog: Catalog sent in the X-Presto-Catalog header
            config: Identification and timing settings (creates default if not provided)
            executor: Request executor (built from config if not provided)
        """
        self.config = config or ClientConfig()

        self.session = QuerySession(
            submission_url=url,
            catalog=catalog,
            schema=self.config.schema,
            user=self.config.user,
            user_agent=self.config.user_agent,
            source=self.config.source
        )

        # Connections are released by close() only when the client built the executor
        self._owns_executor = executor is None
        self.executor = executor or RequestExecutor(
            headers=self.config.identification_headers(catalog),
            retry_handler=RetryHandler(
                base_delay_seconds=self.config.initial_retry_delay,
                max_delay_seconds=self.config.max_retry_delay,
                max_retries=self.config.max_retries
            ),
            timeout=self.config.request_timeout
        )

        # First page of the current query, folded by wait_query_exec()
        self._pending: Optional[QueryResult] = None

        logger.debug(
            "presto_client_initialized",
            url=url,
            catalog=catalog,
            user=self.config.user,
            schema=self.config.schema
        )

    def __enter__(self) -> 'PrestoClient':
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        if exc_type is None:
            self.close()
            return

        # Keep the exception that ended the block
        try:
            self.close()
        except PrestoError as e:
            logger.warning(
                "query_close_failed",
                query_id=self.session.query_id,
                error=str(e)
            )

    @property
    def state(self) -> str:
        """Last known lifecycle state"""
        return self.session.state

    def submit(self, query: str) -> None:
        """
        Submit a statement

        Args:
            query: Statement text, sent verbatim as the request body

        Raises:
            SessionClosedError: If the client was closed
            TransportError: If the request cannot be sent
            UnexpectedStatusError: If the server rejects the request
            ProtocolError: If the server reports the query as failed
        """
        self._ensure_open()

        self.session.reset()
        self._pending = None

        request = requests.Request(
            "POST",
            self.session.submission_url,
            data=query.encode("utf-8")
        )
        page = self._fetch_page(request)

        self._pending = page
        self.session.query_id = page.id or None
        # Records that a submission happened; the server state arrives with the pages
        self.session.state = QueryState.RUNNING.value

        logger.info(
            "query_submitted",
            query_id=self.session.query_id,
            catalog=self.session.catalog,
            schema=self.session.schema
        )

    def wait_query_exec(self) -> None:
        """
        Poll the server until the page chain ends

        Raises:
            SessionClosedError: If the client was closed
            TransportError: If a request cannot be sent
            UnexpectedStatusError: If the server answers an unexpected status
            ProtocolError: If a page reports the query as failed
            IncoherentStateError: If the chain ends without FINISHED
        """
        self._ensure_open()

        if self._pending is not None:
            self._fold(self._pending)
            self._pending = None

        while self.session.next_uri:
            time.sleep(self.config.poll_interval)
            self._ensure_open()

            page = self._fetch_page(requests.Request("GET", self.session.next_uri))
            self._fold(page)

        if not self.session.finished:
            logger.error(
                "query_incoherent_state",
                query_id=self.session.query_id,
                state=self.session.state
            )
            raise IncoherentStateError(self.session.state)

        logger.info(
            "query_finished",
            query_id=self.session.query_id,
            rows=len(self.session.rows),
            pages=self.session.pages_received
        )

    def execute(self, query: str) -> List[Any]:
        """
        Submit a statement and wait for all of its rows

        Args:
            query: Statement text

        Returns:
            Accumulated rows
        """
        self.submit(query)
        self.wait_query_exec()
        return self.get_data()

    def get_data(self) -> Optional[List[Any]]:
        """Accumulated rows, or None until the query has FINISHED"""
        if not self.session.finished:
            return None
        return list(self.session.rows)

    def columns(self) -> List[str]:
        """Column names captured so far"""
        return self.session.columns

    def progress(self) -> Dict[str, Any]:
        """Split counters of the most recent page"""
        stats = self.session.stats
        return {
            'state': self.session.state,
            'completed_splits': stats.completed_splits,
            'total_splits': stats.total_splits,
        }

    def get_finished_query(self) -> Dict[str, Any]:
        """
        Fetch the server's detail document for the submitted query

        Returns:
            Decoded JSON document (schema not modeled)

        Raises:
            QueryNotSubmittedError: If no query id is known
        """
        self._ensure_open()

        if not self.session.query_id:
            raise QueryNotSubmittedError("no query has been submitted")

        url = finished_query_url(self.session.submission_url, self.session.query_id)
        response = self.executor.execute(requests.Request("GET", url))

        return decode_document(response)

    def close(self) -> None:
        """
        Cancel the query on the server

        Idempotent. Sends DELETE to the current continuation URI and expects
        HTTP 204. When the page chain has already ended there is nothing left
        to cancel: no request is sent and close() succeeds. Connections of an
        executor built by this client are released in every case.

        Raises:
            TransportError: If the request cannot be sent
            UnexpectedStatusError: If the server answers anything but 204
        """
        if self.session.closed:
            return

        self.session.closed = True
        next_uri = self.session.next_uri
        if self._pending is not None:
            next_uri = self._pending.next_uri

        try:
            if not next_uri:
                logger.debug("query_closed", query_id=self.session.query_id, cancelled=False)
                return

            self.executor.execute(requests.Request("DELETE", next_uri), expected_status=204)

            logger.info("query_closed", query_id=self.session.query_id, cancelled=True)
        finally:
            if self._owns_executor:
                self.executor.close()

    def _fetch_page(self, request: requests.Request) -> QueryResult:
        response = self.executor.execute(request)
        page = QueryResult.from_response(response)

        if page.failed:
            logger.error(
                "query_failed",
                query_id=page.id or self.session.query_id,
                error_code=page.error_code,
                message=page.failure_message
            )
            raise ProtocolError(
                page.failure_message,
                error_code=page.error_code,
                query_id=page.id or self.session.query_id
            )

        return page

    def _fold(self, page: QueryResult) -> None:
        self.session.fold(page)

        logger.debug(
            "query_page_received",
            query_id=self.session.query_id,
            state=self.session.state,
            rows=len(page.data),
            completed_splits=page.stats.completed_splits,
            total_splits=page.stats.total_splits
        )

    def _ensure_open(self) -> None:
        if self.session.closed:
            raise SessionClosedError("client is closed")


def finished_query_url(submission_url: str, query_id: str) -> str:
    """
    Build the detail URL of a query from the submission URL

    http://host:8080/v1/statement + "20240101_x" becomes
    http://host:8080/v1/query/20240101_x?pretty
    """
    parts = submission_url.split('/')
    parts = parts[:-1] + ['query', f"{query_id}?pretty"]
    return '/'.join(parts)
