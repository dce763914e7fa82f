"""
Request Executor - Sends one protocol request, retrying while the server is busy

Usage:
    executor = RequestExecutor(headers=config.identification_headers("hive"))
    response = executor.execute(requests.Request("GET", next_uri))
"""

import time
from typing import Dict, Optional

import requests
import structlog

from .errors import TransportError, UnexpectedStatusError
from .retry_handler import RetryHandler

logger = structlog.get_logger(__name__)


class RequestExecutor:
    """
    Executes prepared HTTP requests with identification headers and 503 backoff

    Only HTTP 503 is retried. Every other unexpected status and every
    transport failure is raised immediately. Each call to execute() starts
    its own backoff schedule.
    """

    def __init__(self,
                 headers: Dict[str, str],
                 retry_handler: Optional[RetryHandler] = None,
                 session: Optional[requests.Session] = None,
                 timeout: Optional[float] = None):
        """
        Initialize request executor

        Args:
            headers: Identification headers injected into every request
            retry_handler: Backoff policy (creates default if not provided)
            session: requests session used for sending (creates one if not provided)
            timeout: Per-request timeout in seconds (None uses transport default)
        """
        self.headers = dict(headers)
        self.retry_handler = retry_handler or RetryHandler()
        self.session = session or requests.Session()
        self.timeout = timeout

    def execute(self,
                request: requests.Request,
                expected_status: int = 200) -> requests.Response:
        """
        Send a request, sleeping and retrying while the server answers 503

        Args:
            request: Unsent request (method, url, optional body)
            expected_status: Status that counts as success

        Returns:
            The successful response

        Raises:
            TransportError: If the request cannot be prepared or sent
            UnexpectedStatusError: If the server answers any other status
        """
        request.headers.update(self.headers)

        try:
            prepared = self.session.prepare_request(request)
        except (requests.RequestException, ValueError) as e:
            logger.error(
                "presto_request_invalid",
                method=request.method,
                url=request.url,
                error=str(e)
            )
            raise TransportError(f"cannot build {request.method} request for {request.url!r}: {e}") from e

        attempt = 0
        while True:
            try:
                response = self.session.send(prepared, timeout=self.timeout)
            except requests.RequestException as e:
                logger.error(
                    "presto_request_failed",
                    method=prepared.method,
                    url=prepared.url,
                    error=str(e)
                )
                raise TransportError(f"{prepared.method} {prepared.url} failed: {e}") from e

            if response.status_code == expected_status:
                return response

            if not self.retry_handler.should_retry(response.status_code, attempt):
                logger.error(
                    "presto_unexpected_status",
                    method=prepared.method,
                    url=prepared.url,
                    status_code=response.status_code,
                    retries=attempt
                )
                response.close()
                raise UnexpectedStatusError(response.status_code, response.reason, prepared.url)

            delay = self.retry_handler.get_delay(attempt)
            logger.warning(
                "presto_server_busy",
                method=prepared.method,
                url=prepared.url,
                attempt=attempt + 1,
                delay_seconds=delay
            )
            response.close()

            time.sleep(delay)
            attempt += 1

    def close(self) -> None:
        """Release pooled connections"""
        self.session.close()
