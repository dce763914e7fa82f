"""
Retry Handler - Backoff policy for transient server overload
"""

from typing import Optional

# Only this status means "send the same request again later"
RETRYABLE_STATUS_CODES = frozenset({503})


class RetryHandler:
    """Exponential backoff with a delay ceiling and an optional attempt cap"""

    def __init__(self,
                 base_delay_seconds: float = 0.05,
                 max_delay_seconds: float = 0.8,
                 max_retries: Optional[int] = None):
        """
        Initialize retry handler

        Args:
            base_delay_seconds: Delay before the first retry
            max_delay_seconds: Maximum delay between retries
            max_retries: Maximum number of retries (None retries forever)
        """
        self.base_delay = base_delay_seconds
        self.max_delay = max_delay_seconds
        self.max_retries = max_retries

    def should_retry(self, status_code: int, attempt: int) -> bool:
        """
        Determine if a response status should trigger a retry

        Args:
            status_code: HTTP status of the last attempt
            attempt: Number of retries already made (0-indexed)

        Returns:
            True if should retry, False otherwise
        """
        if status_code not in RETRYABLE_STATUS_CODES:
            return False

        if self.max_retries is not None and attempt >= self.max_retries:
            return False

        return True

    def get_delay(self, attempt: int) -> float:
        """
        Calculate delay before next retry

        Args:
            attempt: Current retry number (0-indexed)

        Returns:
            Delay in seconds
        """
        # Exponent bounded so unbounded retry loops never overflow a float
        delay = self.base_delay * (2 ** min(attempt, 62))

        # Cap at max delay
        return min(delay, self.max_delay)
