"""
Response Models - One decoded page of the query protocol
"""

from typing import Dict, Any, List, Optional

import requests

from .errors import ResponseDecodeError


class QueryStats:
    """Progress counters reported with every page"""

    def __init__(self,
                 state: str = "",
                 scheduled: bool = False,
                 completed_splits: int = 0,
                 total_splits: int = 0):
        self.state = state
        self.scheduled = scheduled
        self.completed_splits = completed_splits
        self.total_splits = total_splits

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'QueryStats':
        """Create from the "stats" object of a page"""
        data = _expect(data, dict, "stats") or {}
        return cls(
            state=data.get('state') or "",
            scheduled=bool(data.get('scheduled', False)),
            completed_splits=data.get('completedSplits') or 0,
            total_splits=data.get('totalSplits') or 0
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary"""
        return {
            'state': self.state,
            'scheduled': self.scheduled,
            'completed_splits': self.completed_splits,
            'total_splits': self.total_splits,
        }


class QueryResult:
    """
    A single response page

    Every field is optional on the wire. A missing nextUri is the
    authoritative signal that no further pages exist.
    """

    def __init__(self,
                 id: str = "",
                 info_uri: str = "",
                 next_uri: str = "",
                 partial_cancel_uri: str = "",
                 data: Optional[List[Any]] = None,
                 columns: Optional[List[Dict[str, Any]]] = None,
                 error: Optional[Dict[str, Any]] = None,
                 stats: Optional[QueryStats] = None):
        self.id = id
        self.info_uri = info_uri
        self.next_uri = next_uri
        self.partial_cancel_uri = partial_cancel_uri
        self.data = data or []
        self.columns = columns or []
        self.error = error or {}
        self.stats = stats or QueryStats()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'QueryResult':
        """Create from a decoded JSON page"""
        if not isinstance(data, dict):
            raise ResponseDecodeError(
                f"expected a JSON object, got {type(data).__name__}"
            )

        columns = _expect(data.get('columns'), list, "columns") or []
        for column in columns:
            _expect(column, dict, "columns[]")

        error = _expect(data.get('error'), dict, "error") or {}
        _expect(error.get('failureInfo'), dict, "error.failureInfo")

        # Servers have sent both spellings
        partial_cancel_uri = data.get('partialCancelUri') or data.get('PartialCancelUri') or ""

        return cls(
            id=data.get('id') or "",
            info_uri=data.get('infoUri') or "",
            next_uri=data.get('nextUri') or "",
            partial_cancel_uri=partial_cancel_uri,
            data=_expect(data.get('data'), list, "data") or [],
            columns=columns,
            error=error,
            stats=QueryStats.from_dict(data.get('stats'))
        )

    @classmethod
    def from_response(cls, response: requests.Response) -> 'QueryResult':
        """Decode a page from an HTTP response body"""
        return cls.from_dict(decode_document(response))

    @property
    def state(self) -> str:
        return self.stats.state

    @property
    def column_names(self) -> List[str]:
        """Column names in server order"""
        return [column.get('name', "") for column in self.columns]

    @property
    def failure_message(self) -> str:
        """Failure message, empty unless the query failed"""
        if not self.error:
            return ""

        failure_info = self.error.get('failureInfo') or {}
        return failure_info.get('message') or self.error.get('message') or ""

    @property
    def error_code(self) -> Optional[int]:
        if not self.error:
            return None
        return self.error.get('errorCode')

    @property
    def failed(self) -> bool:
        return self.failure_message != ""


def decode_document(response: requests.Response) -> Dict[str, Any]:
    """
    Decode a response body into an open-ended JSON object

    Args:
        response: HTTP response whose body is a JSON object

    Returns:
        Decoded document

    Raises:
        ResponseDecodeError: If the body is not a JSON object
    """
    try:
        document = response.json()
    except ValueError as e:
        raise ResponseDecodeError(f"malformed response body from {response.url}: {e}") from e

    if not isinstance(document, dict):
        raise ResponseDecodeError(
            f"expected a JSON object from {response.url}, got {type(document).__name__}"
        )

    return document


def _expect(value: Any, kind: type, field: str) -> Any:
    """Return value unchanged if it is None or of the expected JSON type"""
    if value is not None and not isinstance(value, kind):
        raise ResponseDecodeError(
            f"page field {field!r} must be a JSON {'object' if kind is dict else 'array'}, "
            f"got {type(value).__name__}"
        )
    return value
