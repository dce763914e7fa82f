"""
Errors - Exception hierarchy for the Presto protocol driver
"""

from typing import Optional


class PrestoError(Exception):
    """Base class for all driver errors"""
    pass


class TransportError(PrestoError):
    """Request could not be built or sent (network level failure)"""
    pass


class UnexpectedStatusError(PrestoError):
    """Server answered with an HTTP status the protocol does not allow here"""
    
    def __init__(self, status_code: int, reason: str = "", url: str = ""):
        self.status_code = status_code
        self.reason = reason or ""
        self.url = url or ""
        super().__init__(f"unexpected http status: {status_code} {self.reason}".rstrip())


class ProtocolError(PrestoError):
    """Server reported the query as failed"""
    
    def __init__(self,
                 message: str,
                 error_code: Optional[int] = None,
                 query_id: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        self.query_id = query_id
        super().__init__(f"query failed: {message}")


class IncoherentStateError(PrestoError):
    """Polling ended without the query ever reaching FINISHED"""
    
    def __init__(self, state: str):
        self.state = state
        super().__init__(f"incoherent state at end of query: {state}")


class ResponseDecodeError(PrestoError):
    """Response body is not the documented JSON shape"""
    pass


class SessionClosedError(PrestoError):
    """Operation attempted after close()"""
    pass


class QueryNotSubmittedError(PrestoError):
    """Operation needs a submitted query but none is known"""
    pass
