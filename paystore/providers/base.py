from typing import Any, Optional


class UpstreamResponse:
    """
    Outcome of a call that reached the gateway.

    Any HTTP status is carried as data; transport-level failures raise
    UpstreamTransportError instead.
    """

    def __init__(self, status_code: int, body: Any = None):
        self.status_code = status_code
        self.body = body

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def __repr__(self):
        return f'<UpstreamResponse {self.status_code}>'


class PaymentProviderError(Exception):
    """Base exception for provider errors"""
    pass


class TokenAcquisitionError(PaymentProviderError):
    """Raised when the OAuth endpoint does not hand out an access token"""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ''):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class UpstreamTransportError(PaymentProviderError):
    """Raised on timeouts, DNS failures and dropped connections"""
    pass
