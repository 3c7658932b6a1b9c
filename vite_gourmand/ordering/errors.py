"""
Errors raised by the ordering workflow.

- ValidationError: a step guard or form check failed; no request was sent.
- Unauthenticated: no session (or the server rejected it); the caller
  saves the draft and redirects to the sign-in portal.
- NetworkError: the API could not be reached or timed out.
- ServerRejection: the API answered with a non-2xx status.

None of them is fatal: every failure leaves the draft intact for a retry.
"""

from typing import Optional


class OrderingError(Exception):
    """Base class for ordering workflow failures."""


class ValidationError(OrderingError):
    def __init__(self, message: str, step: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.step = step


class Unauthenticated(OrderingError):
    pass


class NetworkError(OrderingError):
    pass


class ServerRejection(OrderingError):
    def __init__(self, status_code: int, message: str):
        super().__init__(f"{status_code}: {message}")
        self.status_code = status_code
        self.message = message
