"""
Generative service errors.

ExternalServiceFailure covers every non-success outcome of a completion call
(non-2xx status, transport error, undecodable body). RateLimitedError is the
429 case, the only one the assistant retries.
"""

from typing import Optional


class ExternalServiceFailure(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RateLimitedError(ExternalServiceFailure):
    def __init__(self, message: str = "Rate limited by generative service"):
        super().__init__(message, status_code=429)
