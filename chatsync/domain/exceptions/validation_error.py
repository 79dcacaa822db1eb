"""
DomainValidationError - Raised when input breaks a business rule
(blank message, bad room name, editing the assistant profile).
Maps to: HTTP 422 Unprocessable Entity
"""


class DomainValidationError(Exception):
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
