"""
AccessDeniedError - Raised when a user reads or writes a conversation they cannot see.
Maps to: HTTP 403 Forbidden
"""


class AccessDeniedError(Exception):
    """Caller is neither a member/owner of the room nor a thread participant."""

    def __init__(self, message: str = "Access denied to this conversation"):
        super().__init__(message)
