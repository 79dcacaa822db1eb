"""
EntityNotFoundError - Raised when a requested document does not exist.
Maps to: HTTP 404 Not Found
"""


class EntityNotFoundError(Exception):
    """A profile, room, thread or store path could not be found."""

    def __init__(self, message: str = "The requested entity was not found."):
        super().__init__(message)
