"""
InvalidParticipantsError - Raised when a conversation would have fewer than two members.
Maps to: HTTP 422 Unprocessable Entity
"""


class InvalidParticipantsError(Exception):
    """Combined participant set has fewer than 2 distinct identities."""

    def __init__(self, participants=()):
        self.participants = tuple(participants)
        super().__init__(
            f"A conversation needs at least 2 distinct participants, got {len(self.participants)}"
        )
