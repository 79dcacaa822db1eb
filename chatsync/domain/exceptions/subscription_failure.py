"""
SubscriptionFailure - A live stream reported an error.

Transient: the view keeps its last snapshot and the store reconnects on its own.
"""


class SubscriptionFailure(Exception):
    def __init__(self, stream: str, cause: Exception | None = None):
        self.stream = stream
        self.cause = cause
        super().__init__(f"Subscription to {stream} failed: {cause}")
