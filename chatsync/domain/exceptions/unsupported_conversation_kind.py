"""
UnsupportedConversationKindError - Raised for a conversation kind other than room/thread.
Maps to: HTTP 400 Bad Request
"""


class UnsupportedConversationKindError(Exception):
    def __init__(self, kind: str):
        self.kind = kind
        super().__init__(f"Unsupported conversation kind: {kind!r}")
