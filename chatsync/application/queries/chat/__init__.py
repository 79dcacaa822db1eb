"""Chat queries."""

from .get_messages import GetMessagesHandler, GetMessagesQuery
from .summarize_room import SummarizeRoomHandler, SummarizeRoomQuery, SummaryResult
from .draft_reply import DraftReplyHandler, DraftReplyQuery, DraftResult

__all__ = [
    "GetMessagesHandler",
    "GetMessagesQuery",
    "SummarizeRoomHandler",
    "SummarizeRoomQuery",
    "SummaryResult",
    "DraftReplyHandler",
    "DraftReplyQuery",
    "DraftResult",
]
