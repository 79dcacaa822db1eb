"""
DTOs - Data Transfer Objects

DTOs for transferring data between layers:
- chat.py → MessageDTO, SendMessageRequest, AssistantTextDTO
- conversation.py → ConversationDTO, RoomDTO, ThreadDTO, requests
- profile.py → ProfileDTO, UpdateProfileRequest, SessionDTO
- view.py → ViewDTO (sync stream)

Note: These are different from domain entities.
DTOs are for API input/output, entities are for business logic.
"""

from chatsync.application.dto.chat import AssistantTextDTO, MessageDTO, SendMessageRequest
from chatsync.application.dto.conversation import (
    ConversationDTO,
    ConversationListDTO,
    CreateRoomRequest,
    ResolveThreadRequest,
    RoomDTO,
    ThreadDTO,
)
from chatsync.application.dto.profile import ProfileDTO, SessionDTO, UpdateProfileRequest
from chatsync.application.dto.view import ViewDTO

__all__ = [
    "AssistantTextDTO",
    "MessageDTO",
    "SendMessageRequest",
    "ConversationDTO",
    "ConversationListDTO",
    "CreateRoomRequest",
    "ResolveThreadRequest",
    "RoomDTO",
    "ThreadDTO",
    "ProfileDTO",
    "SessionDTO",
    "UpdateProfileRequest",
    "ViewDTO",
]
