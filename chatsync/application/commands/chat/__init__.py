"""Chat commands."""

from .send_message import SendMessageCommand, SendMessageHandler, triggers_assistant

__all__ = ["SendMessageCommand", "SendMessageHandler", "triggers_assistant"]
