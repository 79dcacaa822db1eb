"""
Centralized prompt management for every generative call:
- assistant persona (replies in assistant threads)
- room summarization
- reply drafting
"""

from chatsync.prompts.assistant import AssistantPrompts

__all__ = ["AssistantPrompts"]
