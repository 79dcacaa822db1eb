"""
DOMAIN LAYER - Chat coordination core

This layer contains:
- Entities: Identities, chat rooms, DM threads, messages
- Value Objects: UserId, ConversationRef
- Ports: DocumentStore, GenerativeClient, repositories
- Exceptions: Domain-specific errors

RULES:
1. NO framework imports (no FastAPI, Redis, httpx, Pydantic, etc.)
2. NO I/O operations
3. Only depends on Python stdlib
"""
