"""
APPLICATION LAYER - Use Cases & Orchestration

This layer contains:
- commands/  → Write operations (resolve thread, send message, create room, sign in)
- queries/   → Read operations (history, summary, draft, conversation list)
- dto/       → Data Transfer Objects
- common/    → Command/Query base classes, AppContext, background tasks

Rules:
- Depends on Domain layer only
- No HTTP/framework code here
"""
