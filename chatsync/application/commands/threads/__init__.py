"""Thread commands."""

from .resolve_thread import ResolveThreadCommand, ResolveThreadHandler

__all__ = ["ResolveThreadCommand", "ResolveThreadHandler"]
