"""Presentation layer - FastAPI routers and request dependencies."""
