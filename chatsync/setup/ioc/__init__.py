"""Dependency injection wiring."""
