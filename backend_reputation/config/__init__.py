"""
Configuration management for the Backend Reputation worker.

Loads settings from environment variables and an optional .env file.
Exposes a single source of truth for service configuration; algorithm
parameters never come from here, they travel with each run request.
"""

from backend_reputation.config.settings import Settings, get_settings  # noqa: F401

__all__ = ["Settings", "get_settings"]
