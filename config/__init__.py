"""Configuration module for watch-harness.

Centralized settings management using pydantic-settings.
"""

from config.settings import HarnessConfig, get_config

__all__ = ["HarnessConfig", "get_config"]
