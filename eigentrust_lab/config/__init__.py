"""
Configuration management for EigenTrust Lab.

Single source of truth for solver defaults and API settings.
"""

from eigentrust_lab.config.settings import Settings, get_settings, reset_settings_cache  # noqa: F401

__all__ = ["Settings", "get_settings", "reset_settings_cache"]
