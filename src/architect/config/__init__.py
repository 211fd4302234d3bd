"""
Configuration module for Architect.

Uses pydantic-settings for environment variable loading.
"""

from architect.config.settings import Settings

__all__ = ["Settings"]
