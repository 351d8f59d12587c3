"""
Configuration module - environment-loaded settings shared by every app.

Apps subclass ``BaseAppSettings`` and extend ``missing_settings`` with their
own required values; ``validate_required`` is called once at startup.
"""

from common.config.base_settings import BaseAppSettings

__all__ = ["BaseAppSettings"]
