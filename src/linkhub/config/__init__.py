"""Configuration management utilities."""

from .settings import LinkHubSettings, get_settings

__all__ = [
    "LinkHubSettings",
    "get_settings",
]
