"""Configuration management for the chat support service."""

from chat_support.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
