# src/chat_support/interfaces/__init__.py
from .clock import IClock, SystemClock
from .repository import IAgentStore, ISessionStore

__all__ = [
    "IClock",
    "SystemClock",
    "IAgentStore",
    "ISessionStore",
]
