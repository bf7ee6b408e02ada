# src/chat_support/interfaces/clock.py
from abc import ABC, abstractmethod
from datetime import datetime, timezone


class IClock(ABC):
    """Source of the current time. Always timezone-aware UTC."""

    @abstractmethod
    def now(self) -> datetime:
        pass


class SystemClock(IClock):
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
