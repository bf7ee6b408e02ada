"""In-memory implementations of the session and agent stores."""

from chat_support.infrastructure.stores.agents import InMemoryAgentStore
from chat_support.infrastructure.stores.sessions import InMemorySessionStore

__all__ = ["InMemoryAgentStore", "InMemorySessionStore"]
