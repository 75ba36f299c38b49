"""Storage of per-chat conversation state."""

from dataclasses import dataclass
from typing import Protocol

from plant_catalog.domain.sessions import ChatSession


class SessionStore(Protocol):
    """Persistence interface for chat sessions."""

    def get(self, chat_id: int) -> ChatSession:
        """Return the session for a chat, creating a default one if absent."""

    def save(self, chat_id: int, session: ChatSession) -> None:
        """Persist the session after an update was handled."""


@dataclass
class InMemorySessionStore(SessionStore):
    """Process-local session store; sessions live until restart."""

    _sessions: dict[int, ChatSession]

    def __init__(self) -> None:
        self._sessions = {}

    def get(self, chat_id: int) -> ChatSession:
        """Return the stored session or register a fresh default one."""
        session = self._sessions.get(chat_id)
        if session is None:
            session = ChatSession()
            self._sessions[chat_id] = session
        return session

    def save(self, chat_id: int, session: ChatSession) -> None:
        """Store the session object for the chat."""
        self._sessions[chat_id] = session
