"""Session store — per-session chat history and the last computed signal summary.

The store is injected into the API layer at startup.  Writes are
last-writer-wins; concurrent requests on one session may overwrite each
other's cached summary.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, Literal, Optional, Protocol, runtime_checkable

from fxadvisor.errors import SessionNotFound

logger = logging.getLogger("fxadvisor")

MAX_HISTORY = 50


@dataclass(frozen=True)
class ChatMessage:
    """One entry of a session's chat history."""

    role: Literal["user", "assistant"]
    content: str
    timestamp: float
    type: Literal["text", "image"] = "text"

    def to_dict(self) -> dict:
        return {
            "role": self.role,
            "content": self.content,
            "timestamp": self.timestamp,
            "type": self.type,
        }


@dataclass
class SessionRecord:
    session_id: str
    created_at: float
    expires_at: float
    history: list[ChatMessage] = field(default_factory=list)
    signal_summary: Optional[str] = None


@runtime_checkable
class SessionStore(Protocol):
    """Interface the API layer depends on."""

    def get_or_create(self, session_id: Optional[str] = None) -> SessionRecord:
        ...

    def get(self, session_id: str) -> SessionRecord:
        ...

    def append_message(self, session_id: str, message: ChatMessage) -> None:
        ...

    def clear_history(self, session_id: str) -> None:
        ...

    def set_signal_summary(self, session_id: str, summary: str) -> None:
        ...

    def get_signal_summary(self, session_id: str) -> Optional[str]:
        ...


class InMemorySessionStore:
    """Process-local ``SessionStore`` with sliding TTL expiry.

    Implements ``SessionStore``.
    """

    def __init__(
        self,
        ttl_seconds: int = 86400,
        max_history: int = MAX_HISTORY,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = ttl_seconds
        self._max_history = max_history
        self._clock = clock
        self._sessions: dict[str, SessionRecord] = {}

    def _purge_expired(self) -> None:
        now = self._clock()
        expired = [sid for sid, rec in self._sessions.items() if rec.expires_at <= now]
        for sid in expired:
            del self._sessions[sid]
        if expired:
            logger.debug("Expired %d session(s)", len(expired))

    def _touch(self, record: SessionRecord) -> None:
        record.expires_at = self._clock() + self._ttl

    def get_or_create(self, session_id: Optional[str] = None) -> SessionRecord:
        """Return the live session *session_id*, creating it when absent.

        A new random id is issued when *session_id* is ``None``.
        """
        self._purge_expired()
        if session_id and session_id in self._sessions:
            record = self._sessions[session_id]
            self._touch(record)
            return record

        now = self._clock()
        record = SessionRecord(
            session_id=session_id or str(uuid.uuid4()),
            created_at=now,
            expires_at=now + self._ttl,
        )
        self._sessions[record.session_id] = record
        logger.info("Session %s created", record.session_id)
        return record

    def get(self, session_id: str) -> SessionRecord:
        """Return a live session or raise ``SessionNotFound``."""
        self._purge_expired()
        record = self._sessions.get(session_id)
        if record is None:
            raise SessionNotFound()
        return record

    def append_message(self, session_id: str, message: ChatMessage) -> None:
        record = self.get(session_id)
        record.history.append(message)
        # Keep only the most recent messages
        if len(record.history) > self._max_history:
            del record.history[: len(record.history) - self._max_history]
        self._touch(record)

    def clear_history(self, session_id: str) -> None:
        self.get(session_id).history.clear()

    def set_signal_summary(self, session_id: str, summary: str) -> None:
        record = self.get(session_id)
        record.signal_summary = summary
        self._touch(record)

    def get_signal_summary(self, session_id: str) -> Optional[str]:
        try:
            return self.get(session_id).signal_summary
        except SessionNotFound:
            return None
