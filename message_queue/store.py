"""Per-session queue storage.

Holds every session's queued messages together with the flags the
admission policy and drain engine read: busy, draining and the last
queue command seen for the session.
"""

import itertools
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from loguru import logger

from .models import MessageStatus, ModelRef, QueuedMessage
from .parts import QueuePart
from .priority import Priority


@dataclass
class SessionQueueState:
    """Queue and flags for a single session."""

    session_id: str
    messages: List[QueuedMessage] = field(default_factory=list)
    busy: bool = False
    draining: bool = False
    last_command_message_id: Optional[str] = None

    @property
    def pending_count(self) -> int:
        return sum(1 for m in self.messages if m.is_pending)

    def next_queued(self) -> Optional[QueuedMessage]:
        """Highest priority queued message; earliest sequence breaks ties."""
        candidates = [m for m in self.messages if m.status == MessageStatus.queued]
        if not candidates:
            return None
        return min(candidates, key=lambda m: (-m.priority.rank, m.sequence))

    def snapshot(self) -> List[QueuedMessage]:
        return list(self.messages)


class SessionQueueStore:
    """
    Keyed collection of session queue states.

    States are created lazily on first reference and live for the
    lifetime of the process. Lookups that must not create state use
    peek().
    """

    def __init__(self):
        self._sessions: Dict[str, SessionQueueState] = {}
        self._sequence = itertools.count()

    def get(self, session_id: str) -> SessionQueueState:
        """Get the state for a session, creating it if needed."""
        state = self._sessions.get(session_id)
        if state is None:
            state = SessionQueueState(session_id=session_id)
            self._sessions[session_id] = state
            logger.debug(f"QUEUE_STORE: created state session_id={session_id}")
        return state

    def peek(self, session_id: str) -> Optional[SessionQueueState]:
        """Get the state for a session without creating it."""
        return self._sessions.get(session_id)

    def enqueue(
        self,
        session_id: str,
        *,
        parts: List[QueuePart],
        preview: str,
        priority: Priority = Priority.normal,
        agent: Optional[str] = None,
        model: Optional[ModelRef] = None,
        system: Optional[str] = None,
        tools: Optional[Dict[str, bool]] = None,
    ) -> QueuedMessage:
        """Append a new queued message and return it."""
        message = QueuedMessage(
            session_id=session_id,
            parts=list(parts),
            preview=preview,
            sequence=next(self._sequence),
            priority=priority,
            agent=agent,
            model=model,
            system=system,
            tools=tools,
        )
        self.get(session_id).messages.append(message)
        return message

    def pending_count(self, session_id: str) -> int:
        state = self.peek(session_id)
        return state.pending_count if state else 0

    def is_busy(self, session_id: str) -> bool:
        state = self.peek(session_id)
        return state.busy if state else False

    def set_busy(self, session_id: str, busy: bool) -> None:
        self.get(session_id).busy = busy

    def is_draining(self, session_id: str) -> bool:
        state = self.peek(session_id)
        return state.draining if state else False

    def clear(self, session_id: str) -> int:
        """Drop every message for a session. Returns how many were dropped."""
        state = self.peek(session_id)
        if state is None:
            return 0
        dropped = len(state.messages)
        state.messages = []
        return dropped

