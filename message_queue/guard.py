"""Guard against automatic queue releases.

The model can call the queue tool on its own. Switching to immediate mode
is only honoured when the call belongs to a message that came from an
explicit /queue command typed by the user.
"""

from typing import Optional

from loguru import logger

from .store import SessionQueueStore


class ModeGuard:
    """Tracks the last /queue command per session and gates releases."""

    def __init__(self, store: SessionQueueStore):
        self.store = store

    def record_command(self, session_id: str, message_id: str) -> None:
        self.store.get(session_id).last_command_message_id = message_id
        logger.debug(
            f"Recorded /queue command session_id={session_id} message_id={message_id}"
        )

    def last_command(self, session_id: str) -> Optional[str]:
        state = self.store.peek(session_id)
        return state.last_command_message_id if state else None

    def authorize_release(self, session_id: str, message_id: str) -> bool:
        """True if message_id matches the recorded command; consumes it on match."""
        state = self.store.peek(session_id)
        if state is None or state.last_command_message_id is None:
            return False
        if state.last_command_message_id != message_id:
            return False
        state.last_command_message_id = None
        return True
