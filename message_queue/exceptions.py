"""Exception hierarchy for the message queue."""

from typing import Any


class QueueError(Exception):
    """Base exception for all queue errors."""


class SendFailedError(QueueError):
    """Raised when the host rejects a replayed message.

    The message has already been put back in the queue; a later drain
    retries it.
    """

    def __init__(self, session_id: str, preview: str, raw_error: Any = None):
        super().__init__(f"Failed to send queued message '{preview}': {raw_error}")
        self.session_id = session_id
        self.preview = preview
        self.raw_error = raw_error


class InvalidQueueActionError(QueueError, ValueError):
    """Raised when the queue command gets an action it does not know."""

    def __init__(self, action: str):
        super().__init__(
            f"Unknown queue action '{action}'. Valid: hold, immediate, status"
        )
        self.action = action
