"""Queue toasts.

The builders are pure functions of a queue snapshot. QueueNotifier hands
the result to the host and never lets a UI failure reach the caller.
"""

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from config.settings import Settings
from .base import HostClient
from .models import MessageStatus, QueuedMessage
from .parts import truncate_preview
from .store import SessionQueueStore

TOAST_TITLE = "Message Queue"
TOAST_MAX_PREVIEWS = 3
EMPTY_TOAST_MESSAGE = "Queue empty. All queued messages sent."


@dataclass(frozen=True)
class Toast:
    title: str
    message: str
    variant: str
    duration: float


def pending_count(messages: List[QueuedMessage]) -> int:
    return sum(1 for m in messages if m.is_pending)


def _format_entry(index: int, item: QueuedMessage) -> str:
    text = truncate_preview(item.preview)
    tier = f"[{item.priority.value}]"
    if item.status == MessageStatus.sent:
        return f" {index}. {tier} [x] ~~{text}~~"
    if item.status == MessageStatus.sending:
        return f" {index}. {tier} [>] {text}"
    return f" {index}. {tier} [ ] {text}"


def build_toast_message(messages: List[QueuedMessage]) -> str:
    """
    Render the queue for display:

        Message Queue (2 pending)
        -------------------------
        Current: first
         1. [normal] [>] first
         2. [high] [ ] second
        Use /queue status to check details
    """
    header = f"Message Queue ({pending_count(messages)} pending)"
    lines = [header, "-" * len(header)]

    current = next((m for m in messages if m.status == MessageStatus.sending), None)
    if current:
        lines.append(f"Current: {truncate_preview(current.preview)}")

    shown = messages[:TOAST_MAX_PREVIEWS]
    if shown:
        lines.extend(_format_entry(i, item) for i, item in enumerate(shown, 1))
    else:
        lines.append(" (empty)")

    if len(messages) > len(shown):
        lines.append(f" +{len(messages) - len(shown)} more")

    lines.append("Use /queue status to check details")
    return "\n".join(lines)


def build_empty_toast_message() -> str:
    return EMPTY_TOAST_MESSAGE


def compose_toast(
    messages: List[QueuedMessage],
    settings: Settings,
    force_empty: bool = False,
) -> Optional[Toast]:
    """Pick the toast for a queue snapshot, or None if nothing should show."""
    if not messages and not force_empty:
        return None

    if pending_count(messages) == 0:
        return Toast(
            title=TOAST_TITLE,
            message=build_empty_toast_message(),
            variant="success",
            duration=settings.empty_toast_duration_ms,
        )
    return Toast(
        title=TOAST_TITLE,
        message=build_toast_message(messages),
        variant="info",
        duration=settings.toast_duration_ms,
    )


class QueueNotifier:
    """Shows queue toasts through the host, swallowing UI failures."""

    def __init__(
        self, client: HostClient, store: SessionQueueStore, settings: Settings
    ):
        self.client = client
        self.store = store
        self.settings = settings

    async def notify(self, session_id: str, force_empty: bool = False) -> bool:
        """
        Show the current queue state for a session.

        Returns:
            True if a toast was handed to the host, False if there was
            nothing to show or the host failed to show it.
        """
        state = self.store.peek(session_id)
        messages = state.snapshot() if state else []
        toast = compose_toast(messages, self.settings, force_empty=force_empty)
        if toast is None:
            return False

        try:
            await self.client.show_toast(
                title=toast.title,
                message=toast.message,
                variant=toast.variant,
                duration=toast.duration,
            )
        except Exception as e:
            # TUI may not be active (e.g., API-only usage).
            logger.debug(f"Toast failed for session {session_id}: {e}")
            return False
        return True
