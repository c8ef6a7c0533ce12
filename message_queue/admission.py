"""Admission policy: decide whether an inbound message is held back."""

from typing import Any, Dict, List, Mapping, Optional

from .models import QueueMode

QUEUED_TEXT_PREFIX = "Queued (will send after current run)"

# Pending count at or above which hold mode queues an idle session's message.
# Zero means every message is queued while holding, so even the first one
# shows up in the queue display instead of going out silently.
MIN_PENDING_TO_QUEUE = 0


def should_queue(
    mode: QueueMode,
    busy: bool,
    draining: bool,
    pending: int,
    threshold: int = MIN_PENDING_TO_QUEUE,
) -> bool:
    if mode != QueueMode.hold:
        return False
    return busy or draining or pending >= threshold


def make_placeholder(
    parts: List[Mapping[str, Any]], count: int
) -> Optional[Dict[str, Any]]:
    """Build the synthetic part shown in place of a queued message.

    Ids are borrowed from the first text part (or the first part) so the
    host can still attach it to the original message. Returns None when
    there is nothing to borrow from.
    """
    template = next((p for p in parts if p.get("type") == "text"), None)
    if template is None and parts:
        template = parts[0]
    if template is None:
        return None

    return {
        "id": template.get("id"),
        "sessionID": template.get("sessionID"),
        "messageID": template.get("messageID"),
        "type": "text",
        "text": f"{QUEUED_TEXT_PREFIX}; {count} pending",
        "synthetic": True,
        "ignored": True,
    }
