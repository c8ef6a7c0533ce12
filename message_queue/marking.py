"""Marking of replayed messages.

The drain engine sends queued messages back through the host, which routes
them through the same chat hook that queued them. Marked parts tell the hook
to let them through.
"""

from typing import Any, List, Mapping

from .parts import QueuePart, TextPart

INTERNAL_METADATA_KEY = "__open_queue_internal"


def mark_internal_parts(parts: List[QueuePart]) -> List[QueuePart]:
    """Return copies of parts with the internal marker on every text part.

    A message without text gets an empty synthetic text part prepended to
    carry the marker.
    """
    has_text = False
    marked: List[QueuePart] = []
    for part in parts:
        if not isinstance(part, TextPart):
            marked.append(part)
            continue
        has_text = True
        metadata = {**(part.metadata or {}), INTERNAL_METADATA_KEY: True}
        marked.append(part.model_copy(update={"metadata": metadata}))

    if has_text:
        return marked

    marker = TextPart(
        text="",
        synthetic=True,
        ignored=True,
        metadata={INTERNAL_METADATA_KEY: True},
    )
    return [marker, *marked]


def is_internal_message(parts: List[Mapping[str, Any]]) -> bool:
    """True if any host part carries the internal marker."""
    for part in parts:
        metadata = part.get("metadata") or {}
        if metadata.get(INTERNAL_METADATA_KEY):
            return True
    return False
