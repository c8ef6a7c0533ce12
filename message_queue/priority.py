"""Priority directive parsing.

A message may start with ``[priority: high]`` (or low/normal) to jump the
queue. The directive is stripped before the message is replayed.
"""

import re
from enum import Enum
from typing import List, Optional, Tuple

from .parts import QueuePart, TextPart

_DIRECTIVE_RE = re.compile(
    r"^\s*\[\s*priority\s*:\s*(low|normal|high)\s*\]\s*", re.IGNORECASE
)


class Priority(str, Enum):
    low = "low"
    normal = "normal"
    high = "high"

    @property
    def rank(self) -> int:
        """Higher rank drains first."""
        return _RANKS[self]

    @classmethod
    def parse(
        cls, value: Optional[str], default: Optional["Priority"] = None
    ) -> "Priority":
        """Parse a tier name, falling back to default (normal) on anything else."""
        fallback = default if default is not None else cls.normal
        if not isinstance(value, str):
            return fallback
        try:
            return cls(value.strip().lower())
        except ValueError:
            return fallback


_RANKS = {Priority.low: 0, Priority.normal: 1, Priority.high: 2}


def extract_priority(parts: List[QueuePart]) -> Tuple[Priority, List[QueuePart]]:
    """Pull a leading priority directive out of the first part.

    Only the first part is inspected and only when it is text. The returned
    list is a new list; the matched part is copied, never mutated.
    """
    if not parts or not isinstance(parts[0], TextPart):
        return Priority.normal, list(parts)

    first = parts[0]
    match = _DIRECTIVE_RE.match(first.text)
    if not match:
        return Priority.normal, list(parts)

    tier = Priority.parse(match.group(1))
    stripped = first.model_copy(update={"text": first.text[match.end():]})
    return tier, [stripped, *parts[1:]]
