"""Queueable message parts.

Host parts arrive as plain dicts (the host's own schema). They are converted
into a closed set of pydantic models so a queued message can be replayed
later through the host's prompt API.
"""

import re
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from loguru import logger
from pydantic import BaseModel

PREVIEW_MAX_LENGTH = 28
PREVIEW_CUT_LENGTH = 25


# =============================================================================
# Part Variants
# =============================================================================


class TextPart(BaseModel):
    type: Literal["text"] = "text"
    text: str
    synthetic: Optional[bool] = None
    ignored: Optional[bool] = None
    metadata: Optional[Dict[str, Any]] = None


class FilePart(BaseModel):
    type: Literal["file"] = "file"
    url: str
    mime: str
    filename: Optional[str] = None
    source: Optional[Dict[str, Any]] = None


class AgentPart(BaseModel):
    type: Literal["agent"] = "agent"
    name: str
    source: Optional[Dict[str, Any]] = None


class SubtaskPart(BaseModel):
    type: Literal["subtask"] = "subtask"
    prompt: str
    description: str
    agent: str


QueuePart = Union[TextPart, FilePart, AgentPart, SubtaskPart]


# =============================================================================
# Normalization
# =============================================================================


def to_queue_part(part: Mapping[str, Any]) -> Optional[QueuePart]:
    """Convert one host part to its queue variant.

    Returns None for part types that cannot be replayed (tool calls,
    reasoning, step markers and so on). Callers drop those explicitly.
    """
    part_type = part.get("type")
    if part_type == "text":
        return TextPart(text=part.get("text", ""))
    if part_type == "file":
        return FilePart(
            url=part.get("url", ""),
            mime=part.get("mime", ""),
            filename=part.get("filename"),
            source=part.get("source"),
        )
    if part_type == "agent":
        return AgentPart(name=part.get("name", ""), source=part.get("source"))
    if part_type == "subtask":
        return SubtaskPart(
            prompt=part.get("prompt", ""),
            description=part.get("description", ""),
            agent=part.get("agent", ""),
        )
    return None


def normalize_parts(parts: List[Mapping[str, Any]]) -> List[QueuePart]:
    """Convert host parts, dropping the ones that cannot be replayed."""
    normalized: List[QueuePart] = []
    for part in parts:
        converted = to_queue_part(part)
        if converted is None:
            logger.debug(f"Dropping non-replayable part type={part.get('type')!r}")
            continue
        normalized.append(converted)
    return normalized


def part_to_dict(part: QueuePart) -> Dict[str, Any]:
    """Serialize a part for the host prompt API."""
    return part.model_dump(exclude_none=True)


# =============================================================================
# Preview
# =============================================================================


def truncate_preview(text: str) -> str:
    trimmed = re.sub(r"\s+", " ", text).strip()
    if len(trimmed) <= PREVIEW_MAX_LENGTH:
        return trimmed
    return f"{trimmed[:PREVIEW_CUT_LENGTH]}..."


def extract_preview(parts: List[QueuePart]) -> str:
    """Short label for a queued message: first text, else a type tag."""
    for part in parts:
        if isinstance(part, TextPart):
            return truncate_preview(part.text)
    for part_cls, tag in (
        (FilePart, "[file]"),
        (AgentPart, "[agent]"),
        (SubtaskPart, "[subtask]"),
    ):
        if any(isinstance(part, part_cls) for part in parts):
            return tag
    return "[message]"
