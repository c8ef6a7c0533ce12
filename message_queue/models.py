"""Data models for the message queue."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .parts import QueuePart
from .priority import Priority


class MessageStatus(str, Enum):
    queued = "queued"
    sending = "sending"
    sent = "sent"


class QueueMode(str, Enum):
    immediate = "immediate"
    hold = "hold"

    @classmethod
    def from_config(cls, value: Optional[str]) -> "QueueMode":
        """Only an explicit "hold" enables queuing."""
        if isinstance(value, str) and value.strip().lower() == "hold":
            return cls.hold
        return cls.immediate


class ModelRef(BaseModel):
    """Provider/model pair as the host names it."""

    model_config = ConfigDict(populate_by_name=True)

    provider_id: str = Field(alias="providerID")
    model_id: str = Field(alias="modelID")

    def to_host(self) -> Dict[str, str]:
        return self.model_dump(by_alias=True)


@dataclass
class QueuedMessage:
    """A user message held back until the session is idle.

    Priority is fixed at creation; only the drain engine changes status.
    """

    session_id: str
    parts: List[QueuePart]
    preview: str
    sequence: int
    priority: Priority = Priority.normal
    agent: Optional[str] = None
    model: Optional[ModelRef] = None
    system: Optional[str] = None
    tools: Optional[Dict[str, bool]] = None
    status: MessageStatus = MessageStatus.queued

    def __setattr__(self, name: str, value: Any) -> None:
        if name == "priority" and "priority" in self.__dict__:
            raise AttributeError("priority cannot change once a message is queued")
        super().__setattr__(name, value)

    @property
    def is_pending(self) -> bool:
        return self.status != MessageStatus.sent


@dataclass
class ChatInput:
    """Metadata the host passes alongside a new user message."""

    session_id: str
    message_id: Optional[str] = None
    agent: Optional[str] = None
    model: Optional[ModelRef] = None


@dataclass
class ChatOutput:
    """The host's in-flight message and parts, mutable before the host runs.

    ``message`` holds the host's message info (agent, model, system, tools);
    ``parts`` is the list of host part dicts the host is about to process.
    """

    message: Dict[str, Any] = field(default_factory=dict)
    parts: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class ToolContext:
    """Invocation context for the queue command."""

    session_id: str
    message_id: str
    agent: Optional[str] = None
