"""Session-scoped queue for user messages sent while the host is busy."""

from .base import HostClient
from .models import (
    ChatInput,
    ChatOutput,
    MessageStatus,
    ModelRef,
    QueuedMessage,
    QueueMode,
    ToolContext,
)
from .priority import Priority
from .store import SessionQueueStore, SessionQueueState
from .drain import DrainEngine
from .guard import ModeGuard
from .notifications import QueueNotifier
from .plugin import MessageQueuePlugin, create_plugin
from .exceptions import QueueError, SendFailedError, InvalidQueueActionError

__all__ = [
    "HostClient",
    "ChatInput",
    "ChatOutput",
    "MessageStatus",
    "ModelRef",
    "QueuedMessage",
    "QueueMode",
    "ToolContext",
    "Priority",
    "SessionQueueStore",
    "SessionQueueState",
    "DrainEngine",
    "ModeGuard",
    "QueueNotifier",
    "MessageQueuePlugin",
    "create_plugin",
    "QueueError",
    "SendFailedError",
    "InvalidQueueActionError",
]
