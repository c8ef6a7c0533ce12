"""
Message Queue Plugin

Host-facing entry point. Holds user messages back while a session is busy
and replays them once it goes idle or the user releases the queue.

Hooks the host calls:
- handle_event: session status changes and executed commands
- chat_message: every new user message, before the host processes it
- execute_queue_command: the /queue tool (hold, immediate, status)
"""

from typing import Any, Dict, Mapping, Optional, Union

from loguru import logger

from config.logging_config import configure_logging
from config.settings import Settings, get_settings
from .admission import make_placeholder, should_queue
from .base import HostClient
from .drain import DrainEngine
from .exceptions import InvalidQueueActionError
from .guard import ModeGuard
from .marking import is_internal_message
from .models import ChatInput, ChatOutput, ModelRef, QueueMode, ToolContext
from .notifications import QueueNotifier
from .parts import extract_preview, normalize_parts
from .priority import extract_priority
from .store import SessionQueueStore

QUEUE_COMMAND_NAME = "queue"


def _coerce_model(
    value: Union[ModelRef, Mapping[str, Any], None],
) -> Optional[ModelRef]:
    if value is None or isinstance(value, ModelRef):
        return value
    return ModelRef.model_validate(value)


class MessageQueuePlugin:
    """
    Wires the queue components to the host.

    One instance per process: the mode is process-wide, queues are per
    session.
    """

    def __init__(self, client: HostClient, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self.client = client
        self.mode = QueueMode.from_config(self.settings.message_queue_mode)
        self.store = SessionQueueStore()
        self.notifier = QueueNotifier(client, self.store, self.settings)
        self.engine = DrainEngine(client, self.store, self.notifier)
        self.guard = ModeGuard(self.store)

        logger.info(f"MessageQueuePlugin initialized (mode={self.mode.value})")

    # ==================== Events ====================

    async def handle_event(self, event: Dict[str, Any]) -> None:
        """
        Handle a host event.

        Raises:
            SendFailedError: if a drain triggered by this event fails.
        """
        event_type = event.get("type")
        props = event.get("properties") or {}

        if event_type == "command.executed":
            if props.get("name") == QUEUE_COMMAND_NAME:
                self.guard.record_command(props["sessionID"], props["messageID"])
            return

        if event_type == "session.status":
            session_id = props["sessionID"]
            status = props.get("status") or {}
            busy = status.get("type") != "idle"
            self.store.set_busy(session_id, busy)
            if not busy and self.mode == QueueMode.hold:
                await self.engine.drain(session_id)
            return

        if event_type == "session.idle":
            session_id = props["sessionID"]
            self.store.set_busy(session_id, False)
            if self.mode == QueueMode.hold:
                await self.engine.drain(session_id)

    # ==================== Chat Hook ====================

    async def chat_message(self, input: ChatInput, output: ChatOutput) -> bool:
        """
        Intercept a new user message if the queue should hold it.

        On interception the message is queued and output.parts is replaced
        in place by a single placeholder part.

        Returns:
            True if the message was queued, False if it passes through.
        """
        if self.mode != QueueMode.hold:
            return False
        if is_internal_message(output.parts):
            return False

        session_id = input.session_id
        if not should_queue(
            self.mode,
            busy=self.store.is_busy(session_id),
            draining=self.store.is_draining(session_id),
            pending=self.store.pending_count(session_id),
        ):
            return False

        original_parts = list(output.parts)
        priority, queued_parts = extract_priority(normalize_parts(original_parts))
        message_info = output.message or {}

        queued = self.store.enqueue(
            session_id,
            parts=queued_parts,
            preview=extract_preview(queued_parts),
            priority=priority,
            agent=input.agent or message_info.get("agent"),
            model=_coerce_model(input.model or message_info.get("model")),
            system=message_info.get("system"),
            tools=message_info.get("tools"),
        )

        pending = self.store.pending_count(session_id)
        placeholder = make_placeholder(original_parts, pending)
        if placeholder:
            output.parts[:] = [placeholder]

        with logger.contextualize(session_id=session_id, message_id=input.message_id):
            logger.debug(
                f"Queued [{queued.priority.value}] {queued.preview!r} ({pending} pending)"
            )

        await self.notifier.notify(session_id)
        return True

    # ==================== Queue Command ====================

    def status_text(self, session_id: str) -> str:
        return "\n".join(
            [
                f"Mode: {self.mode.value}",
                f"Queued messages: {self.store.pending_count(session_id)}",
                f"Session busy: {str(self.store.is_busy(session_id)).lower()}",
            ]
        )

    async def execute_queue_command(
        self, action: Optional[str], ctx: ToolContext
    ) -> str:
        """
        Run the queue tool.

        Args:
            action: "hold", "immediate" or "status" (default)
            ctx: Invocation context carrying session and message ids

        Raises:
            InvalidQueueActionError: for any other action
            SendFailedError: if switching to immediate triggers a failing drain
        """
        next_action = action or "status"
        if next_action == "status":
            return self.status_text(ctx.session_id)

        try:
            next_mode = QueueMode(next_action)
        except ValueError:
            raise InvalidQueueActionError(next_action) from None

        if next_mode == QueueMode.immediate and not self.guard.authorize_release(
            ctx.session_id, ctx.message_id
        ):
            logger.warning(
                f"Ignoring automatic queue release session_id={ctx.session_id} "
                f"message_id={ctx.message_id}"
            )
            return "\n".join(
                [
                    "Ignoring automatic queue release. Use /queue immediate to switch modes.",
                    self.status_text(ctx.session_id),
                ]
            )

        self.mode = next_mode
        logger.info(f"Message queue mode set to {self.mode.value}")
        if next_mode == QueueMode.immediate:
            await self.engine.drain(ctx.session_id)
        return f"Message queue mode set to: {self.mode.value}"


def create_plugin(
    client: HostClient, settings: Optional[Settings] = None
) -> MessageQueuePlugin:
    """Host entry point: set up logging, then build the plugin."""
    settings = settings or get_settings()
    configure_logging(settings.log_file)
    return MessageQueuePlugin(client, settings)
