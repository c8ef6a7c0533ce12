"""Drain engine: replays a session's queued messages one at a time."""

from loguru import logger

from .base import HostClient
from .exceptions import SendFailedError
from .marking import mark_internal_parts
from .models import MessageStatus
from .notifications import QueueNotifier
from .parts import part_to_dict
from .store import SessionQueueStore


class DrainEngine:
    """
    Sends queued messages through the host, highest priority first.

    At most one drain runs per session; a second request while one is in
    progress returns immediately and the running loop picks up anything
    queued in the meantime. A failed send puts the message back, stops the
    loop and raises SendFailedError; the next trigger resumes from there.
    """

    def __init__(
        self,
        client: HostClient,
        store: SessionQueueStore,
        notifier: QueueNotifier,
    ):
        self.client = client
        self.store = store
        self.notifier = notifier

    async def drain(self, session_id: str) -> int:
        """
        Drain the queue for a session.

        Returns:
            Number of messages sent by this call (0 if a drain was already
            running or there was nothing to send).

        Raises:
            SendFailedError: if the host rejects a message.
        """
        state = self.store.peek(session_id)
        if state is None or state.draining or not state.messages:
            return 0

        state.draining = True
        sent = 0
        with logger.contextualize(session_id=session_id):
            logger.info(f"Draining {state.pending_count} queued message(s)")
            try:
                showed_empty = False
                while True:
                    message = state.next_queued()
                    if message is None:
                        break

                    message.status = MessageStatus.sending
                    await self.notifier.notify(session_id)

                    try:
                        await self.client.send_prompt(
                            session_id,
                            agent=message.agent,
                            model=message.model.to_host() if message.model else None,
                            system=message.system,
                            tools=message.tools,
                            parts=[
                                part_to_dict(p)
                                for p in mark_internal_parts(message.parts)
                            ],
                        )
                    except Exception as e:
                        message.status = MessageStatus.queued
                        logger.error(
                            f"Send failed, message requeued: {message.preview!r}: {e}"
                        )
                        raise SendFailedError(
                            session_id, message.preview, raw_error=e
                        ) from e

                    message.status = MessageStatus.sent
                    sent += 1
                    logger.debug(
                        f"Sent queued message [{message.priority.value}] "
                        f"{message.preview!r}"
                    )

                    # Only the last iteration's toast counts as the empty notice
                    showed_empty = state.pending_count == 0
                    await self.notifier.notify(session_id)

                self.store.clear(session_id)
                if not showed_empty:
                    await self.notifier.notify(session_id, force_empty=True)
                logger.info(f"Drain complete, sent {sent} message(s)")
            finally:
                state.draining = False

        return sent
