import logging
import asyncio
import os
import sys

import pytest

# Set mock environment BEFORE any imports that use Settings
os.environ.setdefault("OPENCODE_MESSAGE_QUEUE_MODE", "hold")

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock

from config.settings import Settings
from message_queue.base import HostClient
from message_queue.models import ChatInput, ChatOutput, ModelRef


class FakeHostClient(HostClient):
    """Host double whose prompt calls stay pending until resolved by index."""

    def __init__(self):
        self.prompt_calls: List[Dict[str, Any]] = []
        self.toast_calls: List[Dict[str, Any]] = []
        self._futures: List[asyncio.Future] = []

    async def send_prompt(self, session_id, *, parts, **kwargs):
        self.prompt_calls.append({"session_id": session_id, "parts": parts, **kwargs})
        future = asyncio.get_running_loop().create_future()
        self._futures.append(future)
        return await future

    async def show_toast(self, *, title, message, variant, duration):
        self.toast_calls.append(
            {"title": title, "message": message, "variant": variant, "duration": duration}
        )

    def resolve(self, index: int) -> None:
        self._futures[index].set_result({"ok": True})

    def reject(self, index: int, error: Exception) -> None:
        self._futures[index].set_exception(error)

    def sent_texts(self) -> List[Optional[str]]:
        texts = []
        for call in self.prompt_calls:
            text = next(
                (p["text"] for p in call["parts"] if p["type"] == "text" and p["text"]),
                None,
            )
            texts.append(text)
        return texts


@pytest.fixture
def settings():
    return Settings(
        OPENCODE_MESSAGE_QUEUE_MODE="hold",
        OPENCODE_MESSAGE_QUEUE_TOAST_DURATION_MS=86_400_000,
        OPENCODE_MESSAGE_QUEUE_EMPTY_TOAST_DURATION_MS=4_000,
    )


@pytest.fixture
def fake_client():
    return FakeHostClient()


@pytest.fixture
def mock_client():
    client = MagicMock(spec=HostClient)
    client.send_prompt = AsyncMock(return_value={"ok": True})
    client.show_toast = AsyncMock()
    return client


@pytest.fixture
def chat_payload_factory():
    def _create(session_id: str, message_id: str, text: str, **kwargs):
        message = {
            "id": message_id,
            "sessionID": session_id,
            "role": "user",
            "agent": "user",
            "model": {"providerID": "test", "modelID": "test"},
        }
        message.update(kwargs.pop("message", {}))
        parts = kwargs.pop(
            "parts",
            [
                {
                    "id": f"{message_id}-part",
                    "sessionID": session_id,
                    "messageID": message_id,
                    "type": "text",
                    "text": text,
                }
            ],
        )
        chat_input = ChatInput(
            session_id=session_id,
            message_id=message_id,
            agent="user",
            model=ModelRef(provider_id="test", model_id="test"),
        )
        return chat_input, ChatOutput(message=message, parts=parts)

    return _create


@pytest.fixture(autouse=True)
def _propagate_loguru_to_caplog():
    """Route loguru logs to stdlib logging so pytest caplog captures them."""
    from loguru import logger as loguru_logger

    class _PropagateHandler:
        def write(self, message):
            record = message.record
            level = record["level"].no
            stdlib_level = min(level, logging.CRITICAL)
            py_logger = logging.getLogger(record["name"])
            py_logger.log(stdlib_level, record["message"])

    handler_id = loguru_logger.add(_PropagateHandler(), format="{message}")
    yield
    try:
        loguru_logger.remove(handler_id)
    except ValueError:
        pass  # Handler already removed (e.g. by test_logging_config tests)
