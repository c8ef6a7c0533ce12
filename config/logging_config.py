"""Loguru-based structured logging configuration.

All logs are written to the configured log file as JSON lines.
Stdlib logging is intercepted and funneled to loguru so host libraries
end up in the same file.
Context vars (session_id, message_id) bound via logger.contextualize()
are promoted to top-level keys for easy grep/filter per session.
"""

import json
import logging
from typing import Optional

from loguru import logger


_configured = False
_sink_id: Optional[int] = None

_CONTEXT_KEYS = ("session_id", "message_id")


def _serialize_with_context(record) -> str:
    """Render a record as one JSON line.

    Loguru treats the returned string as a format template, so the JSON is
    stashed on the record and referenced by name.
    """
    extra = record.get("extra", {})
    out = {
        "time": str(record["time"]),
        "level": record["level"].name,
        "message": record["message"],
        "module": record["name"],
        "function": record["function"],
        "line": record["line"],
    }
    for key in _CONTEXT_KEYS:
        if extra.get(key) is not None:
            out[key] = extra[key]
    if record["exception"] is not None:
        out["exception"] = repr(record["exception"].value)
    record["_json"] = json.dumps(out, default=str)
    return "{_json}\n"


class InterceptHandler(logging.Handler):
    """Redirect stdlib logging to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def configure_logging(
    log_file: str, *, level: str = "DEBUG", force: bool = False
) -> None:
    """Send loguru output to log_file as JSON lines and intercept stdlib logging.

    Idempotent: a second call is a no-op unless force=True (tests use force
    to point logging at a temporary file).
    """
    global _configured, _sink_id
    if _configured and not force:
        return
    _configured = True

    if _sink_id is not None:
        try:
            logger.remove(_sink_id)
        except ValueError:
            # Sink already gone (logger.remove() was called elsewhere)
            pass
    else:
        # Drop the default stderr handler on first configuration only
        logger.remove()

    open(log_file, "w", encoding="utf-8").close()

    _sink_id = logger.add(
        log_file,
        level=level,
        format=_serialize_with_context,
        encoding="utf-8",
        mode="a",
    )

    logging.root.handlers = [InterceptHandler()]
    logging.root.setLevel(logging.DEBUG)
