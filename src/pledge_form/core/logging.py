"""Loguru logging configuration for the form core.

Every record carries the form session it belongs to (``-`` outside a
session).  A JSON sink is available for records bound with
``json_output=True``, and a rotating file sink is added when a ``log_dir``
is provided.
"""

import sys
from pathlib import Path

from loguru import logger

_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level:<8} | session={extra[session_id]} | "
    "{name}:{function}:{line} | {message}"
)


def setup_logging(log_level: str = "INFO", log_dir: str | None = None) -> None:
    """Configure Loguru sinks.

    Args:
        log_level: Minimum log level to emit (case-insensitive).
        log_dir: Optional directory for log files.  When set, a file sink
            rotated every 24 hours and retained for 7 days is added.
    """
    level = log_level.upper()
    logger.remove()
    logger.configure(extra={"session_id": "-"})
    logger.add(sys.stderr, level=level, format=_LOG_FORMAT, serialize=False)
    logger.add(
        sys.stderr,
        level=level,
        serialize=True,
        filter=lambda record: record["extra"].get("json_output", False),
    )

    if log_dir:
        log_path = Path(log_dir)
        log_path.mkdir(parents=True, exist_ok=True)
        logger.add(
            log_path / "pledge-form.log",
            level=level,
            format=_LOG_FORMAT,
            rotation="24h",
            retention="7 days",
        )


def session_logger(session_id: str):
    """Return a logger bound to a form session id."""
    return logger.bind(session_id=session_id)


def redact_phone(phone: str | None) -> str:
    """Mask all but the last two digits of a phone number for log output.

    Args:
        phone: Raw phone number, possibly empty.

    Returns:
        Masked representation such as ``********78``; ``<none>`` when empty.
    """
    if not phone:
        return "<none>"
    if len(phone) <= 2:
        return "*" * len(phone)
    return "*" * (len(phone) - 2) + phone[-2:]
