"""
Logging utilities with consistent formatting and emoji indicators.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Final

EMOJI_MAP: Final[dict[str, str]] = {
    "DEBUG": "🔍",
    "INFO": "ℹ️",
    "WARNING": "⚠️",
    "ERROR": "❌",
    "CRITICAL": "🔥",
    "SUCCESS": "✅",
}

PREFIX: Final[str] = "🖼️ Gallery"
_OWN_PACKAGES: Final[tuple[str, ...]] = ("cgs_backend", "cgs_shared")

SUCCESS_LEVEL: Final[int] = 25  # between INFO and WARNING
logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")


class EmojiFormatter(logging.Formatter):
    """One line per record: ``🖼️ Gallery [✅] cgs.features.index.scanner: message``."""

    def __init__(self) -> None:
        super().__init__("%(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        emoji = EMOJI_MAP.get(record.levelname, "🖼️")
        return f"{PREFIX} [{emoji}] {super().format(record)}"


def _short_name(name: str) -> str:
    if name.startswith("__main__"):
        return "main"
    head, _, rest = name.partition(".")
    return rest if head in _OWN_PACKAGES and rest else name


def get_logger(name: str, level: int | None = None) -> logging.Logger:
    """
    Get a ``cgs.*`` logger with the gallery prefix and emoji indicators.

    Args:
        name: Logger name (usually __name__); the top-level package is dropped
        level: Optional logging level; INFO when the logger is first configured

    Returns:
        Logger with its own stream handler that does not propagate to root
    """
    logger = logging.getLogger(f"cgs.{_short_name(name)}")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(EmojiFormatter())
        logger.addHandler(handler)
        logger.propagate = False
        logger.setLevel(logging.INFO)
    if level is not None:
        logger.setLevel(level)
    return logger


def log_success(logger: logging.Logger, message: str) -> None:
    logger.log(SUCCESS_LEVEL, message)


def log_structured(logger: logging.Logger, level: int, message: str, **context: Any) -> None:
    """Emit a structured JSON log entry with contextual fields."""
    payload = {
        "message": message,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "context": context,
    }
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


def set_log_level(level: int) -> None:
    """Apply ``level`` to every ``cgs.*`` logger created so far."""
    for name, candidate in logging.root.manager.loggerDict.items():
        if (name == "cgs" or name.startswith("cgs.")) and isinstance(candidate, logging.Logger):
            candidate.setLevel(level)
