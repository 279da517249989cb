"""Console logging setup for the planner CLI."""

from __future__ import annotations

import logging

from rich.logging import RichHandler

_CONTEXT_KEYS = (
    "colony",
    "kind",
    "position",
    "result",
    "reason",
    "layout",
    "error",
    "fuel",
    "labor",
    "required",
    "remaining",
)


class _ContextFilter(logging.Filter):
    """Appends structured ``extra`` context to event-style messages."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = {key: getattr(record, key) for key in _CONTEXT_KEYS if hasattr(record, key)}
        if context:
            rendered = " ".join(f"{key}={value}" for key, value in context.items())
            record.msg = f"{record.msg} {rendered}"
        return True


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Install a rich console handler on the ``colony_planner`` logger."""
    logger = logging.getLogger("colony_planner")
    logger.setLevel(level.upper())
    if not any(isinstance(handler, RichHandler) for handler in logger.handlers):
        handler = RichHandler(show_path=False, markup=False)
        handler.addFilter(_ContextFilter())
        logger.addHandler(handler)
    return logger
