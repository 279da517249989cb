from __future__ import annotations

import logging

from rich.logging import RichHandler

from colony_planner.telemetry.logging import configure_logging


def test_configure_logging_installs_single_rich_handler() -> None:
    logger = configure_logging("debug")
    configure_logging("debug")
    try:
        handlers = [handler for handler in logger.handlers if isinstance(handler, RichHandler)]
        assert len(handlers) == 1
        assert logger.level == logging.DEBUG
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_context_is_appended_to_event_messages() -> None:
    logger = configure_logging()
    try:
        [handler] = [handler for handler in logger.handlers if isinstance(handler, RichHandler)]
        record = logger.makeRecord(
            "colony_planner.reconcile", logging.INFO, __file__, 1, "pass_deferred", (), None,
            extra={"colony": "W1N1", "reason": "no plan"},
        )
        handler.filter(record)
        assert record.getMessage() == "pass_deferred colony=W1N1 reason=no plan"
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)


def test_safety_check_numbers_reach_the_console() -> None:
    logger = configure_logging()
    try:
        [handler] = [handler for handler in logger.handlers if isinstance(handler, RichHandler)]
        record = logger.makeRecord(
            "colony_planner.reconcile", logging.WARNING, __file__, 1, "unsafe_to_destroy_spawn", (), None,
            extra={"colony": "W1N1", "fuel": 1000, "required": 15000},
        )
        handler.filter(record)
        assert record.getMessage() == "unsafe_to_destroy_spawn colony=W1N1 fuel=1000 required=15000"
    finally:
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
        logger.setLevel(logging.NOTSET)
