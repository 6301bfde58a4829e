"""
Shared pytest fixtures for patterns tests.

Provides fixtures for:
- A small class hierarchy for type-matching rules
- Integer rule sets used across evaluator tests
- Log capture for the structured logger
"""

import logging
from io import StringIO

import pytest

from patterns.matching.rule import equals_to, then, then_apply, then_supply, when


# =============================================================================
# Class hierarchy for type matching
# =============================================================================

class A:
    def __init__(self, value: str):
        self.value = value


class B(A):
    pass


class C(A):
    def say(self) -> str:
        return f"C here. I've got {self.value}."


@pytest.fixture
def hierarchy():
    """(A, B, C) classes; B and C extend A, only C has say()."""
    return A, B, C


# =============================================================================
# Integer rules
# =============================================================================

@pytest.fixture
def integer_rules():
    """Rules without a catch-all: 0 matches nothing."""
    return [
        when(equals_to(3), then("b")),
        when(equals_to(4), then_supply(lambda: "c")),
        when(lambda i: i > 0, then_apply(str)),
        when(lambda i: i < 0, then_apply(lambda i: str(i + 1))),
    ]


# =============================================================================
# Log capture
# =============================================================================

@pytest.fixture
def capture_logs():
    """StringIO plus a DEBUG handler writing into it."""
    log_capture = StringIO()
    handler = logging.StreamHandler(log_capture)
    handler.setLevel(logging.DEBUG)
    return log_capture, handler


@pytest.fixture
def readable_log_format(monkeypatch):
    monkeypatch.delenv("LOG_FORMAT", raising=False)


@pytest.fixture
def attached_logger(capture_logs, readable_log_format):
    """Route the library logger into capture_logs for the duration of a test."""
    from patterns.logger import logger

    log_capture, handler = capture_logs
    saved_handlers = list(logger.logger.handlers)
    saved_level = logger.logger.level

    logger.logger.handlers.clear()
    logger.logger.addHandler(handler)
    logger.logger.setLevel(logging.DEBUG)
    try:
        yield log_capture
    finally:
        logger.logger.handlers.clear()
        for saved in saved_handlers:
            logger.logger.addHandler(saved)
        logger.logger.setLevel(saved_level)
