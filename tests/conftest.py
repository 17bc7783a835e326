import logging
import os

import pytest

from apns_message.config import reset_settings
from apns_message.services.message import Message

VALID_TOKEN = "a" * 64


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch):
    """Keep process settings and APNS_MESSAGE_* variables from leaking between tests."""
    for name in list(os.environ):
        if name.startswith("APNS_MESSAGE_"):
            monkeypatch.delenv(name, raising=False)
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def valid_token() -> str:
    """A well-formed device token."""
    return VALID_TOKEN


@pytest.fixture
def message(valid_token) -> Message:
    """A message with a single recipient and no other fields."""
    return Message(valid_token)


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after a test reconfigures logging."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield root_logger
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
    for handler in handlers:
        root_logger.addHandler(handler)
    root_logger.setLevel(level)
