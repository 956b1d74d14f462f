"""mailcatcher-inbox - inspect emails captured by MailCatcher from test scenarios.

This package provides an HTTP client for the MailCatcher API that keeps a
per-scenario inbox with read/unread traversal, plus assertion helpers and a
pytest plugin built on top of it.
"""

__version__ = "0.1.0"

from mailcatcher_inbox.assertions import EmailAssertions
from mailcatcher_inbox.client import InboxClient
from mailcatcher_inbox.config import Settings, get_settings
from mailcatcher_inbox.exceptions import (
    ConfigurationError,
    EmptyInboxError,
    InboxAssertionError,
    MailCatcherError,
    NotFoundError,
    TransportError,
)
from mailcatcher_inbox.models import FullMessage, MessageHeader
from mailcatcher_inbox.result import Result
from mailcatcher_inbox.source import EmailSource

__all__ = [
    "ConfigurationError",
    "EmailAssertions",
    "EmailSource",
    "EmptyInboxError",
    "FullMessage",
    "InboxAssertionError",
    "InboxClient",
    "MailCatcherError",
    "MessageHeader",
    "NotFoundError",
    "Result",
    "Settings",
    "TransportError",
    "__version__",
    "get_settings",
]
