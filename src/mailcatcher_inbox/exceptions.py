"""Custom exceptions for mailcatcher-inbox."""

from __future__ import annotations


class MailCatcherError(Exception):
    """Base exception for all mailcatcher-inbox errors."""


class TransportError(MailCatcherError):
    """Exception raised when a request to the capture server fails.

    Covers connection errors, timeouts and non-2xx responses. ``status_code``
    is set when the server answered.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyInboxError(MailCatcherError):
    """Exception raised when opening the next email from an empty unread inbox."""


class NotFoundError(MailCatcherError):
    """Exception raised for missing messages or absent/malformed message fields."""


class ConfigurationError(MailCatcherError):
    """Exception raised for configuration related errors."""


class InboxAssertionError(AssertionError):
    """Raised by the default failure handler of the assertion helpers."""
