"""Assertion helpers for test scenarios.

``EmailAssertions`` turns the ``Result`` values returned by an ``EmailSource``
into test failures. How a failure is raised is up to the ``fail`` callable:
the default raises ``InboxAssertionError``; the pytest plugin passes
``pytest.fail``.
"""

from __future__ import annotations

import re
from collections.abc import Callable
from typing import NoReturn, TypeVar

import structlog

from mailcatcher_inbox.exceptions import InboxAssertionError
from mailcatcher_inbox.models import FullMessage, MessageHeader
from mailcatcher_inbox.result import Result
from mailcatcher_inbox.source import EmailSource

logger = structlog.get_logger()

T = TypeVar("T")

FailHandler = Callable[[str], NoReturn]


def _raise_assertion(message: str) -> NoReturn:
    raise InboxAssertionError(message)


class EmailAssertions:
    """Assertions over the inbox and the opened email of an ``EmailSource``."""

    def __init__(self, source: EmailSource, fail: FailHandler | None = None) -> None:
        """Create the helper.

        Args:
            source: Where emails are fetched and opened.
            fail: Callable raising the test failure. Must not return.
        """
        self.source = source
        self._fail_handler = fail or _raise_assertion

    # Actions

    def delete_all_emails(self) -> None:
        self._unwrap(self.source.delete_all_emails())

    def fetch_emails(self) -> list[MessageHeader]:
        return self._unwrap(self.source.fetch_emails())

    def access_inbox_for(self, address: str) -> list[MessageHeader]:
        return self._unwrap(self.source.access_inbox_for(address))

    def open_next_unread_email(self) -> FullMessage:
        return self._unwrap(self.source.open_next_unread_email())

    # Inbox

    def have_emails(self) -> None:
        if not self.source.get_current_inbox():
            self._fail("Expected emails in the current inbox, found none")

    def have_number_of_emails(self, expected: int) -> None:
        actual = len(self.source.get_current_inbox())
        if actual != expected:
            self._fail(f"Expected {expected} emails in the current inbox, found {actual}")

    def dont_have_emails(self) -> None:
        actual = len(self.source.get_current_inbox())
        if actual:
            self._fail(f"Expected no emails in the current inbox, found {actual}")

    def have_unread_emails(self) -> None:
        if not self.source.get_unread_inbox():
            self._fail("Expected unread emails, found none")

    def have_number_of_unread_emails(self, expected: int) -> None:
        actual = len(self.source.get_unread_inbox())
        if actual != expected:
            self._fail(f"Expected {expected} unread emails, found {actual}")

    def dont_have_unread_emails(self) -> None:
        actual = len(self.source.get_unread_inbox())
        if actual:
            self._fail(f"Expected no unread emails, found {actual}")

    # Opened email

    def see_in_opened_email_subject(self, expected: str) -> None:
        email = self._opened()
        self._assert_contains("subject", expected, self.source.get_email_subject(email))

    def dont_see_in_opened_email_subject(self, unexpected: str) -> None:
        email = self._opened()
        self._assert_not_contains("subject", unexpected, self.source.get_email_subject(email))

    def see_in_opened_email_body(self, expected: str) -> None:
        self._assert_contains("body", expected, self._opened_body())

    def dont_see_in_opened_email_body(self, unexpected: str) -> None:
        self._assert_not_contains("body", unexpected, self._opened_body())

    def see_in_opened_email_sender(self, expected: str) -> None:
        email = self._opened()
        self._assert_contains("sender", expected, self.source.get_email_sender(email))

    def dont_see_in_opened_email_sender(self, unexpected: str) -> None:
        email = self._opened()
        self._assert_not_contains("sender", unexpected, self.source.get_email_sender(email))

    def see_in_opened_email_reply_to(self, expected: str) -> None:
        email = self._opened()
        self._assert_contains("Reply-To", expected, self.source.get_email_reply_to(email))

    def dont_see_in_opened_email_reply_to(self, unexpected: str) -> None:
        email = self._opened()
        self._assert_not_contains("Reply-To", unexpected, self.source.get_email_reply_to(email))

    def see_in_opened_email_recipients(self, expected: str) -> None:
        """Check the To, Cc and Bcc fields together."""
        email = self._opened()
        self._assert_contains("recipients", expected, self.source.get_email_recipients(email))

    def dont_see_in_opened_email_recipients(self, unexpected: str) -> None:
        email = self._opened()
        self._assert_not_contains(
            "recipients", unexpected, self.source.get_email_recipients(email)
        )

    def see_in_opened_email_to_field(self, expected: str) -> None:
        email = self._opened()
        self._assert_contains("To", expected, self.source.get_email_to(email))

    def dont_see_in_opened_email_to_field(self, unexpected: str) -> None:
        email = self._opened()
        self._assert_not_contains("To", unexpected, self.source.get_email_to(email))

    def see_in_opened_email_cc_field(self, expected: str) -> None:
        email = self._opened()
        self._assert_contains("Cc", expected, self.source.get_email_cc(email))

    def dont_see_in_opened_email_cc_field(self, unexpected: str) -> None:
        email = self._opened()
        self._assert_not_contains("Cc", unexpected, self.source.get_email_cc(email))

    def see_in_opened_email_bcc_field(self, expected: str) -> None:
        email = self._opened()
        self._assert_contains("Bcc", expected, self.source.get_email_bcc(email))

    def dont_see_in_opened_email_bcc_field(self, unexpected: str) -> None:
        email = self._opened()
        self._assert_not_contains("Bcc", unexpected, self.source.get_email_bcc(email))

    def see_opened_email_priority(self, expected: str) -> None:
        """Exact match against the X-Priority header value."""
        actual = self.source.get_email_priority(self._opened())
        if actual != expected:
            self._fail(f"Expected opened email priority {expected!r}, got {actual!r}")

    def see_in_opened_email_body_matching(self, pattern: str) -> None:
        body = self._opened_body()
        if re.search(pattern, body) is None:
            self._fail(f"Opened email body does not match {pattern!r}")

    def grab_matches_from_opened_email_body(self, pattern: str) -> list[str]:
        """Return the first match of ``pattern`` in the body and its groups.

        Returns:
            ``[full_match, group1, group2, ...]``, or an empty list when the
            pattern does not match. Unmatched groups are empty strings.
        """
        match = re.search(pattern, self._opened_body())
        if match is None:
            return []
        return [match.group(0), *(group or "" for group in match.groups())]

    def grab_from_opened_email_body(self, pattern: str) -> str:
        matches = self.grab_matches_from_opened_email_body(pattern)
        if not matches:
            self._fail(f"No match for {pattern!r} in opened email body")
        return matches[0]

    def _opened(self) -> FullMessage:
        return self._unwrap(self.source.get_opened_email(False))

    def _opened_body(self) -> str:
        return self._unwrap(self.source.get_email_body(self._opened()))

    def _assert_contains(self, field: str, expected: str, actual: str) -> None:
        if expected not in actual:
            self._fail(f"Expected {expected!r} in opened email {field}, got {actual!r}")

    def _assert_not_contains(self, field: str, unexpected: str, actual: str) -> None:
        if unexpected in actual:
            self._fail(f"Did not expect {unexpected!r} in opened email {field}, got {actual!r}")

    def _unwrap(self, result: Result[T]) -> T:
        if result.error is not None:
            self._fail(f"{type(result.error).__name__}: {result.error}")
        return result.value  # type: ignore[return-value]

    def _fail(self, message: str) -> NoReturn:
        logger.info("email_assertion_failed", message=message)
        self._fail_handler(message)
        # Handlers must raise; this covers one that returns.
        raise InboxAssertionError(message)
