"""MailCatcher HTTP client implementation.

This module provides the client used by test scenarios to fetch, filter and
open emails captured by a running MailCatcher server.

Notes:
    Operations never raise for server or inbox failures. Each one returns a
    ``Result``; the caller decides how a failure is reported.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterable
from typing import Optional

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from mailcatcher_inbox import parsing
from mailcatcher_inbox.config import Settings
from mailcatcher_inbox.exceptions import (
    ConfigurationError,
    EmptyInboxError,
    NotFoundError,
    TransportError,
)
from mailcatcher_inbox.models import FullMessage, MessageHeader
from mailcatcher_inbox.result import Result

logger = structlog.get_logger()

REQUEST_TIMEOUT_SECONDS = 1.0

_HEADER_LIST = TypeAdapter(list[MessageHeader])


def sort_emails(inbox: Iterable[MessageHeader]) -> list[MessageHeader]:
    """Sort headers newest first.

    Headers with equal timestamps have no guaranteed relative order.
    """
    return sorted(inbox, key=lambda header: header.created_at, reverse=True)


class InboxClient:
    """MailCatcher client holding the inbox state of one test scenario.

    The client keeps the fetched headers, the current (possibly filtered)
    inbox, a FIFO queue of unread headers and the email currently opened
    for assertions.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            settings: Client settings. If None, uses default settings.
            transport: Optional httpx transport, e.g. ``httpx.MockTransport``.

        Raises:
            ConfigurationError: If the HTTP client options are rejected.
        """
        from mailcatcher_inbox.config import get_settings

        self.settings = settings or get_settings()

        try:
            self._http = httpx.Client(
                base_url=self.settings.base_url,
                timeout=REQUEST_TIMEOUT_SECONDS,
                transport=transport,
                **self.settings.http_options,
            )
        except (TypeError, ValueError, httpx.InvalidURL) as exc:
            raise ConfigurationError(f"Invalid HTTP client options: {exc}") from exc

        self._fetched_emails: list[MessageHeader] = []
        self._current_inbox: list[MessageHeader] = []
        self._unread_inbox: deque[MessageHeader] = deque()
        self._opened_email: Optional[FullMessage] = None

        logger.info("inbox_client_initialized", base_url=self.settings.base_url)

    def __enter__(self) -> InboxClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP connection pool."""
        self._http.close()

    # Server operations

    def delete_all_emails(self) -> Result[None]:
        """Delete every email captured by the server."""
        result = self._request("DELETE", "/messages")
        if not result.ok:
            return Result(error=result.error)

        logger.info("emails_deleted")
        return Result.success(None)

    def fetch_emails(self) -> Result[list[MessageHeader]]:
        """Fetch all email headers and make them the current inbox.

        Headers are sorted newest first. On failure the fetched, current and
        unread inboxes are all left empty.

        Returns:
            Result carrying a copy of the sorted headers.
        """
        self._fetched_emails = []
        self._set_current_inbox([])

        result = self._request("GET", "/messages")
        if not result.ok:
            return Result(error=result.error)

        assert result.value is not None
        try:
            headers = _HEADER_LIST.validate_json(result.value.content)
        except ValidationError as exc:
            logger.error("malformed_message_list", error=str(exc))
            return Result.failure(NotFoundError(f"Malformed message list: {exc}"))

        self._fetched_emails = sort_emails(headers)
        self._set_current_inbox(self._fetched_emails)

        logger.info("emails_fetched", count=len(self._fetched_emails))
        return Result.success(list(self._fetched_emails))

    def get_full_email(self, message_id: str) -> Result[FullMessage]:
        """Fetch the complete representation of a message.

        Args:
            message_id: ID taken from a message header.
        """
        result = self._request("GET", f"/messages/{message_id}.json")
        if not result.ok:
            return Result(error=result.error)

        assert result.value is not None
        try:
            email = FullMessage.model_validate_json(result.value.content)
        except ValidationError as exc:
            logger.error("malformed_message", message_id=message_id, error=str(exc))
            return Result.failure(NotFoundError(f"Malformed message {message_id}: {exc}"))

        return Result.success(email)

    # Inbox traversal

    def access_inbox_for(self, address: str) -> Result[list[MessageHeader]]:
        """Restrict the current inbox to emails received by ``address``.

        Filters the last fetched headers without contacting the server.

        Args:
            address: Bare recipient address, e.g. ``user@example.com``.
        """
        wanted = f"<{address}>"
        inbox = [header for header in self._fetched_emails if wanted in header.recipients]
        self._set_current_inbox(inbox)

        logger.info("inbox_accessed", address=address, count=len(inbox))
        return Result.success(list(inbox))

    def open_next_unread_email(self) -> Result[FullMessage]:
        """Pop the next unread header and open its full email.

        The header is consumed even when fetching the full email fails; the
        previously opened email is kept in that case.
        """
        if not self._unread_inbox:
            logger.warning("unread_inbox_empty")
            return Result.failure(EmptyInboxError("Unread Inbox is Empty"))

        header = self._unread_inbox.popleft()
        result = self.get_full_email(header.id)
        if result.ok:
            self._opened_email = result.value
            logger.info(
                "email_opened",
                message_id=header.id,
                unread_remaining=len(self._unread_inbox),
            )
        return result

    def get_opened_email(self, fetch_next: bool = False) -> Result[FullMessage]:
        """Return the opened email, opening the next unread one when needed.

        Args:
            fetch_next: Advance to the next unread email even if one is open.
        """
        if fetch_next or self._opened_email is None:
            result = self.open_next_unread_email()
            if not result.ok:
                return result

        assert self._opened_email is not None
        return Result.success(self._opened_email)

    def get_current_inbox(self) -> list[MessageHeader]:
        return list(self._current_inbox)

    def get_unread_inbox(self) -> list[MessageHeader]:
        return list(self._unread_inbox)

    # Derived fields

    def get_email_subject(self, email: FullMessage) -> str:
        return email.subject

    def get_email_body(self, email: FullMessage) -> Result[str]:
        """Fetch the body of an email, preferring HTML over plain text."""
        extension = "html" if "html" in email.formats else "plain"
        result = self._request("GET", f"/messages/{email.id}.{extension}")
        if not result.ok:
            return Result(error=result.error)

        assert result.value is not None
        return Result.success(result.value.text)

    def get_email_to(self, email: FullMessage) -> str:
        return parsing.email_to(email)

    def get_email_cc(self, email: FullMessage) -> str:
        return parsing.email_cc(email)

    def get_email_bcc(self, email: FullMessage) -> str:
        return parsing.email_bcc(email)

    def get_email_recipients(self, email: FullMessage) -> str:
        return parsing.email_recipients(email)

    def get_email_sender(self, email: FullMessage) -> str:
        return parsing.email_sender(email)

    def get_email_reply_to(self, email: FullMessage) -> str:
        return parsing.email_reply_to(email)

    def get_email_priority(self, email: FullMessage) -> str:
        return parsing.email_priority(email)

    def _set_current_inbox(self, inbox: list[MessageHeader]) -> None:
        self._current_inbox = list(inbox)
        self._unread_inbox = deque(inbox)

    def _request(self, method: str, path: str) -> Result[httpx.Response]:
        logger.debug("mailcatcher_request", method=method, path=path)

        try:
            response = self._http.request(method, path)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            status_code = exc.response.status_code
            logger.error(
                "mailcatcher_request_failed",
                method=method,
                path=path,
                status_code=status_code,
            )
            if status_code == 404:
                return Result.failure(NotFoundError(f"{method} {path} returned HTTP 404"))
            return Result.failure(
                TransportError(
                    f"{method} {path} returned HTTP {status_code}",
                    status_code=status_code,
                )
            )
        except httpx.HTTPError as exc:
            logger.error("mailcatcher_request_failed", method=method, path=path, error=str(exc))
            return Result.failure(TransportError(f"{method} {path} failed: {exc}"))

        return Result.success(response)
