"""The capability consumed by the assertion helpers.

Anything that can fetch, filter and open captured emails satisfies
``EmailSource``; ``InboxClient`` is the MailCatcher implementation.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from mailcatcher_inbox.models import FullMessage, MessageHeader
from mailcatcher_inbox.result import Result


@runtime_checkable
class EmailSource(Protocol):
    """Fetch/open/filter operations over a captured inbox."""

    def delete_all_emails(self) -> Result[None]: ...

    def fetch_emails(self) -> Result[list[MessageHeader]]: ...

    def access_inbox_for(self, address: str) -> Result[list[MessageHeader]]: ...

    def open_next_unread_email(self) -> Result[FullMessage]: ...

    def get_opened_email(self, fetch_next: bool = False) -> Result[FullMessage]: ...

    def get_current_inbox(self) -> list[MessageHeader]: ...

    def get_unread_inbox(self) -> list[MessageHeader]: ...

    def get_email_subject(self, email: FullMessage) -> str: ...

    def get_email_body(self, email: FullMessage) -> Result[str]: ...

    def get_email_to(self, email: FullMessage) -> str: ...

    def get_email_cc(self, email: FullMessage) -> str: ...

    def get_email_bcc(self, email: FullMessage) -> str: ...

    def get_email_recipients(self, email: FullMessage) -> str: ...

    def get_email_sender(self, email: FullMessage) -> str: ...

    def get_email_reply_to(self, email: FullMessage) -> str: ...

    def get_email_priority(self, email: FullMessage) -> str: ...
