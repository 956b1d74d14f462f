"""Helpers for extracting header values from a captured message's raw source."""

from __future__ import annotations

import re

from mailcatcher_inbox.models import FullMessage

# "Reply-To: " contains "To: ", so To is anchored on the preceding line break.
TO_PREFIX = "\nTo: "
CC_PREFIX = "Cc: "
BCC_PREFIX = "Bcc: "
FROM_PREFIX = "From: "
REPLY_TO_PREFIX = "Reply-To: "
PRIORITY_PREFIX = "X-Priority: "


def text_after_string(haystack: str, needle: str) -> str:
    """Return the rest of the line following the first match of ``needle``.

    The needle is matched literally and case-insensitively and must be followed
    by at least one character other than CR or LF.

    Args:
        haystack: Text to search, usually a raw message source.
        needle: Literal prefix, e.g. ``"Cc: "``.

    Returns:
        The trimmed trailing text, or an empty string when the needle is empty
        or not found.
    """

    if not needle:
        return ""
    match = re.search(re.escape(needle) + r"([^\r\n]+)", haystack, re.IGNORECASE)
    if match is None:
        return ""
    return match.group(1).strip()


def email_to(email: FullMessage) -> str:
    return text_after_string(email.source, TO_PREFIX)


def email_cc(email: FullMessage) -> str:
    return text_after_string(email.source, CC_PREFIX)


def email_bcc(email: FullMessage) -> str:
    return text_after_string(email.source, BCC_PREFIX)


def email_recipients(email: FullMessage) -> str:
    """To, Cc and Bcc values joined by single spaces (empty parts included)."""
    return " ".join((email_to(email), email_cc(email), email_bcc(email)))


def email_sender(email: FullMessage) -> str:
    return text_after_string(email.source, FROM_PREFIX)


def email_reply_to(email: FullMessage) -> str:
    return text_after_string(email.source, REPLY_TO_PREFIX)


def email_priority(email: FullMessage) -> str:
    return text_after_string(email.source, PRIORITY_PREFIX)
