"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import httpx
import pytest

from mailcatcher_inbox.client import InboxClient
from mailcatcher_inbox.config import Settings

pytest_plugins = ["pytester"]


class FakeMailCatcher:
    """In-memory stand-in for the MailCatcher HTTP API."""

    def __init__(self) -> None:
        self.headers: list[dict] = []
        self.messages: dict[str, dict] = {}
        self.bodies: dict[str, str] = {}
        self.statuses: dict[tuple[str, str], int] = {}
        self.requests: list[tuple[str, str]] = []

    def add(self, message: dict, **bodies: str) -> None:
        self.headers.append(
            {
                "id": message["id"],
                "sender": message.get("sender"),
                "recipients": message["recipients"],
                "subject": message["subject"],
                "size": str(len(message["source"])),
                "created_at": message["created_at"],
            }
        )
        self.messages[str(message["id"])] = message
        for extension, text in bodies.items():
            self.bodies[f"/messages/{message['id']}.{extension}"] = text

    def fail(self, method: str, path: str, status_code: int) -> None:
        self.statuses[(method, path)] = status_code

    def paths(self) -> list[str]:
        return [path for _, path in self.requests]

    def handle(self, request: httpx.Request) -> httpx.Response:
        method, path = request.method, request.url.path
        self.requests.append((method, path))

        status_code = self.statuses.get((method, path))
        if status_code is not None:
            return httpx.Response(status_code, text="error")

        if path == "/messages" and method == "DELETE":
            self.headers.clear()
            self.messages.clear()
            return httpx.Response(204)
        if path == "/messages" and method == "GET":
            return httpx.Response(200, json=self.headers)
        if path.endswith(".json"):
            message_id = path[len("/messages/") : -len(".json")]
            if message_id in self.messages:
                return httpx.Response(200, json=self.messages[message_id])
        if path in self.bodies:
            return httpx.Response(200, text=self.bodies[path])
        return httpx.Response(404, text="Not Found")


def build_message(
    message_id: int,
    created_at,
    recipients: list[str],
    source: str,
    *,
    subject: str = "Subject",
    formats: list[str] | None = None,
) -> dict:
    return {
        "id": message_id,
        "sender": "<sender@example.com>",
        "recipients": recipients,
        "subject": subject,
        "source": source,
        "size": str(len(source)),
        "type": "multipart/alternative",
        "created_at": created_at,
        "formats": formats or ["source", "html", "plain"],
        "attachments": [],
    }


WELCOME_SOURCE = (
    "Date: Mon, 01 Jan 2024 10:05:00 +0000\r\n"
    "From: Shop <sender@example.com>\r\n"
    "Reply-To: replies@example.com\r\n"
    "To: bob@example.com, alice@example.com\r\n"
    "Cc: carol@example.com\r\n"
    "Subject: Welcome aboard\r\n"
    "X-Priority: 1\r\n"
    "\r\n"
    "Hello!\r\n"
)

RECEIPT_SOURCE = (
    "Date: Mon, 01 Jan 2024 10:03:20 +0000\r\n"
    "From: billing@example.com\r\n"
    "To: bob@example.com\r\n"
    "Subject: Your receipt\r\n"
    "\r\n"
    "Total: 42 EUR\r\n"
)

REMINDER_SOURCE = (
    "Date: Mon, 01 Jan 2024 10:01:40 +0000\r\n"
    "From: reminders@example.com\r\n"
    "To: alice@example.com\r\n"
    "Bcc: audit@example.com\r\n"
    "Subject: Reminder\r\n"
    "\r\n"
    "Don't forget.\r\n"
)


@pytest.fixture
def settings() -> Settings:
    """Provide settings pointing at the fake server."""
    return Settings(_env_file=None, url="http://mailcatcher.test", port=1080)


@pytest.fixture
def fake_server() -> FakeMailCatcher:
    """Provide a fake server holding three emails.

    Newest first: 2 (welcome, bob + alice), 3 (receipt, bob), 1 (reminder, alice).
    """
    server = FakeMailCatcher()
    server.add(
        build_message(
            1,
            100,
            ["<alice@example.com>"],
            REMINDER_SOURCE,
            subject="Reminder",
            formats=["source", "plain"],
        ),
        plain="Don't forget.",
    )
    server.add(
        build_message(
            2,
            300,
            ["<bob@example.com>", "<alice@example.com>"],
            WELCOME_SOURCE,
            subject="Welcome aboard",
        ),
        html="<p>Hello!</p>",
        plain="Hello!",
    )
    server.add(
        build_message(
            3,
            200,
            ["<bob@example.com>"],
            RECEIPT_SOURCE,
            subject="Your receipt",
            formats=["source", "plain"],
        ),
        plain="Total: 42 EUR",
    )
    return server


@pytest.fixture
def message_factory():
    """Provide the builder for full message payloads."""
    return build_message


@pytest.fixture
def client(settings: Settings, fake_server: FakeMailCatcher):
    """Provide an InboxClient wired to the fake server."""
    with InboxClient(settings, transport=httpx.MockTransport(fake_server.handle)) as inbox_client:
        yield inbox_client


# Overrides for the fixtures provided by mailcatcher_inbox.pytest_plugin.


@pytest.fixture
def mailcatcher_settings(settings: Settings) -> Settings:
    return settings


@pytest.fixture
def mailcatcher_transport(fake_server: FakeMailCatcher) -> httpx.BaseTransport:
    return httpx.MockTransport(fake_server.handle)
