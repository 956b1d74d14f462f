"""pytest integration.

Registered through the ``pytest11`` entry point. Provides a scenario-scoped
``InboxClient`` (``mailcatcher``) and assertion helpers bound to
``pytest.fail`` (``inbox``).
"""

from __future__ import annotations

from collections.abc import Iterator

import httpx
import pytest
import structlog

from mailcatcher_inbox.assertions import EmailAssertions
from mailcatcher_inbox.client import InboxClient
from mailcatcher_inbox.config import Settings, get_settings
from mailcatcher_inbox.result import Result

logger = structlog.get_logger()


def finish_scenario(client: InboxClient, settings: Settings) -> Result[None]:
    """Run the end-of-scenario cleanup configured in ``settings``."""
    if not settings.delete_emails_after_scenario:
        return Result.success(None)

    logger.info("scenario_cleanup", action="delete_all_emails")
    return client.delete_all_emails()


@pytest.fixture(scope="session")
def mailcatcher_settings() -> Settings:
    """Settings used to build ``mailcatcher``; override to configure per project."""
    return get_settings()


@pytest.fixture
def mailcatcher_transport() -> httpx.BaseTransport | None:
    """Transport for ``mailcatcher``; override to inject ``httpx.MockTransport``."""
    return None


@pytest.fixture
def mailcatcher(
    mailcatcher_settings: Settings,
    mailcatcher_transport: httpx.BaseTransport | None,
) -> Iterator[InboxClient]:
    """A fresh client per test, cleaned up according to the settings."""
    client = InboxClient(mailcatcher_settings, transport=mailcatcher_transport)
    try:
        yield client
        result = finish_scenario(client, mailcatcher_settings)
        if not result.ok:
            pytest.fail(f"Deleting emails after scenario failed: {result.message}")
    finally:
        client.close()


@pytest.fixture
def inbox(mailcatcher: InboxClient) -> EmailAssertions:
    return EmailAssertions(mailcatcher, fail=pytest.fail)
