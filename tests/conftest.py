"""Pytest configuration and fixtures for eventful tests."""

from collections.abc import Generator
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import MagicMock

import pytest

from eventful.config import EventfulConfig
from eventful.config_loader import CONFIG_PATH_ENV_VAR, ENV_VAR_MAPPINGS
from eventful.events import EventKind
from eventful.host import LocalHookRegistry, LocalSessionTable
from eventful.webhooks import WebhookClient, WebhookDeliveryResult

# =============================================================================
# Environment Isolation
# =============================================================================


@pytest.fixture(autouse=True)
def clean_eventful_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Make sure no EVENTFUL_* variable from the real environment leaks in."""
    monkeypatch.delenv(CONFIG_PATH_ENV_VAR, raising=False)
    for env_var, _key, _kind in ENV_VAR_MAPPINGS:
        monkeypatch.delenv(env_var, raising=False)


# =============================================================================
# Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Provide a temporary directory for tests."""
    with TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


# =============================================================================
# Configuration Fixtures
# =============================================================================


WEBHOOK_URLS = {
    EventKind.MESSAGE: "https://hooks.example.com/message",
    EventKind.PRESENCE_SET: "https://hooks.example.com/presence-set",
    EventKind.PRESENCE_UNSET: "https://hooks.example.com/presence-unset",
    EventKind.ONLINE: "https://hooks.example.com/online",
    EventKind.OFFLINE: "https://hooks.example.com/offline",
}


@pytest.fixture
def webhook_urls() -> dict[EventKind, str]:
    return dict(WEBHOOK_URLS)


@pytest.fixture
def config(webhook_urls: dict[EventKind, str]) -> EventfulConfig:
    """Config with a URL for every event kind and no auth."""
    return EventfulConfig(urls=webhook_urls)


@pytest.fixture
def auth_config(webhook_urls: dict[EventKind, str]) -> EventfulConfig:
    """Config with a URL for every event kind and basic auth svc/pw."""
    return EventfulConfig(urls=webhook_urls, user="svc", password="pw")


# =============================================================================
# Host Fixtures
# =============================================================================


@pytest.fixture
def hooks() -> LocalHookRegistry:
    return LocalHookRegistry()


@pytest.fixture
def sessions() -> LocalSessionTable:
    return LocalSessionTable()


# =============================================================================
# Client Fixtures
# =============================================================================


@pytest.fixture
def mock_client() -> MagicMock:
    """A WebhookClient whose posts always succeed without touching the network."""
    client = MagicMock(spec=WebhookClient)
    client.post_form_sync.return_value = WebhookDeliveryResult(
        success=True, status_code=200, response_body="ok"
    )
    return client


# =============================================================================
# CLI Fixtures
# =============================================================================


@pytest.fixture
def cli_runner():
    """Provide a Typer CLI test runner."""
    from typer.testing import CliRunner

    return CliRunner()
