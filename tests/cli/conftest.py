"""Shared fixtures for CLI command tests."""

import json
from pathlib import Path

import pytest

from eventful.config_loader import CONFIG_FILE_NAME


@pytest.fixture
def config_file(temp_dir: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Write an eventful.json with message and online URLs into the cwd."""
    monkeypatch.chdir(temp_dir)
    path = temp_dir / CONFIG_FILE_NAME
    path.write_text(
        json.dumps(
            {
                "url": {
                    "message_hook": "https://hooks.example.com/message",
                    "online_hook": "https://hooks.example.com/online",
                },
                "user": "svc",
                "password": "s3cret",
            }
        ),
        encoding="utf-8",
    )
    return path
