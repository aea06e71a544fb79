"""Shared test fixtures for notes-cli tests.

Provides:
- Isolation from the developer's environment and config files
- NotesSettings with telemetry export disabled
- FakeNotesServer, an httpx.MockTransport-backed stand-in for the service
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable
from unittest.mock import patch

import httpx
import pytest

from notes_cli.config import NotesSettings, reload_settings
from notes_cli.logging import configure_logging


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Run each test in an empty directory with a clean NOTES_* environment."""
    cleaned = {k: v for k, v in os.environ.items() if not k.startswith(("NOTES_", "OTEL_"))}
    cleaned["HOME"] = str(tmp_path)
    cleaned["NOTES_TELEMETRY_EXPORTER"] = "none"
    monkeypatch.chdir(tmp_path)
    with patch.dict(os.environ, cleaned, clear=True):
        reload_settings()
        configure_logging()
        yield tmp_path
    reload_settings()


@pytest.fixture
def settings() -> NotesSettings:
    """Settings that keep spans in-process."""
    return NotesSettings(telemetry_exporter="none")


@dataclass
class FakeNotesServer:
    """Scripted notes service.

    Records every request it receives and answers with the configured
    status and body, or calls ``handler`` when one is set.
    """

    status_code: int = 200
    body: bytes = b""
    handler: Callable[[httpx.Request], httpx.Response] | None = None
    requests: list[httpx.Request] = field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        request.read()
        self.requests.append(request)
        if self.handler is not None:
            return self.handler(request)
        return httpx.Response(self.status_code, content=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    @property
    def last_request(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]


@pytest.fixture
def server() -> FakeNotesServer:
    return FakeNotesServer()


def refuse_connection(request: httpx.Request) -> httpx.Response:
    """Handler simulating a service that is not listening."""
    raise httpx.ConnectError("Connection refused", request=request)
