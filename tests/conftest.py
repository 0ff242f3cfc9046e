"""Shared fixtures: settings, a recording sink and a TestClient per test."""

from typing import List, Optional

import pytest
from fastapi.testclient import TestClient

from http_to_sentry.core.config import Settings
from http_to_sentry.main import create_app
from http_to_sentry.schemas.canonical import CanonicalEvent


class RecordingSink:
    """Stands in for Sentry: keeps submitted events and hands out ids."""

    def __init__(self, ids: Optional[List[Optional[str]]] = None):
        self.events: List[CanonicalEvent] = []
        self.flushed: List[float] = []
        self._ids = list(ids) if ids is not None else None

    def submit(self, event: CanonicalEvent) -> Optional[str]:
        self.events.append(event)
        if self._ids is None:
            return f"evt-{len(self.events)}"
        return self._ids.pop(0) if self._ids else None

    def flush(self, timeout: float) -> None:
        self.flushed.append(timeout)


@pytest.fixture
def settings() -> Settings:
    return Settings(HTTP_MAX_BODY_BYTES=1024)


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def client(settings, sink):
    app = create_app(settings, sink)
    with TestClient(app) as c:
        yield c
