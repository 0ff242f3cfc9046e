import logging
from typing import Any, Dict, Optional, Protocol

import sentry_sdk

from http_to_sentry.core.config import Settings
from http_to_sentry.schemas.canonical import CanonicalEvent

logger = logging.getLogger(__name__)


class EventSink(Protocol):
    def submit(self, event: CanonicalEvent) -> Optional[str]: ...

    def flush(self, timeout: float) -> None: ...


def to_sentry_event(event: CanonicalEvent) -> Dict[str, Any]:
    """Render a canonical event as a Sentry event payload."""
    payload: Dict[str, Any] = {
        "logger": event.logger,
        "level": event.level.value,
        "message": event.message,
        "timestamp": event.timestamp,
        "tags": dict(event.tags),
        "extra": dict(event.extra),
    }
    if event.request is not None:
        payload["request"] = {
            "url": event.request.url,
            "method": event.request.method,
            "headers": dict(event.request.headers),
            "query_string": event.request.query_string,
        }
    if event.user is not None:
        payload["user"] = {"ip_address": event.user.ip_address}
    return payload


class SentrySink:
    """
    Process-wide handle on the Sentry client.
    Created once at startup; sentry_sdk itself is safe to call from
    concurrent requests.
    """

    def __init__(self, dsn: str = "", environment: str = "development", release: str = ""):
        self.dsn = dsn
        self.environment = environment
        self.release = release

    @classmethod
    def from_settings(cls, settings: Settings) -> "SentrySink":
        return cls(
            dsn=settings.SENTRY_DSN,
            environment=settings.SENTRY_ENVIRONMENT,
            release=settings.SENTRY_RELEASE,
        )

    def init(self) -> "SentrySink":
        if not self.dsn:
            logger.warning("SENTRY_DSN is empty; events will be dropped")
        sentry_sdk.init(
            dsn=self.dsn or None,
            environment=self.environment,
            release=self.release or None,
            # the service relays events, it does not report on itself
            default_integrations=False,
        )
        return self

    def submit(self, event: CanonicalEvent) -> Optional[str]:
        return sentry_sdk.capture_event(to_sentry_event(event))

    def flush(self, timeout: float) -> None:
        sentry_sdk.flush(timeout=timeout)
