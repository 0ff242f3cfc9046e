from fastapi import Request

from http_to_sentry.core.config import Settings
from http_to_sentry.services.sentry_sink import EventSink


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_sink(request: Request) -> EventSink:
    return request.app.state.sink
