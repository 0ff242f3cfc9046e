import logging
from typing import Optional

from fastapi import APIRouter, FastAPI

from http_to_sentry.api.middleware import RequestLogMiddleware
from http_to_sentry.api.routes import fastly, health, ingest
from http_to_sentry.core.config import Settings, get_settings
from http_to_sentry.services.sentry_sink import EventSink, SentrySink

logger = logging.getLogger(__name__)


def mount(app: FastAPI, router: APIRouter, path: str) -> None:
    """Serve a router's root routes at ``path``, which may be "/" itself."""
    if path != "/":
        app.include_router(router, prefix=path)
        return

    # FastAPI refuses an empty prefix on an empty route path
    for route in router.routes:
        app.add_api_route(
            "/",
            route.endpoint,
            methods=list(route.methods),
            status_code=route.status_code,
            tags=route.tags,
        )


def create_app(settings: Optional[Settings] = None, sink: Optional[EventSink] = None) -> FastAPI:
    settings = settings or get_settings()
    # a sink passed in (tests) is used as-is; otherwise the Sentry client is set up here
    if sink is None:
        sink = SentrySink.from_settings(settings).init()

    app = FastAPI(title="http-to-sentry")
    app.state.settings = settings
    app.state.sink = sink

    app.add_middleware(RequestLogMiddleware, max_log_bytes=settings.HTTP_LOG_BODY_BYTES)

    # ✅ routers
    mount(app, ingest.router, settings.HTTP_PATH)
    mount(app, fastly.router, settings.HTTP_FASTLY_PATH)
    app.include_router(fastly.challenge_router)
    app.include_router(health.router)

    return app
