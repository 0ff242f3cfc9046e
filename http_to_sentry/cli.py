import asyncio
import contextlib
import logging
import signal
from typing import List, Tuple

import uvicorn

from http_to_sentry.core.config import Settings, get_settings
from http_to_sentry.core.log_config import configure_logging
from http_to_sentry.main import create_app

logger = logging.getLogger("http_to_sentry")


def split_addr(addr: str, default_host: str = "0.0.0.0") -> Tuple[str, int]:
    """'host:port' or ':port' -> (host, port)."""
    host, sep, port = addr.strip().rpartition(":")
    if not sep:
        raise ValueError(f"address must be host:port, got {addr!r}")
    host = host.strip("[]") or default_host
    return host, int(port)


class _Server(uvicorn.Server):
    # signals are handled once for all listeners in serve()
    def install_signal_handlers(self) -> None:
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


def build_servers(settings: Settings, app) -> List[uvicorn.Server]:
    servers: List[uvicorn.Server] = []
    common = dict(
        lifespan="off",
        log_config=None,
        access_log=False,
        timeout_graceful_shutdown=settings.shutdown_grace,
    )

    if settings.HTTP_ADDR:
        host, port = split_addr(settings.HTTP_ADDR)
        servers.append(_Server(uvicorn.Config(app, host=host, port=port, **common)))

    if settings.https_enabled:
        host, port = split_addr(settings.HTTPS_ADDR)
        servers.append(
            _Server(
                uvicorn.Config(
                    app,
                    host=host,
                    port=port,
                    ssl_certfile=settings.HTTPS_CERT_FILE,
                    ssl_keyfile=settings.HTTPS_KEY_FILE,
                    **common,
                )
            )
        )
    return servers


async def serve(settings: Settings) -> None:
    app = create_app(settings)
    servers = build_servers(settings, app)

    loop = asyncio.get_running_loop()
    stop = asyncio.Event()

    def _shutdown() -> None:
        stop.set()
        for server in servers:
            server.should_exit = True

    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, _shutdown)

    logger.info(
        "ready: http=%s https=%s ingest=%s fastly=%s",
        settings.HTTP_ADDR,
        settings.HTTPS_ADDR if settings.https_enabled else "",
        settings.HTTP_PATH,
        settings.HTTP_FASTLY_PATH,
    )

    if servers:
        results = await asyncio.gather(*(s.serve() for s in servers), return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException):
                logger.error("server error: %r", result)
    else:
        logger.warning("no listener configured; set HTTP_ADDR or HTTPS_ADDR")
        await stop.wait()

    logger.info("shutting down")
    # queued events go out only after every listener has drained
    app.state.sink.flush(settings.flush_timeout)


def main() -> None:
    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    asyncio.run(serve(settings))


if __name__ == "__main__":
    main()
