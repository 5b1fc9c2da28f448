
from __future__ import annotations

import logging
import signal
import sys
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from bill_proxy import __version__
from bill_proxy.clients.upstream import UpstreamSession
from bill_proxy.config import Settings, load_settings
from bill_proxy.errors import ConfigError
from bill_proxy.proxy import router

# ------------------------------------------------------------------------------
# Server lifecycle constants
# ------------------------------------------------------------------------------
HOST = "0.0.0.0"
KEEP_ALIVE_SECONDS = 60
GRACEFUL_SHUTDOWN_SECONDS = 30

log = logging.getLogger("boheco2.main")


def _exit_after_drain(signum, frame) -> None:
    log.info("Received signal %s, shutdown complete", signal.Signals(signum).name)
    sys.exit(0)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
        stream=sys.stdout,
    )


# ------------------------------------------------------------------------------
# FastAPI app
# ------------------------------------------------------------------------------
def create_app(settings: Settings, session: Optional[UpstreamSession] = None) -> FastAPI:
    """Build the proxy app around one explicitly constructed upstream session."""
    session = session or UpstreamSession(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        log.info("BOHECO 2 API Proxy Server listening on port: %s", settings.port)
        yield
        await session.aclose()
        log.info("Server gracefully stopped")

    app = FastAPI(
        title="BOHECO 2 Bill Inquiry Proxy",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.session = session
    app.include_router(router)
    return app


def main() -> None:
    try:
        settings = load_settings()
    except ConfigError as e:
        configure_logging()
        log.error("Invalid configuration: %s", e)
        sys.exit(1)

    configure_logging(settings.log_level)
    log.info("Starting in %s mode, upstream %s", settings.mode, settings.api_base_url)

    import uvicorn
    # uvicorn traps SIGINT/SIGTERM, drains in-flight requests, then re-raises the
    # signal once its own handlers are gone. These handlers turn that into exit 0;
    # a failed bind still exits with status 1.
    for sig in (signal.SIGINT, signal.SIGTERM):
        signal.signal(sig, _exit_after_drain)
    uvicorn.run(
        create_app(settings),
        host=HOST,
        port=int(settings.port),
        timeout_keep_alive=KEEP_ALIVE_SECONDS,
        timeout_graceful_shutdown=GRACEFUL_SHUTDOWN_SECONDS,
        log_config=None,
    )


if __name__ == "__main__":
    main()
