"""Process startup: connect, bind, print the banner, serve."""

import asyncio
import logging
import sys

import uvicorn
from fastapi import FastAPI

from yatra.config import Settings
from yatra.main import app

logger = logging.getLogger(__name__)

BANNER_WIDTH = 59


async def connect_db(settings: Settings) -> None:
    """Database connection step run before the listener binds.

    No database layer is wired in yet, so this only records that fact.
    """
    logger.info("No database configured; skipping connection step")


def _row(text: str = "") -> str:
    return "║  " + text.ljust(BANNER_WIDTH - 2) + "║"


def render_banner(app: FastAPI, settings: Settings) -> str:
    """Startup banner with the port, base URL and mounted API endpoints."""
    rule = "═" * BANNER_WIDTH
    lines = [
        "╔" + rule + "╗",
        "║" + "JharkhandYatra API Server".center(BANNER_WIDTH) + "║",
        "╠" + rule + "╣",
        _row("Status:    Running"),
        _row(f"Port:      {settings.port}"),
        _row(f"Base URL:  {settings.base_url}"),
        _row("Database:  Not configured"),
        "╠" + rule + "╣",
        _row("Endpoints:"),
    ]
    # The OpenAPI schema lists every mounted route, however routers are nested
    for path, operations in app.openapi()["paths"].items():
        if not path.startswith(settings.api_prefix):
            continue
        methods = ",".join(sorted(method.upper() for method in operations))
        description = next(iter(operations.values())).get("summary", "")
        lines.append(_row(f"• {methods:<5} {path:<16} - {description}"))
    lines.append("╚" + rule + "╝")
    return "\n".join(lines)


class BannerServer(uvicorn.Server):
    """uvicorn server that prints the banner once its sockets are bound."""

    def __init__(self, config: uvicorn.Config, settings: Settings):
        super().__init__(config)
        self.settings = settings

    async def startup(self, sockets=None) -> None:
        await super().startup(sockets=sockets)
        if self.should_exit:
            return
        print(render_banner(self.config.app, self.settings), flush=True)


def build_server(app: FastAPI, settings: Settings) -> BannerServer:
    config = uvicorn.Config(
        app,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
    return BannerServer(config, settings)


async def start_server(app: FastAPI, settings: Settings) -> None:
    """Connect to the database, then serve until the process is stopped."""
    await connect_db(settings)
    server = build_server(app, settings)
    await server.serve()


def main() -> None:
    settings = Settings()
    try:
        asyncio.run(start_server(app, settings))
    except Exception as e:
        logger.error(f"Failed to start server: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
