"""
HTTP server for the cc-slack daemon.

Provides a FastAPI app that receives Claude Code hook events on POST /hook
and hands them to the HookIngestor.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from cc_slack import __version__
from cc_slack.hooks.ingestor import HookIngestor
from cc_slack.servers.routes import create_admin_router, create_hooks_router
from cc_slack.sessions.registry import SessionRegistry

logger = logging.getLogger(__name__)


class HTTPServer:
    """FastAPI HTTP server for hook ingestion."""

    def __init__(
        self,
        ingestor: HookIngestor,
        registry: SessionRegistry,
        port: int = 19999,
        bot_enabled: bool = False,
    ) -> None:
        """
        Initialize HTTP server.

        Args:
            ingestor: Handles each decoded hook event
            registry: Session registry, reported by /health
            port: Server port
            bot_enabled: Whether the Socket Mode reply relay is running
        """
        self.ingestor = ingestor
        self.registry = registry
        self.port = port
        self.bot_enabled = bot_enabled
        self._running = False

        self.app = self._create_app()

    @property
    def running(self) -> bool:
        return self._running

    def _create_app(self) -> FastAPI:
        """
        Create and configure FastAPI application.

        Returns:
            Configured FastAPI app instance
        """

        @asynccontextmanager
        async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
            logger.debug("Starting cc-slack HTTP server on port %d", self.port)
            self._running = True
            yield
            logger.debug("Shutting down cc-slack HTTP server")
            self._running = False

        app = FastAPI(
            title="cc-slack",
            description="Claude Code hook events to Slack threads",
            version=__version__,
            lifespan=lifespan,
        )

        self._register_exception_handlers(app)

        app.include_router(create_hooks_router(self))
        app.include_router(create_admin_router(self))

        return app

    def _register_exception_handlers(self, app: FastAPI) -> None:
        """
        Register global exception handlers.

        HTTPExceptions keep FastAPI's own handling; anything else is logged
        and answered with a bare 500.
        """

        @app.exception_handler(Exception)
        async def global_exception_handler(
            request: Request,
            exc: Exception,
        ) -> PlainTextResponse:
            """Handle all uncaught exceptions."""
            logger.error(
                "Unhandled exception in HTTP server: %s",
                exc,
                exc_info=True,
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "client": request.client.host if request.client else None,
                },
            )
            return PlainTextResponse("internal error", status_code=500)
