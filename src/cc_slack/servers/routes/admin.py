"""Admin routes: liveness for the CLI status command."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter

from cc_slack import __version__

if TYPE_CHECKING:
    from cc_slack.servers.http import HTTPServer


def create_admin_router(server: HTTPServer) -> APIRouter:
    router = APIRouter(tags=["admin"])

    @router.get("/health")
    async def health() -> dict[str, Any]:
        """Report liveness and how many sessions are threaded."""
        return {
            "status": "ok",
            "version": __version__,
            "sessions": len(server.registry),
            "bot_enabled": server.bot_enabled,
        }

    return router
