"""
FastAPI route modules for the cc-slack HTTP server.

Each module contains an APIRouter with related endpoints.
"""

from cc_slack.servers.routes.admin import create_admin_router
from cc_slack.servers.routes.hooks import create_hooks_router

__all__ = [
    "create_admin_router",
    "create_hooks_router",
]
