"""
API module - FastAPI routers and endpoint definitions.

Usage:
    from visadocs.api import api_router
    app.include_router(api_router, prefix="/api")
"""

from visadocs.api.routes import api_router

__all__ = ["api_router"]
