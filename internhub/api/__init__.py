"""
API module - FastAPI routers, dependencies and response envelopes.

Usage:
    from internhub.api.routes import api_router
    app.include_router(api_router, prefix="/api/v1")
"""
