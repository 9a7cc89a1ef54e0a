"""
API Version 1 Router.

Combines all API endpoints under the /api prefix.
"""

from fastapi import APIRouter

from app.api.v1.endpoints import forum

router = APIRouter()

# Include endpoint routers
router.include_router(forum.router, tags=["Forum"])
