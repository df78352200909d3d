"""API v1 router aggregation.

Combines all v1 route modules into a single router.
"""

from __future__ import annotations

from fastapi import APIRouter

from api.v1.routes.insights import router as insights_router
from api.v1.routes.technologies import router as technologies_router

api_v1_router = APIRouter()

api_v1_router.include_router(insights_router, tags=["Insights"])
api_v1_router.include_router(technologies_router, tags=["Technologies"])
