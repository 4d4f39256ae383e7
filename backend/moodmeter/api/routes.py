from __future__ import annotations

from fastapi import APIRouter

from moodmeter.api.routes_analytics import router as analytics_router

router = APIRouter(prefix='/api', tags=['api'])
router.include_router(analytics_router)
