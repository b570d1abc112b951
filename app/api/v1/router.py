"""Aggregates all v1 routers."""
from fastapi import APIRouter
from app.api.v1.sick_leaves import router as sick_leaves_router
from app.api.v1.poortwachter import router as poortwachter_router
from app.api.v1.statistics import router as statistics_router

router = APIRouter()
router.include_router(sick_leaves_router)
router.include_router(poortwachter_router)
router.include_router(statistics_router)
