"""API v1 router - combines all endpoint routers."""

from fastapi import APIRouter

from axiom_api.api.v1.feedback import router as feedback_router
from axiom_api.api.v1.feedback import tags_router as feedback_tags_router

router = APIRouter()

# Include all routers
router.include_router(feedback_router)
router.include_router(feedback_tags_router)
