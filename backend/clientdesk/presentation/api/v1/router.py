"""V1 API router — aggregates all v1 endpoint routers."""

from fastapi import APIRouter

from clientdesk.presentation.api.v1.endpoints.health import router as health_router
from clientdesk.presentation.api.v1.endpoints.clients import router as clients_router
from clientdesk.presentation.api.v1.endpoints.newsletter import router as newsletter_router

router = APIRouter(prefix="/v1")
router.include_router(health_router)
router.include_router(clients_router)
router.include_router(newsletter_router)
