"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from prep_portal.api.routes.submission_routes import router as submission_router
from prep_portal.api.routes.company_routes import router as company_router
from prep_portal.api.routes.admin_routes import router as admin_router
from prep_portal.api.routes.notification_routes import router as notification_router
from prep_portal.api.routes.comment_routes import router as comment_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(submission_router)
api_router.include_router(company_router)
api_router.include_router(admin_router)
api_router.include_router(notification_router)
api_router.include_router(comment_router)
