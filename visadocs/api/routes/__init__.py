"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from visadocs.api.routes.auth_routes import router as auth_router
from visadocs.api.routes.analysis_routes import router as analysis_router
from visadocs.api.routes.offer_letter_routes import router as offer_letter_router
from visadocs.api.routes.coe_routes import router as coe_router
from visadocs.api.routes.document_analysis_routes import router as document_analysis_router
from visadocs.api.routes.appointment_routes import router as appointment_router
from visadocs.api.routes.template_routes import router as template_router
from visadocs.api.routes.update_routes import router as update_router
from visadocs.api.routes.scholarship_routes import router as scholarship_router
from visadocs.api.routes.watchlist_routes import router as watchlist_router
from visadocs.api.routes.admin_routes import router as admin_router

# Main API router
api_router = APIRouter()

# Include all sub-routers
api_router.include_router(auth_router)
api_router.include_router(analysis_router)
api_router.include_router(offer_letter_router)
api_router.include_router(coe_router)
api_router.include_router(document_analysis_router)
api_router.include_router(appointment_router)
api_router.include_router(template_router)
api_router.include_router(update_router)
api_router.include_router(scholarship_router)
api_router.include_router(watchlist_router)
api_router.include_router(admin_router)
