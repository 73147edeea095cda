"""
Main API router for the Event Planning Service.
Combines all API endpoints under /api.
"""

from fastapi import APIRouter

from eventplanning.api.routes.auth import router as auth_router
from eventplanning.api.routes.bookings import router as bookings_router
from eventplanning.api.routes.events import router as events_router
from eventplanning.api.routes.notifications import router as notifications_router
from eventplanning.api.routes.payments import router as payments_router
from eventplanning.api.routes.reviews import router as reviews_router
from eventplanning.api.routes.tasks import router as tasks_router
from eventplanning.api.routes.ticket_types import router as ticket_types_router
from eventplanning.api.routes.users import router as users_router
from eventplanning.api.routes.vendors import router as vendors_router
from eventplanning.api.routes.venues import router as venues_router

# Create main router
router = APIRouter(prefix="/api")

# Include sub-routers
router.include_router(auth_router)
router.include_router(users_router)
router.include_router(events_router)
router.include_router(ticket_types_router)
router.include_router(bookings_router)
router.include_router(payments_router)
router.include_router(vendors_router)
router.include_router(venues_router)
router.include_router(reviews_router)
router.include_router(tasks_router)
router.include_router(notifications_router)
