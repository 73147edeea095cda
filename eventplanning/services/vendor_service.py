"""
Vendor Service.
Handles vendor and venue listings and their admin approval.
"""

from typing import List, Optional
import logging

from eventplanning.core.errors import NotFoundError
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import VendorRepository, VenueRepository
from eventplanning.schemas.vendor import (
    VendorCreate, VendorResponse, VendorUpdate,
    VenueCreate, VenueResponse, VenueUpdate
)

logger = logging.getLogger(__name__)


class VendorService:
    """Vendor and venue directory service."""

    def __init__(self, database: Optional[DatabaseManager] = None):
        self.db = database or db_manager

    # Vendors

    async def create_vendor(self, vendor_data: VendorCreate, principal: Principal) -> VendorResponse:
        """
        List a new vendor owned by the principal. New vendors await approval.

        Raises:
            AuthorizationError: If the principal is not a vendor or admin
        """
        authorize(principal, Action.VENDOR_CREATE, message="Only vendors can create vendor listings")
        with self.db.get_session() as session:
            vendor = VendorRepository(session).create(
                owner_id=principal.user_id,
                approved=False,
                **vendor_data.model_dump()
            )
            logger.info(f"Vendor created: {vendor.id} by user {principal.user_id}")
            return VendorResponse.model_validate(vendor)

    async def search_vendors(self, q: Optional[str] = None) -> List[VendorResponse]:
        with self.db.get_session() as session:
            return [VendorResponse.model_validate(v) for v in VendorRepository(session).search(q)]

    async def get_vendor(self, vendor_id: int) -> VendorResponse:
        with self.db.get_session() as session:
            return VendorResponse.model_validate(self._get_vendor(session, vendor_id))

    async def update_vendor(self, vendor_id: int, vendor_data: VendorUpdate, principal: Principal) -> VendorResponse:
        with self.db.get_session() as session:
            vendor = self._get_vendor(session, vendor_id)
            authorize(principal, Action.VENDOR_MANAGE, vendor)
            for field, value in vendor_data.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(vendor, field, value)
            session.flush()
            logger.info(f"Vendor updated: {vendor_id}")
            return VendorResponse.model_validate(vendor)

    async def delete_vendor(self, vendor_id: int, principal: Principal) -> None:
        """Delete a vendor and its reviews. Owner or admin."""
        with self.db.get_session() as session:
            vendor = self._get_vendor(session, vendor_id)
            authorize(principal, Action.VENDOR_MANAGE, vendor, "Not allowed to delete this vendor")
            VendorRepository(session).delete_cascade(vendor)
        logger.info(f"Vendor deleted: {vendor_id}")

    async def approve_vendor(self, vendor_id: int, principal: Principal) -> VendorResponse:
        authorize(principal, Action.VENDOR_APPROVE)
        with self.db.get_session() as session:
            vendor = self._get_vendor(session, vendor_id)
            vendor.approved = True
            session.flush()
            logger.info(f"Vendor approved: {vendor_id} by admin {principal.user_id}")
            return VendorResponse.model_validate(vendor)

    # Venues

    async def create_venue(self, venue_data: VenueCreate, principal: Principal) -> VenueResponse:
        with self.db.get_session() as session:
            venue = VenueRepository(session).create(
                created_by_id=principal.user_id,
                approved=False,
                **venue_data.model_dump()
            )
            logger.info(f"Venue created: {venue.id} by user {principal.user_id}")
            return VenueResponse.model_validate(venue)

    async def search_venues(self, q: Optional[str] = None) -> List[VenueResponse]:
        with self.db.get_session() as session:
            return [VenueResponse.model_validate(v) for v in VenueRepository(session).search(q)]

    async def get_venue(self, venue_id: int) -> VenueResponse:
        with self.db.get_session() as session:
            return VenueResponse.model_validate(self._get_venue(session, venue_id))

    async def update_venue(self, venue_id: int, venue_data: VenueUpdate, principal: Principal) -> VenueResponse:
        with self.db.get_session() as session:
            venue = self._get_venue(session, venue_id)
            authorize(principal, Action.VENUE_MANAGE, venue)
            for field, value in venue_data.model_dump(exclude_unset=True).items():
                if value is not None:
                    setattr(venue, field, value)
            session.flush()
            logger.info(f"Venue updated: {venue_id}")
            return VenueResponse.model_validate(venue)

    async def delete_venue(self, venue_id: int, principal: Principal) -> None:
        with self.db.get_session() as session:
            venue = self._get_venue(session, venue_id)
            authorize(principal, Action.VENUE_MANAGE, venue, "Not allowed to delete this venue")
            VenueRepository(session).delete(venue)
        logger.info(f"Venue deleted: {venue_id}")

    async def approve_venue(self, venue_id: int, principal: Principal) -> VenueResponse:
        authorize(principal, Action.VENUE_APPROVE)
        with self.db.get_session() as session:
            venue = self._get_venue(session, venue_id)
            venue.approved = True
            session.flush()
            logger.info(f"Venue approved: {venue_id} by admin {principal.user_id}")
            return VenueResponse.model_validate(venue)

    def _get_vendor(self, session, vendor_id: int):
        vendor = VendorRepository(session).get_by_id(vendor_id)
        if vendor is None:
            raise NotFoundError("Vendor not found")
        return vendor

    def _get_venue(self, session, venue_id: int):
        venue = VenueRepository(session).get_by_id(venue_id)
        if venue is None:
            raise NotFoundError("Venue not found")
        return venue


# Global vendor service instance
vendor_service = VendorService()
