"""
Tests for VendorService vendor and venue listings.
"""

import pytest

from eventplanning.core.errors import AuthorizationError, NotFoundError
from eventplanning.db.repositories import ReviewRepository
from eventplanning.models.user import UserRole
from eventplanning.schemas.vendor import VendorCreate, VendorUpdate, VenueCreate, VenueUpdate
from eventplanning.services.vendor_service import VendorService


@pytest.fixture
def vendor_service(database):
    return VendorService(database)


@pytest.fixture
def vendor_user(create_user):
    return create_user("florist", UserRole.VENDOR)


class TestVendors:
    """Test cases for vendor listings."""

    @pytest.mark.asyncio
    async def test_create_vendor_awaits_approval(self, vendor_service, vendor_user):
        vendor = await vendor_service.create_vendor(
            VendorCreate(name="Bloom & Co", category="Flowers", email="hello@bloom.example.com"), vendor_user
        )

        assert vendor.approved is False
        assert vendor.owner_id == vendor_user.user_id

    @pytest.mark.asyncio
    async def test_only_vendors_list_themselves(self, vendor_service, attendee):
        with pytest.raises(AuthorizationError) as exc_info:
            await vendor_service.create_vendor(VendorCreate(name="Nope"), attendee)
        assert exc_info.value.message == "Only vendors can create vendor listings"

    @pytest.mark.asyncio
    async def test_search_by_name_or_category(self, vendor_service, vendor_user):
        await vendor_service.create_vendor(VendorCreate(name="Bloom & Co", category="Flowers"), vendor_user)
        await vendor_service.create_vendor(VendorCreate(name="Sound Masters", category="Audio"), vendor_user)

        assert [v.name for v in await vendor_service.search_vendors("flow")] == ["Bloom & Co"]
        assert [v.name for v in await vendor_service.search_vendors("SOUND")] == ["Sound Masters"]
        assert len(await vendor_service.search_vendors()) == 2

    @pytest.mark.asyncio
    async def test_update_is_owner_or_admin(self, vendor_service, vendor_user, admin, attendee):
        vendor = await vendor_service.create_vendor(VendorCreate(name="Bloom & Co", phone="123"), vendor_user)

        updated = await vendor_service.update_vendor(vendor.id, VendorUpdate(phone="456"), vendor_user)
        assert updated.phone == "456"
        assert updated.name == "Bloom & Co"

        by_admin = await vendor_service.update_vendor(vendor.id, VendorUpdate(name="Bloom"), admin)
        assert by_admin.name == "Bloom"

        with pytest.raises(AuthorizationError):
            await vendor_service.update_vendor(vendor.id, VendorUpdate(name="Mine"), attendee)

    @pytest.mark.asyncio
    async def test_approve_requires_admin(self, vendor_service, vendor_user, admin):
        vendor = await vendor_service.create_vendor(VendorCreate(name="Bloom & Co"), vendor_user)

        with pytest.raises(AuthorizationError):
            await vendor_service.approve_vendor(vendor.id, vendor_user)

        approved = await vendor_service.approve_vendor(vendor.id, admin)
        assert approved.approved is True

    @pytest.mark.asyncio
    async def test_delete_removes_reviews(self, vendor_service, database, vendor_user, attendee):
        vendor = await vendor_service.create_vendor(VendorCreate(name="Bloom & Co"), vendor_user)
        with database.get_session() as session:
            ReviewRepository(session).create(user_id=attendee.user_id, vendor_id=vendor.id, rating=4)

        with pytest.raises(AuthorizationError) as exc_info:
            await vendor_service.delete_vendor(vendor.id, attendee)
        assert exc_info.value.message == "Not allowed to delete this vendor"

        await vendor_service.delete_vendor(vendor.id, vendor_user)

        with pytest.raises(NotFoundError):
            await vendor_service.get_vendor(vendor.id)
        with database.get_session() as session:
            assert ReviewRepository(session).count() == 0


class TestVenues:
    """Test cases for venue listings."""

    @pytest.mark.asyncio
    async def test_venue_lifecycle(self, vendor_service, organizer, admin, attendee):
        venue = await vendor_service.create_venue(
            VenueCreate(name="Grand Hall", address="1 Main Street", capacity=300), organizer
        )
        assert venue.approved is False
        assert venue.created_by_id == organizer.user_id

        assert [v.id for v in await vendor_service.search_venues("main street")] == [venue.id]

        updated = await vendor_service.update_venue(venue.id, VenueUpdate(capacity=250), organizer)
        assert updated.capacity == 250
        with pytest.raises(AuthorizationError):
            await vendor_service.update_venue(venue.id, VenueUpdate(capacity=1), attendee)

        with pytest.raises(AuthorizationError):
            await vendor_service.approve_venue(venue.id, organizer)
        assert (await vendor_service.approve_venue(venue.id, admin)).approved is True

        await vendor_service.delete_venue(venue.id, admin)
        with pytest.raises(NotFoundError) as exc_info:
            await vendor_service.get_venue(venue.id)
        assert exc_info.value.message == "Venue not found"
