"""
Tests for ReviewService.
"""

import pytest
from pydantic import ValidationError as SchemaValidationError

from eventplanning.core.errors import AuthorizationError, NotFoundError
from eventplanning.db.repositories import VendorRepository
from eventplanning.schemas.review import ReviewCreate, ReviewUpdate
from eventplanning.services.review_service import ReviewService


class TestReviewService:
    """Test cases for event and vendor reviews."""

    @pytest.fixture
    def review_service(self, database):
        return ReviewService(database)

    @pytest.fixture
    def event_id(self, organizer, make_event):
        return make_event(organizer)

    @pytest.fixture
    def vendor_id(self, database, organizer):
        with database.get_session() as session:
            return VendorRepository(session).create(name="Caterers", owner_id=organizer.user_id).id

    @pytest.mark.asyncio
    async def test_add_review_carries_author_name(self, review_service, attendee, event_id):
        review = await review_service.add_review(
            ReviewCreate(event_id=event_id, rating=5, comment="Great night"), attendee
        )

        assert review.user_id == attendee.user_id
        assert review.username == "attendee"
        assert [r.id for r in await review_service.list_for_event(event_id)] == [review.id]

    def test_review_needs_a_target(self):
        with pytest.raises(SchemaValidationError):
            ReviewCreate(rating=3)

    def test_rating_bounds(self):
        with pytest.raises(SchemaValidationError):
            ReviewCreate(event_id=1, rating=6)

    @pytest.mark.asyncio
    async def test_review_of_missing_target(self, review_service, attendee):
        with pytest.raises(NotFoundError):
            await review_service.add_review(ReviewCreate(event_id=9999, rating=3), attendee)
        with pytest.raises(NotFoundError):
            await review_service.add_review(ReviewCreate(vendor_id=9999, rating=3), attendee)

    @pytest.mark.asyncio
    async def test_ratings(self, review_service, attendee, other_user, event_id, vendor_id):
        empty = await review_service.event_rating(event_id)
        assert empty.average is None
        assert empty.count == 0

        await review_service.add_review(ReviewCreate(event_id=event_id, rating=4), attendee)
        await review_service.add_review(ReviewCreate(event_id=event_id, rating=5), other_user)
        await review_service.add_review(ReviewCreate(vendor_id=vendor_id, rating=2), attendee)

        event_summary = await review_service.event_rating(event_id)
        assert event_summary.average == pytest.approx(4.5)
        assert event_summary.count == 2

        vendor_summary = await review_service.vendor_rating(vendor_id)
        assert vendor_summary.average == pytest.approx(2.0)
        assert len(await review_service.list_for_vendor(vendor_id)) == 1

    @pytest.mark.asyncio
    async def test_update_is_author_only(self, review_service, attendee, other_user, admin, event_id):
        review = await review_service.add_review(ReviewCreate(event_id=event_id, rating=3), attendee)

        updated = await review_service.update_review(review.id, ReviewUpdate(rating=4), attendee)
        assert updated.rating == 4
        assert updated.comment is None

        with pytest.raises(AuthorizationError):
            await review_service.update_review(review.id, ReviewUpdate(rating=1), other_user)
        with pytest.raises(AuthorizationError):
            await review_service.update_review(review.id, ReviewUpdate(rating=1), admin)

    @pytest.mark.asyncio
    async def test_delete_is_author_or_admin(self, review_service, attendee, other_user, admin, event_id):
        first = await review_service.add_review(ReviewCreate(event_id=event_id, rating=3), attendee)
        second = await review_service.add_review(ReviewCreate(event_id=event_id, rating=2), attendee)

        with pytest.raises(AuthorizationError):
            await review_service.delete_review(first.id, other_user)

        await review_service.delete_review(first.id, attendee)
        await review_service.delete_review(second.id, admin)

        assert await review_service.list_for_event(event_id) == []
        with pytest.raises(NotFoundError) as exc_info:
            await review_service.delete_review(first.id, attendee)
        assert exc_info.value.message == "Review not found"
