"""
Review Service.
Handles ratings on events and vendors.
"""

from typing import Iterable, List, Optional
import logging

from eventplanning.core.errors import NotFoundError
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import (
    EventRepository, ReviewRepository, UserRepository, VendorRepository
)
from eventplanning.models.review import Review
from eventplanning.schemas.review import (
    RatingSummaryResponse, ReviewCreate, ReviewResponse, ReviewUpdate
)

logger = logging.getLogger(__name__)


def _build_responses(session, reviews: Iterable[Review]) -> List[ReviewResponse]:
    reviews = list(reviews)
    users = UserRepository(session).get_many(r.user_id for r in reviews)
    responses = []
    for review in reviews:
        response = ReviewResponse.model_validate(review)
        author = users.get(review.user_id)
        response.username = author.username if author else None
        responses.append(response)
    return responses


class ReviewService:
    """Review service."""

    def __init__(self, database: Optional[DatabaseManager] = None):
        self.db = database or db_manager

    async def add_review(self, review_data: ReviewCreate, principal: Principal) -> ReviewResponse:
        """
        Post a review by the principal.

        Raises:
            NotFoundError: If the reviewed event or vendor does not exist
        """
        with self.db.get_session() as session:
            if review_data.event_id is not None and EventRepository(session).get_by_id(review_data.event_id) is None:
                raise NotFoundError("Event not found")
            if review_data.vendor_id is not None and VendorRepository(session).get_by_id(review_data.vendor_id) is None:
                raise NotFoundError("Vendor not found")

            review = ReviewRepository(session).create(
                user_id=principal.user_id,
                event_id=review_data.event_id,
                vendor_id=review_data.vendor_id,
                rating=review_data.rating,
                comment=review_data.comment
            )
            logger.info(f"Review {review.id} added by user {principal.user_id}")
            return _build_responses(session, [review])[0]

    async def list_for_event(self, event_id: int) -> List[ReviewResponse]:
        with self.db.get_session() as session:
            return _build_responses(session, ReviewRepository(session).list_by_event(event_id))

    async def list_for_vendor(self, vendor_id: int) -> List[ReviewResponse]:
        with self.db.get_session() as session:
            return _build_responses(session, ReviewRepository(session).list_by_vendor(vendor_id))

    async def event_rating(self, event_id: int) -> RatingSummaryResponse:
        with self.db.get_session() as session:
            average, count = ReviewRepository(session).average_for_event(event_id)
            return RatingSummaryResponse(average=average, count=count)

    async def vendor_rating(self, vendor_id: int) -> RatingSummaryResponse:
        with self.db.get_session() as session:
            average, count = ReviewRepository(session).average_for_vendor(vendor_id)
            return RatingSummaryResponse(average=average, count=count)

    async def update_review(self, review_id: int, review_data: ReviewUpdate, principal: Principal) -> ReviewResponse:
        with self.db.get_session() as session:
            review = self._get_review(session, review_id)
            authorize(principal, Action.REVIEW_UPDATE, review)
            if review_data.rating is not None:
                review.rating = review_data.rating
            if review_data.comment is not None:
                review.comment = review_data.comment
            session.flush()
            return _build_responses(session, [review])[0]

    async def delete_review(self, review_id: int, principal: Principal) -> None:
        with self.db.get_session() as session:
            review = self._get_review(session, review_id)
            authorize(principal, Action.REVIEW_DELETE, review)
            ReviewRepository(session).delete(review)
        logger.info(f"Review {review_id} deleted by user {principal.user_id}")

    def _get_review(self, session, review_id: int) -> Review:
        review = ReviewRepository(session).get_by_id(review_id)
        if review is None:
            raise NotFoundError("Review not found")
        return review


# Global review service instance
review_service = ReviewService()
