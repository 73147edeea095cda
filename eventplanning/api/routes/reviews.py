"""
Review API routes.
"""

from typing import List

from fastapi import APIRouter, Depends, Path, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.schemas.review import RatingSummaryResponse, ReviewCreate, ReviewResponse, ReviewUpdate
from eventplanning.services.review_service import review_service

router = APIRouter(prefix="/reviews", tags=["Reviews"])


@router.post("", response_model=ReviewResponse, status_code=status.HTTP_201_CREATED)
async def add_review(review_data: ReviewCreate, principal: Principal = Depends(get_current_principal)):
    """Rate an event or a vendor from 1 to 5."""
    return await review_service.add_review(review_data, principal)


@router.get("/event/{event_id}", response_model=List[ReviewResponse])
async def list_event_reviews(event_id: int = Path(..., ge=1)):
    return await review_service.list_for_event(event_id)


@router.get("/event/{event_id}/average", response_model=RatingSummaryResponse)
async def event_rating(event_id: int = Path(..., ge=1)):
    return await review_service.event_rating(event_id)


@router.get("/vendor/{vendor_id}", response_model=List[ReviewResponse])
async def list_vendor_reviews(vendor_id: int = Path(..., ge=1)):
    return await review_service.list_for_vendor(vendor_id)


@router.get("/vendor/{vendor_id}/average", response_model=RatingSummaryResponse)
async def vendor_rating(vendor_id: int = Path(..., ge=1)):
    return await review_service.vendor_rating(vendor_id)


@router.put("/{review_id}", response_model=ReviewResponse)
async def update_review(
    review_data: ReviewUpdate,
    review_id: int = Path(..., ge=1),
    principal: Principal = Depends(get_current_principal)
):
    return await review_service.update_review(review_id, review_data, principal)


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_review(review_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    await review_service.delete_review(review_id, principal)
