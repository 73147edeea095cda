"""
Payment API routes.
Bank transfer slip upload and admin review.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, Path, Query, UploadFile, status

from eventplanning.api.dependencies import get_current_principal
from eventplanning.core.policy import Principal
from eventplanning.models.payment import PaymentStatus
from eventplanning.schemas.payment import PaymentResponse, PaymentSummaryResponse
from eventplanning.services.payment_service import payment_service
from eventplanning.services.slip_storage import slip_storage

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.post(
    "/bookings/{booking_id}/bank-transfer",
    response_model=PaymentResponse,
    status_code=status.HTTP_201_CREATED
)
async def upload_bank_transfer_slip(
    booking_id: int = Path(..., ge=1),
    file: UploadFile = File(...),
    reference: Optional[str] = Form(None),
    principal: Principal = Depends(get_current_principal)
):
    """
    Upload a bank transfer slip for a booking.

    Args:
        booking_id: Booking being paid for
        file: Slip image or document
        reference: Optional transfer reference

    Returns:
        Pending payment awaiting admin review
    """
    # One byte past the limit is enough for the service to reject an oversized slip
    content = await file.read(await slip_storage.get_max_bytes() + 1)
    return await payment_service.upload_bank_transfer_slip(
        booking_id, content, file.filename, principal, reference
    )


@router.post("/{payment_id}/approve", response_model=PaymentResponse)
async def approve_payment(payment_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await payment_service.approve_payment(payment_id, principal)


@router.post("/{payment_id}/reject", response_model=PaymentResponse)
async def reject_payment(payment_id: int = Path(..., ge=1), principal: Principal = Depends(get_current_principal)):
    return await payment_service.reject_payment(payment_id, principal)


@router.get("", response_model=List[PaymentResponse])
async def list_payments(
    status_filter: Optional[PaymentStatus] = Query(None, alias="status", description="Filter by payment status"),
    principal: Principal = Depends(get_current_principal)
):
    """Payments filtered by status. Admin only."""
    return await payment_service.list_payments(principal, status_filter)


@router.get("/admin", response_model=List[PaymentResponse])
async def list_all_payments(principal: Principal = Depends(get_current_principal)):
    return await payment_service.list_all_payments(principal)


@router.get("/mine", response_model=List[PaymentResponse])
async def list_my_payments(principal: Principal = Depends(get_current_principal)):
    return await payment_service.list_my_payments(principal)


@router.get("/summary", response_model=PaymentSummaryResponse)
async def get_summary(principal: Principal = Depends(get_current_principal)):
    """Payment counts per status and approved revenue. Admin only."""
    return await payment_service.get_summary(principal)
