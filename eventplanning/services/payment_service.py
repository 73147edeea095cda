"""
Payment Service.
Handles bank-transfer slip uploads and admin review of payments.
"""

from decimal import Decimal
from typing import List, Optional
import logging

from sqlalchemy.orm import Session

from eventplanning.core.errors import (
    BusinessRuleViolation, ErrorCode, NotFoundError, ValidationError
)
from eventplanning.core.policy import Action, Principal, authorize
from eventplanning.db.database import DatabaseManager, db_manager
from eventplanning.db.repositories import (
    BookingRepository, PaymentRepository, TicketTypeRepository, UserRepository
)
from eventplanning.models.base import utcnow
from eventplanning.models.booking import BookingStatus
from eventplanning.models.notification import NotificationType
from eventplanning.models.payment import Payment, PaymentMethod, PaymentStatus
from eventplanning.schemas.payment import PaymentResponse, PaymentSummaryResponse
from eventplanning.services.notification_service import NotificationService, notification_service
from eventplanning.services.slip_storage import SlipStorage, slip_storage

logger = logging.getLogger(__name__)


class PaymentService:
    """
    Payment review service.
    A payment is reviewed exactly once; its decision drives the booking status.
    """

    def __init__(
        self,
        database: Optional[DatabaseManager] = None,
        storage: Optional[SlipStorage] = None,
        notifications: Optional[NotificationService] = None
    ):
        self.db = database or db_manager
        self.storage = storage or slip_storage
        self.notifications = notifications or notification_service

    async def upload_bank_transfer_slip(
        self,
        booking_id: int,
        content: bytes,
        filename: Optional[str],
        principal: Principal,
        reference: Optional[str] = None
    ) -> PaymentResponse:
        """
        Record a bank transfer slip as a PENDING payment for a booking.

        The amount is the current ticket price times the booking quantity.

        Args:
            booking_id: Booking being paid for
            content: Slip file bytes
            filename: Original file name
            principal: Calling user, who must own the booking (or be an admin)
            reference: Optional transfer reference

        Returns:
            The pending payment

        Raises:
            ValidationError: If the file is empty or larger than the slip limit
            NotFoundError: If the booking or its ticket type does not exist
            AuthorizationError: If the principal may not pay for this booking
            BusinessRuleViolation: If the booking is cancelled
        """
        if not content:
            raise ValidationError("File is empty")
        max_bytes = await self.storage.get_max_bytes()
        if len(content) > max_bytes:
            raise ValidationError(f"File exceeds the maximum size of {max_bytes} bytes")

        slip_path = None
        try:
            with self.db.get_session() as session:
                booking = BookingRepository(session).get_by_id(booking_id)
                if booking is None:
                    raise NotFoundError("Booking not found")
                authorize(principal, Action.PAYMENT_UPLOAD, booking, "You cannot pay for this booking")
                if booking.status == BookingStatus.CANCELLED:
                    raise BusinessRuleViolation("Booking has been cancelled", ErrorCode.INVALID_STATE)

                ticket_type = TicketTypeRepository(session).get_by_id(booking.ticket_type_id)
                if ticket_type is None:
                    raise NotFoundError("Ticket type not found")

                slip_path = await self.storage.save(content, filename)
                payment = PaymentRepository(session).create(
                    booking_id=booking.id,
                    event_id=booking.event_id,
                    payer_id=booking.user_id,
                    method=PaymentMethod.BANK_TRANSFER,
                    status=PaymentStatus.PENDING,
                    amount=Decimal(ticket_type.price) * booking.quantity,
                    reference=reference,
                    slip_path=slip_path
                )
                response = PaymentResponse.model_validate(payment)
        except Exception:
            if slip_path:
                await self.storage.delete(slip_path)
            raise

        logger.info(f"Payment {response.id} uploaded for booking {booking_id}, amount {response.amount}")
        return response

    async def approve_payment(self, payment_id: int, principal: Principal) -> PaymentResponse:
        """Approve a pending payment; its booking becomes CONFIRMED."""
        return await self._review(payment_id, principal, PaymentStatus.APPROVED)

    async def reject_payment(self, payment_id: int, principal: Principal) -> PaymentResponse:
        """Reject a pending payment; its booking becomes CANCELLED."""
        return await self._review(payment_id, principal, PaymentStatus.REJECTED)

    async def _review(self, payment_id: int, principal: Principal, decision: PaymentStatus) -> PaymentResponse:
        """
        Apply an admin decision to a payment.

        Raises:
            AuthorizationError: If the principal is not an admin
            NotFoundError: If the payment, reviewer or booking does not exist
            BusinessRuleViolation: If the payment was already reviewed, or an
                approval targets a cancelled booking
        """
        authorize(principal, Action.PAYMENT_REVIEW)

        with self.db.get_session() as session:
            reviewer = UserRepository(session).get_by_id(principal.user_id)
            if reviewer is None:
                raise NotFoundError("Reviewer not found")

            payment = self._get_payment(session, payment_id)
            if payment.status != PaymentStatus.PENDING:
                raise BusinessRuleViolation("Payment has already been reviewed", ErrorCode.INVALID_STATE)

            booking = BookingRepository(session).get_by_id(payment.booking_id)
            if booking is None:
                raise NotFoundError("Booking not found")

            if decision == PaymentStatus.APPROVED:
                if booking.status == BookingStatus.CANCELLED:
                    raise BusinessRuleViolation(
                        "Cannot approve a payment for a cancelled booking", ErrorCode.INVALID_STATE
                    )
                booking.status = BookingStatus.CONFIRMED
            else:
                booking.status = BookingStatus.CANCELLED

            payment.status = decision
            payment.reviewed_by_id = reviewer.id
            payment.reviewed_at = utcnow()
            session.flush()
            response = PaymentResponse.model_validate(payment)

        logger.info(f"Payment {payment_id} {decision.value.lower()} by admin {principal.user_id}")
        await self.notifications.notify(
            response.payer_id,
            f"Payment {decision.value.lower()}",
            f"Your payment #{payment_id} for booking #{response.booking_id} was {decision.value.lower()}.",
            NotificationType.PAYMENT,
            event_id=response.event_id
        )
        return response

    async def list_payments(self, principal: Principal, status: Optional[PaymentStatus] = None) -> List[PaymentResponse]:
        """Payments filtered by status. Admin only."""
        authorize(principal, Action.PAYMENT_LIST_ALL)
        with self.db.get_session() as session:
            return [PaymentResponse.model_validate(p) for p in PaymentRepository(session).list_by_status(status)]

    async def list_all_payments(self, principal: Principal) -> List[PaymentResponse]:
        return await self.list_payments(principal)

    async def list_my_payments(self, principal: Principal) -> List[PaymentResponse]:
        with self.db.get_session() as session:
            payments = PaymentRepository(session).list_by_payer(principal.user_id)
            return [PaymentResponse.model_validate(p) for p in payments]

    async def get_summary(self, principal: Principal) -> PaymentSummaryResponse:
        """Counts per status and the sum of approved amounts. Admin only."""
        authorize(principal, Action.PAYMENT_LIST_ALL)
        with self.db.get_session() as session:
            repo = PaymentRepository(session)
            counts = repo.count_by_status()
            total_revenue = sum(repo.approved_amounts(), Decimal("0.00"))
            return PaymentSummaryResponse(
                pending=counts[PaymentStatus.PENDING],
                approved=counts[PaymentStatus.APPROVED],
                rejected=counts[PaymentStatus.REJECTED],
                total_revenue=total_revenue
            )

    def _get_payment(self, session: Session, payment_id: int) -> Payment:
        payment = PaymentRepository(session).get_by_id(payment_id)
        if payment is None:
            raise NotFoundError("Payment not found")
        return payment


# Global payment service instance
payment_service = PaymentService()
