"""
Payment Service
Intake and admin review of manual payments
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from app.core.exceptions import (
    ConflictError, DuplicateRecordError, InvalidArgumentError, NotFoundError
)
from app.models.payment.payment import (
    DEFAULT_REMARKS, PaymentCreate, PaymentInDB, PaymentStatus
)
from app.services.ledger.store import Ledger
from app.services.order.coordinator import OrderLifecycleCoordinator

logger = logging.getLogger(__name__)

REVIEW_STATUSES = (PaymentStatus.APPROVED, PaymentStatus.REJECTED)

DUPLICATE_TRANSACTION_MESSAGE = "A payment with this transaction ID already exists for this method."


class PaymentService:
    """
    Service for payment operations.
    Records payment evidence and hands status propagation to the coordinator.
    """

    def __init__(self, ledger: Ledger, coordinator: OrderLifecycleCoordinator):
        self.ledger = ledger
        self.payments = ledger.payments
        self.orders = ledger.orders
        self.coordinator = coordinator

    async def submit(self, data: PaymentCreate) -> Dict[str, Any]:
        """
        Record a Pending payment for an order.

        Raises:
            InvalidArgumentError: a required field is blank
            NotFoundError: the order does not exist
            ConflictError: (transaction_id, payment_method) already recorded
        """
        transaction_id = data.transaction_id.strip()
        client_name = data.client_name.strip()
        if not transaction_id or not client_name or not data.order_id.strip():
            raise InvalidArgumentError("Missing one or more required payment fields.")

        order = await self.orders.get_by_id(data.order_id)
        if order is None:
            raise NotFoundError("Order not found.")

        existing = await self.payments.find({
            "transaction_id": transaction_id,
            "payment_method": data.payment_method.value
        }, limit=1)
        if existing:
            raise ConflictError(DUPLICATE_TRANSACTION_MESSAGE)

        payment = PaymentInDB(
            order_id=order["_id"],
            client_name=client_name,
            client_email=str(data.client_email).strip().lower(),
            amount=data.amount,
            payment_method=data.payment_method,
            transaction_id=transaction_id,
            screenshot_url=(data.screenshot_url or "").strip() or None,
            remarks=(data.remarks or "").strip() or DEFAULT_REMARKS,
            status=PaymentStatus.PENDING,
            payment_date=datetime.utcnow()
        )
        document = payment.model_dump(mode="python")
        document["payment_method"] = payment.payment_method.value
        document["status"] = payment.status.value

        try:
            created = await self.payments.create(document)
        except DuplicateRecordError:
            # Lost a race against a concurrent submission with the same key
            raise ConflictError(DUPLICATE_TRANSACTION_MESSAGE)

        logger.info(f"[OK] Payment {created['_id']} recorded for order {created['order_id']}")

        await self.coordinator.apply_payment_created(created["order_id"], created)
        return created

    async def review(
        self,
        payment_id: str,
        status: str,
        remarks: Optional[str] = None
    ) -> Dict[str, Any]:
        """Admin: approve or reject a payment and propagate to the order"""
        payment = await self.payments.get_by_id(payment_id)
        if not payment:
            raise NotFoundError("Payment not found.")

        try:
            status = PaymentStatus(status)
        except ValueError:
            raise InvalidArgumentError("Payment status must be Approved or Rejected.")
        if status not in REVIEW_STATUSES:
            raise InvalidArgumentError("Payment status must be Approved or Rejected.")

        patch: Dict[str, Any] = {"status": status.value}
        if remarks is not None and remarks.strip():
            patch["remarks"] = remarks.strip()

        updated = await self.payments.update_by_id(payment_id, patch)
        if not updated:
            raise NotFoundError("Payment not found.")
        logger.info(f"[ADMIN] Payment {payment_id} marked {status.value}")

        await self.coordinator.apply_payment_reviewed(updated)
        return updated

    async def get_payment(self, payment_id: str) -> Dict[str, Any]:
        payment = await self.payments.get_by_id(payment_id)
        if not payment:
            raise NotFoundError("Payment not found.")
        return payment

    async def list_payments(self) -> List[Dict[str, Any]]:
        """Admin: all payments, latest first, with the referenced order price"""
        payments = await self.payments.find(sort=[("payment_date", -1)])
        prices: Dict[str, Optional[float]] = {}
        for payment in payments:
            order_id = payment.get("order_id")
            if order_id not in prices:
                order = await self.orders.get_by_id(order_id)
                prices[order_id] = order.get("price") if order else None
            payment["order_price"] = prices[order_id]
        return payments
