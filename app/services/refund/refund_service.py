"""
Refund Service
Intake and admin review of refund requests
"""
import logging
from typing import Any, Dict, List, Optional

from app.core.exceptions import ConflictError, InvalidArgumentError, NotFoundError
from app.models.refund.refund import RefundCreate, RefundInDB, RefundStatus
from app.services.ledger.store import Ledger
from app.services.order.coordinator import OrderLifecycleCoordinator, REFUND_OUTCOMES

logger = logging.getLogger(__name__)


class RefundService:
    """Service for refund operations"""

    def __init__(self, ledger: Ledger, coordinator: OrderLifecycleCoordinator):
        self.ledger = ledger
        self.refunds = ledger.refunds
        self.orders = ledger.orders
        self.coordinator = coordinator

    async def submit(self, data: RefundCreate) -> Dict[str, Any]:
        """
        Request a refund for an order.

        Raises:
            InvalidArgumentError: a required field is blank
            NotFoundError: the order does not exist
            ConflictError: the order is already Refunded
        """
        client_name = data.client_name.strip()
        reason = data.reason.strip()
        if not client_name or not reason or not data.order_id.strip():
            raise InvalidArgumentError("Missing one or more required refund fields.")

        order = await self.orders.get_by_id(data.order_id)
        if order is None:
            raise NotFoundError("Order not found.")

        refund = RefundInDB(
            user_id=data.user_id,
            order_id=order["_id"],
            client_name=client_name,
            client_email=str(data.client_email).strip().lower(),
            amount=data.amount,
            reason=reason
        )
        return await self.coordinator.apply_refund_requested(order, refund)

    async def review(
        self,
        refund_id: str,
        status: str,
        admin_remarks: Optional[str] = None
    ) -> Dict[str, Any]:
        """Admin: approve or reject a refund request"""
        refund = await self.refunds.get_by_id(refund_id)
        if not refund:
            raise NotFoundError("Refund not found.")

        status_value = status.value if isinstance(status, RefundStatus) else str(status)
        if status_value not in REFUND_OUTCOMES:
            raise InvalidArgumentError("Refund status must be Approved or Rejected.")
        if refund.get("status") != RefundStatus.PENDING.value:
            raise ConflictError(f"Refund has already been {str(refund.get('status')).lower()}.")

        patch: Dict[str, Any] = {"status": status_value}
        if admin_remarks is not None:
            patch["admin_remarks"] = admin_remarks.strip()

        updated = await self.refunds.update_by_id(refund_id, patch)
        if not updated:
            raise NotFoundError("Refund not found.")
        logger.info(f"[ADMIN] Refund {refund_id} marked {status_value}")

        await self.coordinator.apply_refund_reviewed(updated)
        return updated

    async def get_refund(self, refund_id: str) -> Dict[str, Any]:
        refund = await self.refunds.get_by_id(refund_id)
        if not refund:
            raise NotFoundError("Refund not found.")
        return refund

    async def list_refunds(self) -> List[Dict[str, Any]]:
        """Admin: all refund requests, newest first"""
        return await self.refunds.find(sort=[("created_at", -1)])

    async def list_refunds_for_user(self, user_id: str) -> List[Dict[str, Any]]:
        if not user_id:
            raise InvalidArgumentError("user_id is required.")
        return await self.refunds.find({"user_id": user_id}, sort=[("created_at", -1)])
