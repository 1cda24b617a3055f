"""
Order Lifecycle Coordinator
Single authority for turning Payment and Refund events into Order status
transitions, and for deciding which notifications fire.

Transitions are last-write-wins on a single document. The only ordering
guard is on payment approval: an order that is already In Progress or
terminal is never moved (back) to In Progress.

Once the triggering record is persisted, everything here is best-effort:
a vanished order is logged as an inconsistency and emails are
fire-and-forget.
"""
import logging
from typing import Any, Dict, Optional

from app.core.exceptions import ConflictError, InvalidArgumentError
from app.models.order.order import OrderStatus
from app.models.payment.payment import PaymentStatus
from app.models.refund.refund import RefundInDB, RefundStatus
from app.services.ledger.store import Ledger
from app.services.notification.dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)

# Statuses the coordinator never moves out of automatically
TERMINAL_STATUSES = frozenset({
    OrderStatus.COMPLETED.value,
    OrderStatus.CANCELLED.value,
    OrderStatus.FAILED.value,
    OrderStatus.REFUNDED.value,
})

# Payment approval leaves these untouched
APPROVAL_GUARDED_STATUSES = TERMINAL_STATUSES | {OrderStatus.IN_PROGRESS.value}

REFUND_OUTCOMES = {
    RefundStatus.APPROVED.value: OrderStatus.REFUNDED,
    RefundStatus.REJECTED.value: OrderStatus.REFUND_REJECTED,
}


def _status_value(status: Any) -> str:
    return status.value if hasattr(status, "value") else str(status)


class OrderLifecycleCoordinator:
    """Owns Order.status transitions triggered by payments and refunds"""

    def __init__(self, ledger: Ledger, dispatcher: NotificationDispatcher):
        self.ledger = ledger
        self.orders = ledger.orders
        self.refunds = ledger.refunds
        self.dispatcher = dispatcher
        self.templates = dispatcher.templates

    async def _set_order_status(
        self,
        order_id: str,
        status: OrderStatus,
        cause: str
    ) -> Optional[Dict[str, Any]]:
        updated = await self.orders.update_by_id(order_id, {"status": status.value})
        if updated is None:
            self._log_inconsistency(order_id, cause)
            return None
        logger.info(f"[ORDER] Order {order_id} status updated to '{status.value}' ({cause})")
        return updated

    @staticmethod
    def _log_inconsistency(order_id: str, cause: str) -> None:
        logger.warning(f"[WARN] Order {order_id} not found while applying {cause}")

    # ==================== PAYMENTS ====================

    async def apply_payment_created(
        self,
        order_id: str,
        payment: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        Move the order to Payment Pending after a payment is recorded.

        Overwrites whatever status the order had. A missing order is logged
        and the payment is kept. Returns the updated order, or None.
        """
        order = await self.orders.get_by_id(order_id)
        updated = None
        if order is None:
            self._log_inconsistency(order_id, "payment submission")
        else:
            updated = await self._set_order_status(
                order_id, OrderStatus.PAYMENT_PENDING, "payment submitted"
            )

        self.dispatcher.notify_client(
            payment.get("client_email"),
            self.templates.payment_received_client(payment)
        )
        self.dispatcher.notify_admin(self.templates.payment_received_admin(payment))
        return updated

    async def apply_payment_reviewed(self, payment: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Propagate a reviewed payment to its order.

        Approved moves the order to In Progress unless it is already In
        Progress or terminal. Rejected leaves the order for the admin to
        handle. Both outcomes notify the client and the admin.
        """
        order_id = payment["order_id"]
        status = _status_value(payment["status"])
        updated = None

        if status == PaymentStatus.APPROVED.value:
            order = await self.orders.get_by_id(order_id)
            if order is None:
                self._log_inconsistency(order_id, f"payment {payment.get('_id')} approval")
            elif order["status"] in APPROVAL_GUARDED_STATUSES:
                logger.info(
                    f"[ORDER] Order {order_id} status is {order['status']}, not changing to 'In Progress'."
                )
                updated = order
            else:
                updated = await self._set_order_status(
                    order_id, OrderStatus.IN_PROGRESS, "payment approved"
                )

        self.dispatcher.notify_client(
            payment.get("client_email"),
            self.templates.payment_status_client(payment)
        )
        self.dispatcher.notify_admin(self.templates.payment_status_admin(payment))
        return updated

    # ==================== REFUNDS ====================

    async def apply_refund_requested(
        self,
        order: Dict[str, Any],
        refund: RefundInDB
    ) -> Dict[str, Any]:
        """Record a Pending refund and move the order to Refund Pending"""
        if order["status"] == OrderStatus.REFUNDED.value:
            raise ConflictError("This order has already been refunded.")

        document = refund.model_dump(mode="python")
        document["order_id"] = order["_id"]
        document["status"] = RefundStatus.PENDING.value
        document["admin_remarks"] = ""
        created = await self.refunds.create(document)
        logger.info(f"[OK] Created refund request {created['_id']} for order {order['_id']}")

        await self._set_order_status(order["_id"], OrderStatus.REFUND_PENDING, "refund requested")

        self.dispatcher.notify_client(
            created.get("client_email"),
            self.templates.refund_requested_client(created)
        )
        self.dispatcher.notify_admin(self.templates.refund_requested_admin(created))
        return created

    async def apply_refund_reviewed(self, refund: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Approved refunds the order, Rejected marks it Refund Rejected"""
        status = _status_value(refund["status"])
        target = REFUND_OUTCOMES.get(status)
        if target is None:
            raise InvalidArgumentError(
                f"Refund status must be one of: {', '.join(REFUND_OUTCOMES)}"
            )

        order_id = refund["order_id"]
        order = await self.orders.get_by_id(order_id)
        if order is None:
            self._log_inconsistency(order_id, f"refund {refund.get('_id')} review")
            updated = None
        elif target is OrderStatus.REFUND_REJECTED and order["status"] == OrderStatus.REFUNDED.value:
            # Refunded is terminal; a later rejection must not reopen it
            logger.info(
                f"[ORDER] Order {order_id} is already Refunded, not changing to 'Refund Rejected'."
            )
            updated = order
        else:
            updated = await self._set_order_status(order_id, target, f"refund {status.lower()}")

        self.dispatcher.notify_client(
            refund.get("client_email"),
            self.templates.refund_reviewed_client(refund)
        )
        self.dispatcher.notify_admin(self.templates.refund_reviewed_admin(refund))
        return updated
