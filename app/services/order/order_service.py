"""
Order Service
Order intake, lookup and admin maintenance.

Status changes outside the payment/refund flow go through
``override_status``, which writes an audit entry. ``update_details`` can
never touch the status.
"""
import logging
from typing import Any, Dict, List, Optional

from app.core.exceptions import InvalidArgumentError, NotFoundError
from app.models.order.audit import OrderAuditAction, OrderAuditEntry
from app.models.order.order import (
    OrderCreate, OrderDetailsUpdate, OrderInDB, OrderStatus
)
from app.services.ledger.store import Ledger
from app.services.notification.dispatcher import NotificationDispatcher

logger = logging.getLogger(__name__)


class OrderService:
    """Service for order operations"""

    def __init__(self, ledger: Ledger, dispatcher: NotificationDispatcher):
        self.ledger = ledger
        self.orders = ledger.orders
        self.audit_log = ledger.audit_log
        self.dispatcher = dispatcher
        self.templates = dispatcher.templates

    async def create_order(self, data: OrderCreate) -> Dict[str, Any]:
        """Persist a new Pending order and notify client and owner"""
        order = OrderInDB(
            name=data.name.strip(),
            email=str(data.email).strip().lower(),
            phone_number=data.phone_number.strip(),
            profile_link=data.profile_link.strip(),
            post_link=(data.post_link or "").strip(),
            social_id=(data.social_id or "").strip(),
            platform=data.platform,
            service=data.service,
            required_followers=data.required_followers,
            price=data.price,
            status=OrderStatus.PENDING
        )
        created = await self.orders.create(order.model_dump(mode="json") | {
            "created_at": order.created_at,
            "updated_at": order.updated_at
        })
        logger.info(f"[OK] Order created: {created['_id']}")

        self.dispatcher.notify_client(created["email"], self.templates.order_placed_client(created))
        self.dispatcher.notify_admin(self.templates.order_placed_admin(created))
        return created

    async def get_order(self, order_id: str) -> Dict[str, Any]:
        order = await self.orders.get_by_id(order_id)
        if not order:
            raise NotFoundError("Order not found.")
        return order

    async def get_order_status(self, order_id: str) -> str:
        order = await self.get_order(order_id)
        return order["status"]

    async def list_orders(self) -> List[Dict[str, Any]]:
        """Admin: all orders, newest first"""
        return await self.orders.find(sort=[("created_at", -1)])

    async def list_orders_for_email(self, email: str) -> List[Dict[str, Any]]:
        if not email or not email.strip():
            raise InvalidArgumentError("Email parameter is required to fetch user orders.")
        return await self.orders.find(
            {"email": email.strip().lower()},
            sort=[("created_at", -1)]
        )

    async def update_details(self, order_id: str, updates: OrderDetailsUpdate) -> Dict[str, Any]:
        """Admin: edit non-status fields"""
        patch = updates.model_dump(mode="json", exclude_none=True)
        if not patch:
            raise InvalidArgumentError("No order fields to update.")
        if "email" in patch:
            patch["email"] = patch["email"].strip().lower()

        updated = await self.orders.update_by_id(order_id, patch)
        if not updated:
            raise NotFoundError("Order not found.")
        logger.info(f"[ADMIN] Updated order {order_id} fields: {sorted(patch)}")
        return updated

    async def override_status(
        self,
        order_id: str,
        status: OrderStatus,
        admin_id: str,
        reason: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Admin: set any declared status, bypassing the lifecycle rules.

        The change is recorded in the order audit log and both parties are
        notified.
        """
        if not admin_id:
            raise InvalidArgumentError("admin_id is required for a status override.")
        order = await self.get_order(order_id)
        previous_status = order["status"]

        updated = await self.orders.update_by_id(order_id, {"status": status.value})
        if not updated:
            raise NotFoundError("Order not found.")

        entry = OrderAuditEntry(
            order_id=order_id,
            action=OrderAuditAction.STATUS_OVERRIDDEN,
            admin_id=admin_id,
            previous_status=previous_status,
            new_status=status.value,
            reason=reason
        )
        await self.audit_log.create(entry.model_dump(mode="python") | {"action": entry.action.value})
        logger.info(
            f"[ADMIN] Order {order_id} status overridden {previous_status} -> {status.value} by {admin_id}"
        )

        self.dispatcher.notify_client(updated["email"], self.templates.order_status_client(updated))
        self.dispatcher.notify_admin(self.templates.order_status_admin(updated))
        return updated

    async def get_audit_history(self, order_id: str) -> List[Dict[str, Any]]:
        """Audit entries for an order, newest first; kept after the order is deleted"""
        history = await self.audit_log.find({"order_id": order_id}, sort=[("timestamp", -1)])
        if not history:
            await self.get_order(order_id)
        return history

    async def delete_order(self, order_id: str, admin_id: Optional[str] = None) -> None:
        """
        Admin: remove an order. Payments and refunds are left in place and
        keep referencing the deleted id.
        """
        await self.get_order(order_id)
        deleted = await self.orders.delete_by_id(order_id)
        if not deleted:
            raise NotFoundError("Order not found.")

        payments = await self.ledger.payments.count({"order_id": order_id})
        refunds = await self.ledger.refunds.count({"order_id": order_id})
        if payments or refunds:
            logger.warning(
                f"[WARN] Deleted order {order_id} is still referenced by "
                f"{payments} payment(s) and {refunds} refund(s)"
            )

        entry = OrderAuditEntry(
            order_id=order_id,
            action=OrderAuditAction.ORDER_DELETED,
            admin_id=admin_id or "unknown"
        )
        await self.audit_log.create(entry.model_dump(mode="python") | {"action": entry.action.value})
        logger.info(f"[ADMIN] Deleted order {order_id}")
