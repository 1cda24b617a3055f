"""
Order Lifecycle Coordinator Tests

Run with:
    pytest tests/test_coordinator.py -v
"""
import logging

import pytest

from app.core.exceptions import ConflictError, InvalidArgumentError
from app.models.order.order import OrderStatus
from app.models.refund.refund import RefundInDB
from tests.conftest import ADMIN_EMAIL, set_order_status


def _payment(order_id: str, status: str = "Pending", **overrides) -> dict:
    payment = {
        "_id": "665f1c2e9b1e8a3d4c5b6a70",
        "order_id": order_id,
        "client_name": "Ayesha Khan",
        "client_email": "ayesha@example.com",
        "amount": 1500,
        "payment_method": "paypal",
        "transaction_id": "T1",
        "screenshot_url": None,
        "remarks": "No remarks.",
        "status": status,
    }
    payment.update(overrides)
    return payment


def _refund(order_id: str) -> RefundInDB:
    return RefundInDB(
        user_id="user-1",
        order_id=order_id,
        client_name="Ayesha Khan",
        client_email="ayesha@example.com",
        amount=1500,
        reason="Followers never arrived"
    )


class TestPaymentCreated:
    """Payment submission moves the order to Payment Pending"""

    @pytest.mark.asyncio
    async def test_sets_payment_pending(self, coordinator, ledger, placed_order):
        updated = await coordinator.apply_payment_created(placed_order["_id"], _payment(placed_order["_id"]))

        assert updated["status"] == OrderStatus.PAYMENT_PENDING.value
        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "Payment Pending"

    @pytest.mark.asyncio
    async def test_overwrites_any_prior_status(self, coordinator, ledger, placed_order):
        await set_order_status(ledger, placed_order["_id"], "Completed")

        await coordinator.apply_payment_created(placed_order["_id"], _payment(placed_order["_id"]))

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "Payment Pending"

    @pytest.mark.asyncio
    async def test_missing_order_is_logged_not_raised(self, coordinator, dispatcher, gateway, caplog):
        caplog.set_level(logging.WARNING)
        missing_id = "665f1c2e9b1e8a3d4c5b6a99"

        result = await coordinator.apply_payment_created(missing_id, _payment(missing_id))
        await dispatcher.drain()

        assert result is None
        assert "not found while applying payment submission" in caplog.text
        # The client still hears that the payment was received
        assert gateway.subjects_for("ayesha@example.com") == ["Payment Received for Your Order!"]

    @pytest.mark.asyncio
    async def test_notifies_client_and_admin(self, coordinator, dispatcher, gateway, placed_order):
        await coordinator.apply_payment_created(placed_order["_id"], _payment(placed_order["_id"]))
        await dispatcher.drain()

        assert gateway.subjects_for("ayesha@example.com") == ["Payment Received for Your Order!"]
        assert gateway.subjects_for(ADMIN_EMAIL)[0].startswith("New Payment Received for Order ID:")


class TestPaymentReviewed:
    """Payment approval moves the order to In Progress unless it is finished"""

    @pytest.mark.asyncio
    async def test_approval_moves_payment_pending_to_in_progress(self, coordinator, ledger, placed_order):
        await set_order_status(ledger, placed_order["_id"], "Payment Pending")

        await coordinator.apply_payment_reviewed(_payment(placed_order["_id"], status="Approved"))

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "In Progress"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["Completed", "Cancelled", "Refunded", "Failed", "In Progress"])
    async def test_approval_leaves_guarded_statuses(self, coordinator, ledger, placed_order, status):
        await set_order_status(ledger, placed_order["_id"], status)

        await coordinator.apply_payment_reviewed(_payment(placed_order["_id"], status="Approved"))

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == status

    @pytest.mark.asyncio
    async def test_double_approval_is_idempotent(self, coordinator, ledger, placed_order):
        await set_order_status(ledger, placed_order["_id"], "Payment Pending")
        payment = _payment(placed_order["_id"], status="Approved")

        await coordinator.apply_payment_reviewed(payment)
        first = await ledger.orders.get_by_id(placed_order["_id"])
        await coordinator.apply_payment_reviewed(payment)
        second = await ledger.orders.get_by_id(placed_order["_id"])

        assert first["status"] == second["status"] == "In Progress"
        assert first["updated_at"] == second["updated_at"]

    @pytest.mark.asyncio
    async def test_rejection_does_not_move_order(self, coordinator, dispatcher, gateway, ledger, placed_order):
        await set_order_status(ledger, placed_order["_id"], "Payment Pending")

        await coordinator.apply_payment_reviewed(_payment(placed_order["_id"], status="Rejected"))
        await dispatcher.drain()

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "Payment Pending"
        client_subjects = gateway.subjects_for("ayesha@example.com")
        assert len(client_subjects) == 1
        assert client_subjects[0].endswith("Status: Rejected")

    @pytest.mark.asyncio
    async def test_approval_with_vanished_order_only_logs(self, coordinator, caplog):
        caplog.set_level(logging.WARNING)

        result = await coordinator.apply_payment_reviewed(
            _payment("665f1c2e9b1e8a3d4c5b6a99", status="Approved")
        )

        assert result is None
        assert "not found" in caplog.text

    @pytest.mark.asyncio
    async def test_failed_notification_keeps_transition(
        self, coordinator, dispatcher, gateway, ledger, placed_order, caplog
    ):
        caplog.set_level(logging.ERROR)
        gateway.fail_for.add("ayesha@example.com")
        await set_order_status(ledger, placed_order["_id"], "Payment Pending")

        await coordinator.apply_payment_reviewed(_payment(placed_order["_id"], status="Approved"))
        await dispatcher.drain()

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "In Progress"
        assert "Failed to send client notification to ayesha@example.com" in caplog.text
        # Admin delivery is independent of the client failure
        assert len(gateway.subjects_for(ADMIN_EMAIL)) == 1


class TestRefundRequested:
    """Refund requests create a Pending refund and mark the order Refund Pending"""

    @pytest.mark.asyncio
    async def test_refunded_order_conflicts(self, coordinator, ledger, placed_order):
        await set_order_status(ledger, placed_order["_id"], "Refunded")
        order = await ledger.orders.get_by_id(placed_order["_id"])

        with pytest.raises(ConflictError):
            await coordinator.apply_refund_requested(order, _refund(placed_order["_id"]))

        assert await ledger.refunds.count() == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["Pending", "Payment Pending", "In Progress", "Completed", "Refund Rejected"])
    async def test_creates_pending_refund(self, coordinator, ledger, placed_order, status):
        await set_order_status(ledger, placed_order["_id"], status)
        order = await ledger.orders.get_by_id(placed_order["_id"])

        refund = await coordinator.apply_refund_requested(order, _refund(placed_order["_id"]))

        assert refund["status"] == "Pending"
        assert refund["admin_remarks"] == ""
        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "Refund Pending"


class TestRefundReviewed:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prior", ["Refund Pending", "Completed", "Pending"])
    async def test_approval_refunds_order(self, coordinator, ledger, placed_order, prior):
        await set_order_status(ledger, placed_order["_id"], prior)
        refund = {**_refund(placed_order["_id"]).model_dump(), "_id": "r1", "status": "Approved"}

        await coordinator.apply_refund_reviewed(refund)

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "Refunded"

    @pytest.mark.asyncio
    async def test_rejection_marks_refund_rejected(self, coordinator, dispatcher, gateway, ledger, placed_order):
        await set_order_status(ledger, placed_order["_id"], "Refund Pending")
        refund = {**_refund(placed_order["_id"]).model_dump(), "_id": "r1", "status": "Rejected"}

        await coordinator.apply_refund_reviewed(refund)
        await dispatcher.drain()

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "Refund Rejected"
        assert gateway.subjects_for("ayesha@example.com") == ["Your Refund Request Has Been Rejected"]

    @pytest.mark.asyncio
    async def test_rejection_leaves_refunded_order(self, coordinator, ledger, placed_order, caplog):
        caplog.set_level(logging.INFO)
        await set_order_status(ledger, placed_order["_id"], "Refunded")
        refund = {**_refund(placed_order["_id"]).model_dump(), "_id": "r2", "status": "Rejected"}

        await coordinator.apply_refund_reviewed(refund)

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "Refunded"
        assert "already Refunded" in caplog.text

    @pytest.mark.asyncio
    async def test_non_final_status_is_invalid(self, coordinator, ledger, placed_order):
        await set_order_status(ledger, placed_order["_id"], "Refund Pending")
        refund = {**_refund(placed_order["_id"]).model_dump(), "_id": "r1", "status": "Pending"}

        with pytest.raises(InvalidArgumentError):
            await coordinator.apply_refund_reviewed(refund)

        stored = await ledger.orders.get_by_id(placed_order["_id"])
        assert stored["status"] == "Refund Pending"
