from fastapi import Depends, Request
from motor.motor_asyncio import AsyncIOMotorDatabase

from app.database import get_database
from app.services.ledger.store import Ledger
from app.services.notification.dispatcher import NotificationDispatcher
from app.services.order.coordinator import OrderLifecycleCoordinator
from app.services.order.order_service import OrderService
from app.services.payment.payment_service import PaymentService
from app.services.refund.refund_service import RefundService


async def get_ledger(db: AsyncIOMotorDatabase = Depends(get_database)) -> Ledger:
    """Ledger dependency"""
    return Ledger.from_database(db)


async def get_dispatcher(request: Request) -> NotificationDispatcher:
    """Process-wide dispatcher created at startup"""
    return request.app.state.dispatcher


async def get_coordinator(
    ledger: Ledger = Depends(get_ledger),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
) -> OrderLifecycleCoordinator:
    return OrderLifecycleCoordinator(ledger, dispatcher)


async def get_order_service(
    ledger: Ledger = Depends(get_ledger),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher)
) -> OrderService:
    return OrderService(ledger, dispatcher)


async def get_payment_service(
    ledger: Ledger = Depends(get_ledger),
    coordinator: OrderLifecycleCoordinator = Depends(get_coordinator)
) -> PaymentService:
    return PaymentService(ledger, coordinator)


async def get_refund_service(
    ledger: Ledger = Depends(get_ledger),
    coordinator: OrderLifecycleCoordinator = Depends(get_coordinator)
) -> RefundService:
    return RefundService(ledger, coordinator)
