"""
Pytest configuration and fixtures for tests.

Provides an in-memory LedgerStore and a recording NotificationGateway so
the lifecycle services run without MongoDB or SMTP.
"""
import copy
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple

import pytest
import pytest_asyncio
from bson import ObjectId

from app.core.config import Settings
from app.core.exceptions import DuplicateRecordError
from app.models.order.order import OrderCreate, Platform, ServiceType
from app.services.ledger.store import Ledger, LedgerStore
from app.services.notification.dispatcher import NotificationDispatcher
from app.services.notification.gateway import NotificationGateway, NotificationResult
from app.services.order.coordinator import OrderLifecycleCoordinator
from app.services.order.order_service import OrderService
from app.services.payment.payment_service import PaymentService
from app.services.refund.refund_service import RefundService

ADMIN_EMAIL = "owner@example.com"


class InMemoryLedgerStore(LedgerStore):
    """Dict-backed LedgerStore with optional compound unique keys"""

    def __init__(self, unique_keys: Optional[List[Tuple[str, ...]]] = None):
        self.records: Dict[str, Dict[str, Any]] = {}
        self.unique_keys = unique_keys or []

    def _violates_unique(self, document: Dict[str, Any], skip_id: Optional[str] = None) -> bool:
        for keys in self.unique_keys:
            wanted = tuple(document.get(k) for k in keys)
            for record_id, record in self.records.items():
                if record_id != skip_id and tuple(record.get(k) for k in keys) == wanted:
                    return True
        return False

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        if self._violates_unique(document):
            raise DuplicateRecordError("E11000 duplicate key error")
        record = copy.deepcopy(document)
        record["_id"] = str(ObjectId())
        self.records[record["_id"]] = record
        return copy.deepcopy(record)

    async def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        record = self.records.get(record_id)
        return copy.deepcopy(record) if record else None

    async def update_by_id(self, record_id: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        record = self.records.get(record_id)
        if record is None:
            return None
        merged = {**record, **copy.deepcopy(patch), "updated_at": datetime.utcnow()}
        if self._violates_unique(merged, skip_id=record_id):
            raise DuplicateRecordError("E11000 duplicate key error")
        self.records[record_id] = merged
        return copy.deepcopy(merged)

    async def find(
        self,
        query: Optional[Dict[str, Any]] = None,
        sort: Optional[Sequence[Tuple[str, int]]] = None,
        limit: int = 0
    ) -> List[Dict[str, Any]]:
        query = query or {}
        results = [
            copy.deepcopy(r) for r in self.records.values()
            if all(r.get(k) == v for k, v in query.items())
        ]
        for field, direction in reversed(list(sort or [])):
            results.sort(key=lambda r: r.get(field), reverse=direction < 0)
        return results[:limit] if limit else results

    async def delete_by_id(self, record_id: str) -> bool:
        return self.records.pop(record_id, None) is not None

    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        return len(await self.find(query))


class RecordingGateway(NotificationGateway):
    """Captures outgoing emails; can be told to fail or raise"""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail_for: set = set()
        self.raise_error: Optional[Exception] = None

    async def send(self, to: str, subject: str, html_body: str) -> NotificationResult:
        if self.raise_error:
            raise self.raise_error
        if to in self.fail_for:
            return NotificationResult(success=False, error="SMTP unavailable")
        self.sent.append({"to": to, "subject": subject, "html": html_body})
        return NotificationResult(success=True)

    def subjects_for(self, to: str) -> List[str]:
        return [m["subject"] for m in self.sent if m["to"] == to]


@pytest.fixture
def settings():
    return Settings(admin_receiving_email=ADMIN_EMAIL, currency="PKR")


@pytest.fixture
def gateway():
    return RecordingGateway()


@pytest.fixture
def ledger():
    return Ledger(
        orders=InMemoryLedgerStore(),
        payments=InMemoryLedgerStore(unique_keys=[("transaction_id", "payment_method")]),
        refunds=InMemoryLedgerStore(),
        audit_log=InMemoryLedgerStore()
    )


@pytest.fixture
def dispatcher(gateway, settings):
    return NotificationDispatcher(gateway, settings)


@pytest.fixture
def coordinator(ledger, dispatcher):
    return OrderLifecycleCoordinator(ledger, dispatcher)


@pytest.fixture
def order_service(ledger, dispatcher):
    return OrderService(ledger, dispatcher)


@pytest.fixture
def payment_service(ledger, coordinator):
    return PaymentService(ledger, coordinator)


@pytest.fixture
def refund_service(ledger, coordinator):
    return RefundService(ledger, coordinator)


def make_order_data(**overrides) -> OrderCreate:
    data = {
        "name": "Ayesha Khan",
        "email": "ayesha@example.com",
        "phone_number": "+923001234567",
        "profile_link": "https://instagram.com/ayesha",
        "platform": Platform.INSTAGRAM,
        "service": ServiceType.FOLLOWERS,
        "required_followers": 1000,
        "price": 1500,
    }
    data.update(overrides)
    return OrderCreate(**data)


@pytest_asyncio.fixture
async def placed_order(order_service, dispatcher, gateway):
    """A Pending order with its placement emails already flushed"""
    order = await order_service.create_order(make_order_data())
    await dispatcher.drain()
    gateway.sent.clear()
    return order


async def set_order_status(ledger: Ledger, order_id: str, status: str) -> None:
    await ledger.orders.update_by_id(order_id, {"status": status})
