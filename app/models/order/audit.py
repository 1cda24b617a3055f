from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class OrderAuditAction(str, Enum):
    """Audit action types"""
    STATUS_OVERRIDDEN = "status_overridden"
    ORDER_DELETED = "order_deleted"


class OrderAuditEntry(BaseModel):
    """Audit trail entry for admin actions on an order"""
    order_id: str
    action: OrderAuditAction
    admin_id: str
    previous_status: Optional[str] = None
    new_status: Optional[str] = None
    reason: Optional[str] = None
    timestamp: datetime = Field(default_factory=datetime.utcnow)
