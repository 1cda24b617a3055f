"""
Refund Models
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class RefundStatus(str, Enum):
    """Refund review status"""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class RefundCreate(BaseModel):
    """Refund request schema"""
    order_id: str = Field(..., min_length=1)
    user_id: Optional[str] = None
    client_name: str = Field(..., min_length=1)
    client_email: EmailStr
    amount: float = Field(..., ge=0)
    reason: str = Field(..., min_length=1)


class RefundReview(BaseModel):
    """Admin review of a refund request"""
    status: str
    admin_remarks: Optional[str] = None


class RefundInDB(BaseModel):
    """Refund record in database"""
    user_id: Optional[str] = None
    order_id: str
    client_name: str
    client_email: str
    amount: float
    reason: str
    status: RefundStatus = RefundStatus.PENDING
    admin_remarks: str = ""

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
