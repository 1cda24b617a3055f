"""
Payment Models
Client-submitted evidence of a manual funds transfer against an order
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class PaymentStatus(str, Enum):
    """Payment review status"""
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class PaymentMethod(str, Enum):
    """Supported manual payment channels"""
    EASYPAISA = "easypaisa"
    JAZZCASH = "jazzcash"
    BANK_TRANSFER = "bankTransfer"
    PAYPAL = "paypal"
    GOOGLE_PAY = "googlePay"


DEFAULT_REMARKS = "No remarks."


class PaymentCreate(BaseModel):
    """Payment submission schema"""
    order_id: str = Field(..., min_length=1)
    client_name: str = Field(..., min_length=1)
    client_email: EmailStr
    amount: float = Field(..., ge=0)
    payment_method: PaymentMethod
    transaction_id: str = Field(..., min_length=1)
    screenshot_url: Optional[str] = None
    remarks: Optional[str] = None


class PaymentReview(BaseModel):
    """Admin review of a payment"""
    status: str
    remarks: Optional[str] = None


class PaymentInDB(BaseModel):
    """Payment record in database"""
    order_id: str
    client_name: str
    client_email: str
    amount: float
    payment_method: PaymentMethod
    transaction_id: str            # Unique together with payment_method
    screenshot_url: Optional[str] = None
    remarks: str = DEFAULT_REMARKS
    status: PaymentStatus = PaymentStatus.PENDING
    payment_date: datetime = Field(default_factory=datetime.utcnow)

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
