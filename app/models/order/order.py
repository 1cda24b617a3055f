"""
Order Models
A purchased social-media growth service and its lifecycle status
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime
from enum import Enum


class OrderStatus(str, Enum):
    """Order lifecycle status"""
    PENDING = "Pending"                   # Created, awaiting payment
    PAYMENT_PENDING = "Payment Pending"   # Payment submitted, awaiting review
    IN_PROGRESS = "In Progress"           # Payment approved, work underway
    COMPLETED = "Completed"
    CANCELLED = "Cancelled"
    FAILED = "Failed"
    REFUNDED = "Refunded"
    REFUND_PENDING = "Refund Pending"     # Refund request outstanding
    REFUND_REJECTED = "Refund Rejected"


class Platform(str, Enum):
    """Social platform the order targets"""
    INSTAGRAM = "Instagram"
    TIKTOK = "TikTok"
    YOUTUBE = "YouTube"
    FACEBOOK = "Facebook"
    TWITTER = "Twitter"
    OTHER = "Other"


class ServiceType(str, Enum):
    """Growth service being purchased"""
    FOLLOWERS = "Followers"
    LIKES = "Likes"
    VIEWS = "Views"
    SUBSCRIBERS = "Subscribers"
    COMMENTS = "Comments"
    SHARES = "Shares"
    WATCH_TIME = "Watch Time"
    LIVE_STREAM = "Live Stream"
    PAGE_LIKES = "Page Likes"
    FEMALE_FOLLOWERS = "Female Followers"
    ENGLISH_FOLLOWERS = "English Followers"
    REELS_VIEWS = "Reels Views"
    STORY_VIEWS = "Story Views"
    OTHER = "Other"


class OrderCreate(BaseModel):
    """Schema for placing an order"""
    name: str = Field(..., min_length=1)
    email: EmailStr
    phone_number: str = Field(..., min_length=1)
    profile_link: str = Field(..., min_length=1)
    post_link: Optional[str] = ""
    social_id: Optional[str] = ""
    platform: Platform
    service: ServiceType
    required_followers: int = Field(..., ge=1)
    price: float = Field(..., ge=0)


class OrderDetailsUpdate(BaseModel):
    """Admin edit of order details (status is changed only via override)"""
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    profile_link: Optional[str] = None
    post_link: Optional[str] = None
    social_id: Optional[str] = None
    platform: Optional[Platform] = None
    service: Optional[ServiceType] = None
    required_followers: Optional[int] = Field(None, ge=1)
    price: Optional[float] = Field(None, ge=0)


class OrderStatusOverride(BaseModel):
    """Admin manual status override"""
    status: OrderStatus
    admin_id: str = Field(..., min_length=1)
    reason: Optional[str] = None


class OrderInDB(BaseModel):
    """Order record in database"""
    name: str
    email: str
    phone_number: str
    profile_link: str
    post_link: str = ""
    social_id: str = ""
    platform: Platform
    service: ServiceType
    required_followers: int
    price: float
    status: OrderStatus = OrderStatus.PENDING

    # Timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)
