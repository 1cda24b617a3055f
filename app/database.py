import logging
from motor.motor_asyncio import AsyncIOMotorClient
from typing import Optional
from pymongo import ASCENDING, DESCENDING

from app.core.config import Settings, get_settings

logger = logging.getLogger(__name__)


class Database:
    client: Optional[AsyncIOMotorClient] = None
    settings: Optional[Settings] = None

    @classmethod
    async def connect_db(cls, settings: Optional[Settings] = None):
        """Connect to MongoDB"""
        cls.settings = settings or get_settings()
        cls.client = AsyncIOMotorClient(cls.settings.mongodb_url)
        logger.info("[OK] Connected to MongoDB")

        # Create indexes
        await cls.create_indexes()

    @classmethod
    async def create_indexes(cls):
        """Create database indexes"""
        db = cls.get_db()

        # Orders indexes
        try:
            await db.orders.create_index([("email", ASCENDING), ("created_at", DESCENDING)])
            await db.orders.create_index([("status", ASCENDING)])
            logger.info("[OK] Created indexes on orders")
        except Exception as e:
            logger.warning(f"[WARN] Indexes on orders may already exist: {e}")

        # Payments indexes; a transaction id is unique per payment method
        try:
            await db.payments.create_index(
                [("transaction_id", ASCENDING), ("payment_method", ASCENDING)],
                unique=True
            )
            await db.payments.create_index([("order_id", ASCENDING)])
            await db.payments.create_index([("payment_date", DESCENDING)])
            logger.info("[OK] Created indexes on payments")
        except Exception as e:
            logger.warning(f"[WARN] Indexes on payments may already exist: {e}")

        # Refunds indexes
        try:
            await db.refunds.create_index([("order_id", ASCENDING)])
            await db.refunds.create_index([("user_id", ASCENDING), ("created_at", DESCENDING)])
            logger.info("[OK] Created indexes on refunds")
        except Exception as e:
            logger.warning(f"[WARN] Indexes on refunds may already exist: {e}")

        # Order audit log indexes
        try:
            await db.order_audit_log.create_index([("order_id", ASCENDING), ("timestamp", DESCENDING)])
            logger.info("[OK] Created indexes on order_audit_log")
        except Exception as e:
            logger.warning(f"[WARN] Indexes on order_audit_log may already exist: {e}")

    @classmethod
    async def close_db(cls):
        """Close MongoDB connection"""
        if cls.client:
            cls.client.close()
            cls.client = None
            logger.info("[OK] Disconnected from MongoDB")

    @classmethod
    def get_db(cls):
        """Get database instance"""
        settings = cls.settings or get_settings()
        return cls.client[settings.database_name]


async def get_database():
    """Dependency to get database"""
    return Database.get_db()
