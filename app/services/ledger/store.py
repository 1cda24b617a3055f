"""
Ledger Store
Durable storage for orders, payments, refunds and the order audit trail.

Records are plain dicts with ``_id`` rendered as a string. ``update_by_id``
applies a ``$set`` patch atomically on a single document and returns the
updated record (or None when the id is unknown).
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.core.exceptions import DuplicateRecordError

SortSpec = Sequence[Tuple[str, int]]


class LedgerStore(ABC):
    """Contract for a single collection of ledger records"""

    @abstractmethod
    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        """Insert a record and return it with its ``_id``"""

    @abstractmethod
    async def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        """Fetch one record, None when missing or the id is malformed"""

    @abstractmethod
    async def update_by_id(
        self,
        record_id: str,
        patch: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """Apply ``patch`` and return the updated record"""

    @abstractmethod
    async def find(
        self,
        query: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        limit: int = 0
    ) -> List[Dict[str, Any]]:
        """Find records by equality filter"""

    @abstractmethod
    async def delete_by_id(self, record_id: str) -> bool:
        """Remove a record, True when something was deleted"""

    @abstractmethod
    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        """Count records matching an equality filter"""


def _stringify_id(document: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if document and "_id" in document:
        document["_id"] = str(document["_id"])
    return document


class MongoLedgerStore(LedgerStore):
    """LedgerStore backed by a Motor collection"""

    def __init__(self, collection: AsyncIOMotorCollection):
        self.collection = collection

    @staticmethod
    def _object_id(record_id: str) -> Optional[ObjectId]:
        if not record_id or not ObjectId.is_valid(record_id):
            return None
        return ObjectId(record_id)

    async def create(self, document: Dict[str, Any]) -> Dict[str, Any]:
        document = dict(document)
        try:
            result = await self.collection.insert_one(document)
        except DuplicateKeyError as e:
            raise DuplicateRecordError(str(e)) from e
        document["_id"] = str(result.inserted_id)
        return document

    async def get_by_id(self, record_id: str) -> Optional[Dict[str, Any]]:
        object_id = self._object_id(record_id)
        if object_id is None:
            return None
        return _stringify_id(await self.collection.find_one({"_id": object_id}))

    async def update_by_id(
        self,
        record_id: str,
        patch: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        object_id = self._object_id(record_id)
        if object_id is None:
            return None
        patch = {**patch, "updated_at": datetime.utcnow()}
        try:
            updated = await self.collection.find_one_and_update(
                {"_id": object_id},
                {"$set": patch},
                return_document=ReturnDocument.AFTER
            )
        except DuplicateKeyError as e:
            raise DuplicateRecordError(str(e)) from e
        return _stringify_id(updated)

    async def find(
        self,
        query: Optional[Dict[str, Any]] = None,
        sort: Optional[SortSpec] = None,
        limit: int = 0
    ) -> List[Dict[str, Any]]:
        cursor = self.collection.find(query or {})
        if sort:
            cursor = cursor.sort(list(sort))
        if limit:
            cursor = cursor.limit(limit)
        records = await cursor.to_list(length=limit or None)
        return [_stringify_id(record) for record in records]

    async def delete_by_id(self, record_id: str) -> bool:
        object_id = self._object_id(record_id)
        if object_id is None:
            return False
        result = await self.collection.delete_one({"_id": object_id})
        return result.deleted_count > 0

    async def count(self, query: Optional[Dict[str, Any]] = None) -> int:
        return await self.collection.count_documents(query or {})


@dataclass
class Ledger:
    """The collections the lifecycle services read and write"""
    orders: LedgerStore
    payments: LedgerStore
    refunds: LedgerStore
    audit_log: LedgerStore

    @classmethod
    def from_database(cls, db: AsyncIOMotorDatabase) -> "Ledger":
        return cls(
            orders=MongoLedgerStore(db.orders),
            payments=MongoLedgerStore(db.payments),
            refunds=MongoLedgerStore(db.refunds),
            audit_log=MongoLedgerStore(db.order_audit_log)
        )
