"""
Database helpers for the portfolio API

Each resource lives in its own MongoDB collection. Routes talk to a
DocumentStore so the backing store can be swapped (tests use an in-memory one).
"""

import os
import logging
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import MongoClient, DESCENDING
from pymongo.database import Database

logger = logging.getLogger(__name__)

DATABASE_URL = os.getenv("DATABASE_URL")
DATABASE_NAME = os.getenv("DATABASE_NAME", "portfolio")

CREATED_FIELD = "createdAt"


def connect(url: str, name: str = DATABASE_NAME) -> Database:
    # tz_aware: read-back datetimes keep their UTC offset
    return MongoClient(url, tz_aware=True)[name]


db: Optional[Database] = connect(DATABASE_URL) if DATABASE_URL else None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def to_public(doc: Optional[dict]) -> Optional[dict]:
    """Replace Mongo's _id with a string id."""
    if not doc:
        return doc
    d = doc.copy()
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    return d


class DocumentStore(ABC):
    """Per-document CRUD over named collections."""

    @abstractmethod
    def add(self, collection: str, data: Dict[str, Any]) -> str:
        ...

    @abstractmethod
    def list(self, collection: str, filter_dict: Optional[Dict[str, Any]] = None) -> List[dict]:
        """Documents newest first, each carrying its id."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        ...

    @abstractmethod
    def find_one(self, collection: str, filter_dict: Dict[str, Any]) -> Optional[dict]:
        ...

    @abstractmethod
    def update(self, collection: str, doc_id: str, data: Dict[str, Any]) -> bool:
        """Merge fields into an existing document. False if it does not exist."""

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> bool:
        ...

    @abstractmethod
    def ping(self) -> List[str]:
        """Collection names, raising if the store is unreachable."""


def _object_id(doc_id: str) -> Optional[ObjectId]:
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return None


class MongoDocumentStore(DocumentStore):
    def __init__(self, database: Database):
        self.db = database

    def add(self, collection, data):
        result = self.db[collection].insert_one(dict(data))
        return str(result.inserted_id)

    def list(self, collection, filter_dict=None):
        cursor = self.db[collection].find(filter_dict or {}).sort(
            [(CREATED_FIELD, DESCENDING), ("_id", DESCENDING)]
        )
        return [to_public(doc) for doc in cursor]

    def get(self, collection, doc_id):
        oid = _object_id(doc_id)
        if oid is None:
            return None
        return to_public(self.db[collection].find_one({"_id": oid}))

    def find_one(self, collection, filter_dict):
        return to_public(self.db[collection].find_one(filter_dict))

    def update(self, collection, doc_id, data):
        oid = _object_id(doc_id)
        if oid is None:
            return False
        res = self.db[collection].update_one({"_id": oid}, {"$set": dict(data)})
        return res.matched_count > 0

    def delete(self, collection, doc_id):
        oid = _object_id(doc_id)
        if oid is None:
            return False
        res = self.db[collection].delete_one({"_id": oid})
        return res.deleted_count > 0

    def ping(self):
        return self.db.list_collection_names()


store: Optional[DocumentStore] = MongoDocumentStore(db) if db is not None else None


def create_document(target: DocumentStore, collection: str, data: Dict[str, Any]) -> dict:
    """Stamp createdAt, insert and return the stored fields with their new id."""
    doc = dict(data)
    doc[CREATED_FIELD] = utcnow()
    doc_id = target.add(collection, doc)
    logger.info("Created %s/%s", collection, doc_id)
    return {"id": doc_id, **doc}


def get_documents(target: DocumentStore, collection: str, filter_dict: Optional[Dict[str, Any]] = None) -> List[dict]:
    return target.list(collection, filter_dict)
