"""
Binary object storage for uploaded images.

Objects are kept in GridFS next to the content collections; the API hands out
URLs under /uploads that serve them back.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional

import gridfs
from gridfs.errors import NoFile
from pymongo.database import Database

from database import db

logger = logging.getLogger(__name__)


@dataclass
class StoredObject:
    name: str
    data: bytes
    content_type: Optional[str] = None


class ObjectStore(ABC):
    @abstractmethod
    def put(self, name: str, data: bytes, content_type: Optional[str] = None) -> str:
        ...

    @abstractmethod
    def open(self, name: str) -> Optional[StoredObject]:
        """The stored object, or None if nothing has that name."""


class GridFSObjectStore(ObjectStore):
    def __init__(self, database: Database, bucket_name: str = "uploads"):
        self.bucket = gridfs.GridFSBucket(database, bucket_name=bucket_name)

    def put(self, name, data, content_type=None):
        metadata = {"contentType": content_type} if content_type else None
        file_id = self.bucket.upload_from_stream(name, data, metadata=metadata)
        logger.info("Stored object %s (%d bytes)", name, len(data))
        return str(file_id)

    def open(self, name):
        try:
            grid_out = self.bucket.open_download_stream_by_name(name)
        except NoFile:
            return None
        content_type = (grid_out.metadata or {}).get("contentType")
        return StoredObject(name=name, data=grid_out.read(), content_type=content_type)


object_store: Optional[ObjectStore] = GridFSObjectStore(db) if db is not None else None
