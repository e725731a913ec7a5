"""
FastAPI Dependencies
Document store, object store and auth dependencies
"""

from typing import Annotated

from fastapi import Depends, HTTPException

import database
import storage
from auth import require_admin
from database import DocumentStore
from storage import ObjectStore


def get_store() -> DocumentStore:
    if database.store is None:
        raise HTTPException(status_code=500, detail="Database not available")
    return database.store


def get_object_store() -> ObjectStore:
    if storage.object_store is None:
        raise HTTPException(status_code=500, detail="Object storage not available")
    return storage.object_store


StoreDep = Annotated[DocumentStore, Depends(get_store)]
ObjectStoreDep = Annotated[ObjectStore, Depends(get_object_store)]
AdminDep = Annotated[dict, Depends(require_admin)]
