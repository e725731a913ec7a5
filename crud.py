"""
Resource router factory

Every content collection exposes the same list / get / create / update /
delete routes. A ResourceConfig says which of them exist for a collection and
which sit behind the auth gate; build_resource_router turns it into an
APIRouter.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional, Type

from fastapi import APIRouter, BackgroundTasks, Body, Depends, HTTPException, Query
from pydantic import BaseModel

from auth import require_admin
from database import create_document, get_documents
from dependencies import StoreDep

logger = logging.getLogger(__name__)


@dataclass
class ResourceConfig:
    collection: str
    label: str  # "Blog", used in messages
    create_model: Type[BaseModel]
    update_model: Optional[Type[BaseModel]] = None  # None: no PUT route
    public_list: bool = True
    public_create: bool = False
    allow_get: bool = False
    allow_delete: bool = True
    filter_field: Optional[str] = None  # single equality filter on List
    prepare: Optional[Callable[[dict], dict]] = None  # adjusts fields before insert
    on_created: Optional[Callable] = None  # background hook(store, doc_id)


def _gate(public: bool):
    return [] if public else [Depends(require_admin)]


def build_resource_router(config: ResourceConfig) -> APIRouter:
    router = APIRouter(tags=[config.collection])
    create_model = config.create_model
    update_model = config.update_model

    if config.filter_field:
        field = config.filter_field

        @router.get("", dependencies=_gate(config.public_list))
        def list_filtered(store: StoreDep, value: Optional[str] = Query(None, alias=field)):
            filt = {}
            # "All" is what the gallery sends for its unfiltered tab
            if value and value != "All":
                filt = {field: value}
            return get_documents(store, config.collection, filt)
    else:
        @router.get("", dependencies=_gate(config.public_list))
        def list_items(store: StoreDep):
            return get_documents(store, config.collection)

    if config.allow_get:
        @router.get("/{doc_id}")
        def get_item(doc_id: str, store: StoreDep):
            doc = store.get(config.collection, doc_id)
            if not doc:
                raise HTTPException(status_code=404, detail=f"{config.label} not found")
            return doc

    @router.post("", status_code=201, dependencies=_gate(config.public_create))
    def create_item(store: StoreDep, background_tasks: BackgroundTasks, payload: create_model = Body(...)):
        data = payload.model_dump(by_alias=True, exclude_none=True)
        if config.prepare:
            data = config.prepare(data)
        created = create_document(store, config.collection, data)
        if config.on_created:
            background_tasks.add_task(config.on_created, store, created["id"])
        return created

    if update_model is not None:
        @router.put("/{doc_id}", dependencies=_gate(False))
        def update_item(doc_id: str, store: StoreDep, payload: update_model = Body(...)):
            data = payload.model_dump(by_alias=True, exclude_unset=True)
            if data and not store.update(config.collection, doc_id, data):
                raise HTTPException(status_code=404, detail=f"{config.label} not found")
            if not data and not store.get(config.collection, doc_id):
                raise HTTPException(status_code=404, detail=f"{config.label} not found")
            logger.info("Updated %s/%s fields=%s", config.collection, doc_id, sorted(data))
            return {"id": doc_id, **data}

    if config.allow_delete:
        @router.delete("/{doc_id}", dependencies=_gate(False))
        def delete_item(doc_id: str, store: StoreDep):
            # deleting a missing document is a no-op
            deleted = store.delete(config.collection, doc_id)
            logger.info("Deleted %s/%s (existed=%s)", config.collection, doc_id, deleted)
            return {"message": f"{config.label} deleted successfully"}

    return router
