import time
import logging

from fastapi import APIRouter, File, Form, HTTPException, Response, UploadFile
from starlette.concurrency import run_in_threadpool

from dependencies import AdminDep, ObjectStoreDep

logger = logging.getLogger(__name__)

router = APIRouter(tags=["uploads"])


@router.post("", status_code=201)
async def upload_file(
    _: AdminDep,
    objects: ObjectStoreDep,
    file: UploadFile = File(...),
    path: str = Form("uploads"),
):
    # The caller writes the returned url into a document itself; a failure
    # between the two steps leaves the object orphaned.
    data = await file.read()
    filename = (file.filename or "file").replace("/", "_")
    name = f"{path.strip('/') or 'uploads'}/{int(time.time() * 1000)}_{filename}"
    await run_in_threadpool(objects.put, name, data, file.content_type)
    logger.info("Uploaded %s", name)
    return {"name": name, "url": f"/uploads/{name}"}


@router.get("/{name:path}")
def download_file(name: str, objects: ObjectStoreDep):
    obj = objects.open(name)
    if obj is None:
        raise HTTPException(status_code=404, detail="File not found")
    return Response(content=obj.data, media_type=obj.content_type or "application/octet-stream")
