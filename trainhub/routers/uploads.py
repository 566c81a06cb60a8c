from __future__ import annotations

from fastapi import APIRouter, File, Request, UploadFile

from trainhub.core.errors import ValidationFailure
from trainhub.services.upload_service import UploadService

router = APIRouter(prefix="/api", tags=["uploads"])


def _get_upload_service(request: Request) -> UploadService:
    svc = getattr(getattr(request.app, "state", None), "upload_service", None)
    if not svc:
        raise RuntimeError("UploadService not configured")
    return svc


async def _read(file_obj: UploadFile | None) -> bytes:
    if not file_obj or not file_obj.filename:
        raise ValidationFailure("no file uploaded")
    return await file_obj.read()


@router.post("/upload-video")
async def upload_video(request: Request, video: UploadFile | None = File(None)):
    data = await _read(video)
    stored = _get_upload_service(request).save_video(video.filename, video.content_type, data)
    return {"ok": True, "video_url": stored.url}


@router.post("/upload-image")
async def upload_image(request: Request, image: UploadFile | None = File(None)):
    data = await _read(image)
    stored = _get_upload_service(request).save_image(image.filename, image.content_type, data)
    return {"ok": True, "image_url": stored.url}
