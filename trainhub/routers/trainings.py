from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from trainhub.domain.models import ContentBlock, Training
from trainhub.services.training_service import TrainingService

router = APIRouter(prefix="/api", tags=["trainings"])


class TrainingRequest(BaseModel):
    title: str = ""
    description: str = ""
    thumbnail_url: Optional[str] = None
    blocks: Optional[list[ContentBlock]] = None


class TrainingUpdateRequest(TrainingRequest):
    id: str = ""
    email: Optional[str] = None


class OwnerActionRequest(BaseModel):
    id: str = ""
    email: str = ""


def _get_training_service(request: Request) -> TrainingService:
    svc = getattr(getattr(request.app, "state", None), "training_service", None)
    if not svc:
        raise RuntimeError("TrainingService not configured")
    return svc


def _dump(training: Training) -> dict[str, Any]:
    return training.model_dump(mode="json")


@router.get("/trainings")
def list_trainings(request: Request):
    trainings = _get_training_service(request).list_active()
    return {"ok": True, "trainings": [_dump(t) for t in trainings]}


@router.post("/trainings")
def create_training(payload: TrainingRequest, request: Request, email: str = ""):
    training = _get_training_service(request).create(
        email,
        payload.title,
        description=payload.description,
        thumbnail_url=payload.thumbnail_url,
        blocks=payload.blocks,
    )
    return {"ok": True, "training": _dump(training)}


@router.get("/trainings/deleted")
def list_deleted_trainings(request: Request, email: str = ""):
    trainings = _get_training_service(request).list_deleted(email)
    return {"ok": True, "trainings": [_dump(t) for t in trainings]}


@router.get("/training")
def get_training(request: Request, id: str = ""):
    return {"ok": True, "training": _dump(_get_training_service(request).get(id))}


@router.post("/training/update")
def update_training(payload: TrainingUpdateRequest, request: Request):
    training = _get_training_service(request).update(
        payload.id,
        title=payload.title,
        description=payload.description,
        thumbnail_url=payload.thumbnail_url,
        blocks=payload.blocks,
        requesting_email=payload.email,
    )
    return {"ok": True, "training": _dump(training)}


@router.post("/training/delete")
def delete_training(payload: OwnerActionRequest, request: Request):
    _get_training_service(request).soft_delete(payload.id, payload.email)
    return {"ok": True}


@router.post("/training/restore")
def restore_training(payload: OwnerActionRequest, request: Request):
    _get_training_service(request).restore(payload.id, payload.email)
    return {"ok": True}


@router.post("/training/permanent-delete")
def permanently_delete_training(payload: OwnerActionRequest, request: Request):
    _get_training_service(request).permanently_delete(payload.id, payload.email)
    return {"ok": True}
