from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Request
from pydantic import BaseModel

from trainhub.domain.models import InventoryItem
from trainhub.services.auth_service import AuthService

router = APIRouter(prefix="/api", tags=["users"])


class SignupRequest(BaseModel):
    name: str = ""
    email: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    email: str = ""
    password: str = ""


class UserUpdateRequest(BaseModel):
    email: str = ""
    inventory: Optional[list[InventoryItem]] = None
    deleted_inventory: Optional[list[InventoryItem]] = None


def _get_auth_service(request: Request) -> AuthService:
    svc = getattr(getattr(request.app, "state", None), "auth_service", None)
    if not svc:
        raise RuntimeError("AuthService not configured")
    return svc


@router.post("/signup")
def signup(payload: SignupRequest, request: Request):
    user = _get_auth_service(request).signup(payload.name, payload.email, payload.password)
    return {"ok": True, "user": {"name": user.name, "email": user.email}}


@router.post("/login")
def login(payload: LoginRequest, request: Request):
    user = _get_auth_service(request).login(payload.email, payload.password)
    return {"ok": True, "user": {"name": user.name, "email": user.email}}


@router.get("/user")
def get_user(request: Request, email: str = ""):
    user = _get_auth_service(request).get_user(email)
    return {"ok": True, "user": user.public_view()}


@router.post("/user")
def update_user(payload: UserUpdateRequest, request: Request):
    _get_auth_service(request).update_inventory(
        payload.email,
        inventory=payload.inventory,
        deleted_inventory=payload.deleted_inventory,
    )
    return {"ok": True}


@router.get("/inventories")
def list_inventories(request: Request):
    return {"ok": True, "inventories": _get_auth_service(request).list_inventories()}
