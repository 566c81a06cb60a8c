"""
Record types persisted by the JSON stores.

Field names are the on-disk format: renaming one is a breaking change to
``users.json`` / ``trainings.json`` (there is no schema version).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_id() -> str:
    return str(uuid.uuid4())


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps without an offset are taken as UTC so they compare with ours."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class InventoryItem(BaseModel):
    """One inventory entry. Extra keys sent by the client are kept as-is."""

    model_config = ConfigDict(extra="allow")

    name: str = ""
    upc: Optional[str] = None
    description: Optional[str] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    category: Optional[str] = None
    quantity: int = 1
    added_at: Optional[datetime] = None

    @field_validator("added_at")
    @classmethod
    def _utc_added_at(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @model_validator(mode="before")
    @classmethod
    def _coerce_plain_string(cls, value: Any) -> Any:
        # the web client stores bare item names
        if isinstance(value, str):
            return {"name": value}
        return value


class User(BaseModel):
    name: str
    email: str
    hashed_password: str
    inventory: list[InventoryItem] = Field(default_factory=list)
    deleted_inventory: list[InventoryItem] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("created_at", "updated_at")
    @classmethod
    def _utc_timestamps(cls, value: datetime) -> datetime:
        return as_utc(value)

    def public_view(self, *, include_deleted: bool = True) -> dict:
        """Account data safe to send to clients (never the password hash)."""
        data = {
            "name": self.name,
            "email": self.email,
            "inventory": [item.model_dump(mode="json", exclude_none=True) for item in self.inventory],
        }
        if include_deleted:
            data["deleted_inventory"] = [
                item.model_dump(mode="json", exclude_none=True) for item in self.deleted_inventory
            ]
        return data


class BlockType(str, Enum):
    TITLE = "title"
    TEXT = "text"
    VIDEO = "video"
    IMAGE = "image"
    CODE = "code"
    LIST = "list"
    QUOTE = "quote"
    DIVIDER = "divider"


class ContentBlock(BaseModel):
    id: str = Field(default="", validate_default=True)
    type: BlockType
    order: int = 0
    content: dict[str, Any] = Field(default_factory=dict)

    @field_validator("id")
    @classmethod
    def _ensure_id(cls, value: str) -> str:
        return value.strip() or uuid.uuid4().hex

    @field_validator("content", mode="before")
    @classmethod
    def _null_content(cls, value: Any) -> Any:
        return {} if value is None else value


class Training(BaseModel):
    id: str = Field(default_factory=new_id)
    title: str
    description: str = ""
    thumbnail_url: Optional[str] = None
    blocks: list[ContentBlock] = Field(default_factory=list)
    created_by: str
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)
    deleted_at: Optional[datetime] = None

    @field_validator("created_at", "updated_at", "deleted_at")
    @classmethod
    def _utc_timestamps(cls, value: Optional[datetime]) -> Optional[datetime]:
        return as_utc(value)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def owned_by(self, email: str | None) -> bool:
        return bool(email) and self.created_by == email
