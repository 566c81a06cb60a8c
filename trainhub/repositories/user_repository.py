"""User accounts keyed by normalized email."""
from __future__ import annotations

import os
from typing import Optional, Sequence

from trainhub.core.errors import AlreadyExistsError
from trainhub.domain.models import InventoryItem, User, utcnow
from trainhub.domain.validation import validate_inventory_size

from .json_storage import JsonRecordStore


class UserRepository:
    """Accounts are created once and never removed; only inventories change."""

    def __init__(self, store: JsonRecordStore[User]) -> None:
        self.store = store

    @classmethod
    def from_path(cls, path: str | os.PathLike) -> "UserRepository":
        return cls(JsonRecordStore(path, User, key=lambda u: u.email, label="user"))

    def get(self, email: str) -> Optional[User]:
        return self.store.get(email)

    def exists(self, email: str) -> bool:
        return email in self.store

    def create(self, user: User) -> User:
        try:
            self.store.insert(user)
        except AlreadyExistsError:
            raise AlreadyExistsError("account already exists")
        return user

    def list_all(self) -> list[User]:
        return self.store.list_all()

    def replace_inventory(
        self,
        email: str,
        inventory: Sequence[InventoryItem] | None = None,
        deleted_inventory: Sequence[InventoryItem] | None = None,
    ) -> User:
        """Swap in whole new inventory sequences; ``None`` keeps the current one."""
        validate_inventory_size(inventory, label="inventory")
        validate_inventory_size(deleted_inventory, label="deleted inventory")

        def _apply(user: User) -> None:
            if inventory is not None:
                user.inventory = list(inventory)
            if deleted_inventory is not None:
                user.deleted_inventory = list(deleted_inventory)
            user.updated_at = utcnow()

        return self.store.update(email, _apply)

    def update_password_hash(self, email: str, hashed_password: str) -> User:
        def _apply(user: User) -> None:
            user.hashed_password = hashed_password
            user.updated_at = utcnow()

        return self.store.update(email, _apply)
