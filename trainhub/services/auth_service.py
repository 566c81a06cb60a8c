"""
Authentication and account related use cases.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from trainhub.core.errors import AlreadyExistsError, NotFoundError, TrainHubError, ValidationFailure
from trainhub.core.logging import get_logger
from trainhub.core.security import hash_password, needs_rehash, verify_password
from trainhub.domain.models import InventoryItem, User
from trainhub.domain.validation import normalize_email, validate_inventory_size, validate_signup
from trainhub.repositories.user_repository import UserRepository

logger = get_logger(__name__)


class InvalidCredentialsError(TrainHubError):
    status_code = 401
    code = "invalid_credentials"


@dataclass
class AuthService:
    """Handles signup, login and the inventory stored on each account."""

    users: UserRepository

    # -------------------------------------- signup --------------------------------------
    def signup(self, name: str, email: str, password: str) -> User:
        name = (name or "").strip()
        email = normalize_email(email)
        password = (password or "").strip()
        validate_signup(name, email, password)
        if self.users.exists(email):
            raise AlreadyExistsError("account already exists")
        user = User(name=name, email=email, hashed_password=hash_password(password))
        self.users.create(user)
        logger.info("account created", email=email)
        return user

    # -------------------------------------- login --------------------------------------
    def login(self, email: str, password: str) -> User:
        email = normalize_email(email)
        password = (password or "").strip()
        if not email or not password:
            raise ValidationFailure("email and password required")
        user = self.users.get(email)
        if not user or not verify_password(password, user.hashed_password):
            raise InvalidCredentialsError("invalid credentials")
        if needs_rehash(user.hashed_password):
            user = self.users.update_password_hash(email, hash_password(password))
        return user

    # -------------------------------------- account --------------------------------------
    def get_user(self, email: str) -> User:
        email = normalize_email(email)
        if not email:
            raise ValidationFailure("email required")
        user = self.users.get(email)
        if not user:
            raise NotFoundError("user not found")
        return user

    def update_inventory(
        self,
        email: str,
        inventory: Optional[Sequence[Any]] = None,
        deleted_inventory: Optional[Sequence[Any]] = None,
    ) -> User:
        email = normalize_email(email)
        if not email:
            raise ValidationFailure("email required")
        # cap is checked before the items are even parsed
        validate_inventory_size(inventory, label="inventory")
        validate_inventory_size(deleted_inventory, label="deleted inventory")
        try:
            return self.users.replace_inventory(
                email,
                inventory=_items(inventory),
                deleted_inventory=_items(deleted_inventory),
            )
        except NotFoundError:
            raise NotFoundError("user not found")

    def list_inventories(self) -> list[dict]:
        return [
            user.public_view(include_deleted=False)
            for user in sorted(self.users.list_all(), key=lambda u: u.email)
        ]


def _items(values: Optional[Sequence[Any]]) -> Optional[list[InventoryItem]]:
    if values is None:
        return None
    return [v if isinstance(v, InventoryItem) else InventoryItem.model_validate(v) for v in values]
