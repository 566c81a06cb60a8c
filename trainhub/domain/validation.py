"""Input validation applied at the handler boundary, before any store call."""
from __future__ import annotations

from typing import Sequence

from trainhub.core.errors import ValidationFailure

MIN_NAME_LENGTH = 2
MAX_NAME_LENGTH = 100
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 128
MAX_TITLE_LENGTH = 200
MAX_INVENTORY_ITEMS = 1000

_EMAIL_EXTRA_CHARS = frozenset(".@-_+")


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def is_valid_email(email: str | None) -> bool:
    """Return True for a plausible address: one '@', dotted domain, restricted charset."""
    if not email or not 3 <= len(email) <= 254:
        return False
    parts = email.split("@")
    if len(parts) != 2:
        return False
    local, domain = parts
    if not 1 <= len(local) <= 64 or not 1 <= len(domain) <= 253:
        return False
    if "." not in domain:
        return False
    return all(ch.isalnum() or ch in _EMAIL_EXTRA_CHARS for ch in email)


def validate_signup(name: str, email: str, password: str) -> None:
    if not name:
        raise ValidationFailure("name is required", field="name")
    if not MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH:
        raise ValidationFailure(
            f"name must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters", field="name"
        )
    if not email:
        raise ValidationFailure("email is required", field="email")
    if not is_valid_email(email):
        raise ValidationFailure("invalid email format", field="email")
    if not password:
        raise ValidationFailure("password is required", field="password")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailure(
            f"password must be at least {MIN_PASSWORD_LENGTH} characters", field="password"
        )
    if len(password) > MAX_PASSWORD_LENGTH:
        raise ValidationFailure(
            f"password must be less than {MAX_PASSWORD_LENGTH} characters", field="password"
        )


def validate_inventory_size(items: Sequence | None, *, label: str = "inventory") -> None:
    if items is not None and len(items) > MAX_INVENTORY_ITEMS:
        raise ValidationFailure(f"{label} too large (max {MAX_INVENTORY_ITEMS} items)", field=label)


def validate_title(title: str) -> None:
    if not title:
        raise ValidationFailure("title is required", field="title")
    if len(title) > MAX_TITLE_LENGTH:
        raise ValidationFailure(f"title too long (max {MAX_TITLE_LENGTH} characters)", field="title")
