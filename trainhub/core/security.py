"""Security helpers (hashing and verification)."""

from __future__ import annotations

from argon2 import PasswordHasher, exceptions as argon_exc

_ph = PasswordHasher()


def hash_password(password: str) -> str:
    """Create an Argon2 hash; the plaintext is never stored."""
    return _ph.hash(password)


def verify_password(password: str, stored_hash: str | None) -> bool:
    if not stored_hash:
        return False
    try:
        return _ph.verify(stored_hash, password)
    except (argon_exc.VerifyMismatchError, argon_exc.VerificationError, argon_exc.InvalidHashError):
        return False


def needs_rehash(stored_hash: str) -> bool:
    """True when the hash was produced with weaker parameters than the current hasher."""
    try:
        return _ph.check_needs_rehash(stored_hash)
    except argon_exc.InvalidHashError:
        return True
