"""
Persistence adapters.

``JsonRecordStore`` is the generic file-backed store; the repositories wrap one
store each and add the record-specific rules (unique email, ownership and the
soft-delete lifecycle). Services depend on the repositories, never on the files.
"""

from .json_storage import JsonRecordStore
from .training_repository import TrainingRepository
from .user_repository import UserRepository

__all__ = ["JsonRecordStore", "TrainingRepository", "UserRepository"]
