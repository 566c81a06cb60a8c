"""
Training modules keyed by generated id, with a soft-delete lifecycle:

    active --soft_delete--> trashed --restore--> active
    trashed --permanently_delete--> removed

Only the creator may move a training between these states.
"""

from __future__ import annotations

import os
from typing import Any, Optional

from trainhub.core.errors import ForbiddenError, NotFoundError
from trainhub.domain.models import Training, utcnow

from .json_storage import JsonRecordStore

_UPDATABLE_FIELDS = frozenset({"title", "description", "thumbnail_url", "blocks"})


def _newest_first(trainings: list[Training]) -> list[Training]:
    return sorted(trainings, key=lambda t: t.created_at, reverse=True)


class TrainingRepository:
    def __init__(self, store: JsonRecordStore[Training]) -> None:
        self.store = store

    @classmethod
    def from_path(cls, path: str | os.PathLike) -> "TrainingRepository":
        return cls(JsonRecordStore(path, Training, key=lambda t: t.id, label="training"))

    def get(self, training_id: str) -> Optional[Training]:
        return self.store.get(training_id)

    def create(self, training: Training) -> Training:
        self.store.insert(training)
        return training

    def list_active(self) -> list[Training]:
        return _newest_first(self.store.list_filtered(lambda t: not t.is_deleted))

    def list_trashed_for(self, email: str) -> list[Training]:
        return _newest_first(
            self.store.list_filtered(lambda t: t.is_deleted and t.created_by == email)
        )

    def update(self, training_id: str, changes: dict[str, Any], requesting_email: str | None = None) -> Training:
        """Apply field ``changes``; when ``requesting_email`` is given it must be the creator."""
        unknown = set(changes) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"cannot update training fields: {', '.join(sorted(unknown))}")

        def _apply(training: Training) -> Training:
            if requesting_email is not None and not training.owned_by(requesting_email):
                raise ForbiddenError("you can only edit your own trainings")
            data = training.model_dump()
            data.update(changes)
            data["updated_at"] = utcnow()
            return Training.model_validate(data)

        return self.store.update(training_id, _apply)

    def soft_delete(self, training_id: str, requesting_email: str) -> Training:
        def _apply(training: Training) -> None:
            self._check_owner(training, requesting_email, "delete")
            now = utcnow()
            training.deleted_at = now
            training.updated_at = now

        return self.store.update(training_id, _apply)

    def restore(self, training_id: str, requesting_email: str) -> Training:
        def _apply(training: Training) -> None:
            self._check_owner(training, requesting_email, "restore")
            training.deleted_at = None
            training.updated_at = utcnow()

        return self.store.update(training_id, _apply)

    def permanently_delete(self, training_id: str, requesting_email: str) -> None:
        training = self.store.get(training_id)
        if training is None:
            raise NotFoundError("training not found")
        self._check_owner(training, requesting_email, "delete")
        # creator is immutable, so the ownership check cannot go stale before the delete
        self.store.delete(training_id)

    @staticmethod
    def _check_owner(training: Training, requesting_email: str, action: str) -> None:
        if not training.owned_by(requesting_email):
            raise ForbiddenError(f"you can only {action} your own trainings")
