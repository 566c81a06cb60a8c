"""Training module use cases: authoring, listing and the recycle bin."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Sequence

from pydantic import ValidationError

from trainhub.core.errors import NotFoundError, ValidationFailure
from trainhub.core.logging import get_logger
from trainhub.domain.models import ContentBlock, Training
from trainhub.domain.validation import normalize_email, validate_title
from trainhub.repositories.training_repository import TrainingRepository

logger = get_logger(__name__)


def _blocks(values: Optional[Sequence[Any]]) -> Optional[list[ContentBlock]]:
    if values is None:
        return None
    try:
        return [v if isinstance(v, ContentBlock) else ContentBlock.model_validate(v) for v in values]
    except ValidationError as exc:
        raise ValidationFailure("invalid content block", field="blocks") from exc


def _require(value: str, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValidationFailure(message)
    return value


@dataclass
class TrainingService:
    trainings: TrainingRepository

    def create(
        self,
        creator_email: str,
        title: str,
        description: str = "",
        thumbnail_url: Optional[str] = None,
        blocks: Optional[Sequence[Any]] = None,
    ) -> Training:
        creator = normalize_email(_require(creator_email, "email required"))
        title = (title or "").strip()
        validate_title(title)
        training = Training(
            title=title,
            description=(description or "").strip(),
            thumbnail_url=thumbnail_url or None,
            blocks=_blocks(blocks) or [],
            created_by=creator,
        )
        self.trainings.create(training)
        logger.info("training created", training_id=training.id, created_by=creator)
        return training

    def get(self, training_id: str) -> Training:
        training_id = _require(training_id, "id required")
        training = self.trainings.get(training_id)
        if training is None:
            raise NotFoundError("training not found")
        return training

    def list_active(self) -> list[Training]:
        return self.trainings.list_active()

    def list_deleted(self, email: str) -> list[Training]:
        return self.trainings.list_trashed_for(normalize_email(_require(email, "email required")))

    def update(
        self,
        training_id: str,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
        thumbnail_url: Optional[str] = None,
        blocks: Optional[Sequence[Any]] = None,
        requesting_email: Optional[str] = None,
    ) -> Training:
        """Partial update: empty strings and ``None`` keep the current value."""
        training_id = _require(training_id, "id required")
        changes: dict[str, Any] = {}
        title = (title or "").strip()
        if title:
            validate_title(title)
            changes["title"] = title
        description = (description or "").strip()
        if description:
            changes["description"] = description
        if thumbnail_url:
            changes["thumbnail_url"] = thumbnail_url
        parsed_blocks = _blocks(blocks)
        if parsed_blocks is not None:
            changes["blocks"] = parsed_blocks
        requester = normalize_email(requesting_email) or None
        return self.trainings.update(training_id, changes, requesting_email=requester)

    def soft_delete(self, training_id: str, email: str) -> Training:
        training = self.trainings.soft_delete(
            _require(training_id, "id required"), normalize_email(_require(email, "email required"))
        )
        logger.info("training moved to recycle bin", training_id=training.id)
        return training

    def restore(self, training_id: str, email: str) -> Training:
        training = self.trainings.restore(
            _require(training_id, "id required"), normalize_email(_require(email, "email required"))
        )
        logger.info("training restored", training_id=training.id)
        return training

    def permanently_delete(self, training_id: str, email: str) -> None:
        training_id = _require(training_id, "id required")
        self.trainings.permanently_delete(training_id, normalize_email(_require(email, "email required")))
        logger.info("training permanently deleted", training_id=training_id)
