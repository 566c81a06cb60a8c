from __future__ import annotations

import json
import sys
from datetime import timedelta
from pathlib import Path

import pytest

# Make the package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from trainhub.core.errors import ForbiddenError, NotFoundError  # noqa: E402
from trainhub.domain.models import BlockType, ContentBlock, Training, utcnow  # noqa: E402
from trainhub.repositories.training_repository import TrainingRepository  # noqa: E402

ALICE = "alice@x.com"
BOB = "bob@x.com"


@pytest.fixture()
def trainings_file(tmp_path):
    return tmp_path / "trainings.json"


@pytest.fixture()
def repo(trainings_file):
    return TrainingRepository.from_path(trainings_file)


def _training(title: str = "Forklift basics", creator: str = ALICE, **kwargs) -> Training:
    return Training(title=title, created_by=creator, **kwargs)


def _ids(trainings):
    return {t.id for t in trainings}


def test_soft_delete_lifecycle(repo):
    training = repo.create(_training())
    assert _ids(repo.list_active()) == {training.id}

    trashed = repo.soft_delete(training.id, ALICE)
    assert trashed.deleted_at is not None
    assert _ids(repo.list_active()) == set()
    assert _ids(repo.list_trashed_for(ALICE)) == {training.id}
    assert repo.list_trashed_for(BOB) == []

    restored = repo.restore(training.id, ALICE)
    assert restored.deleted_at is None
    assert _ids(repo.list_active()) == {training.id}
    assert repo.list_trashed_for(ALICE) == []

    repo.permanently_delete(training.id, ALICE)
    assert repo.get(training.id) is None


def test_other_user_cannot_change_deletion_state(repo):
    training = repo.create(_training())

    with pytest.raises(ForbiddenError):
        repo.soft_delete(training.id, BOB)
    assert repo.get(training.id) == training

    repo.soft_delete(training.id, ALICE)
    snapshot = repo.get(training.id)
    with pytest.raises(ForbiddenError):
        repo.restore(training.id, BOB)
    with pytest.raises(ForbiddenError):
        repo.permanently_delete(training.id, BOB)
    assert repo.get(training.id) == snapshot


def test_unknown_id_is_not_found(repo):
    for op in (repo.soft_delete, repo.restore, repo.permanently_delete):
        with pytest.raises(NotFoundError):
            op("missing", ALICE)


def test_mutations_refresh_updated_at(repo):
    training = repo.create(_training(updated_at=utcnow() - timedelta(days=1)))
    trashed = repo.soft_delete(training.id, ALICE)
    assert trashed.updated_at > training.updated_at
    assert trashed.updated_at == trashed.deleted_at
    restored = repo.restore(training.id, ALICE)
    assert restored.updated_at >= trashed.updated_at


def test_trash_persists_across_reload(repo, trainings_file):
    training = repo.create(_training())
    repo.soft_delete(training.id, ALICE)

    reloaded = TrainingRepository.from_path(trainings_file)
    assert reloaded.list_active() == []
    assert _ids(reloaded.list_trashed_for(ALICE)) == {training.id}


def test_listings_are_newest_first(repo):
    now = utcnow()
    old = repo.create(_training("old", created_at=now - timedelta(hours=2)))
    new = repo.create(_training("new", created_at=now))
    mid = repo.create(_training("mid", created_at=now - timedelta(hours=1)))
    assert [t.id for t in repo.list_active()] == [new.id, mid.id, old.id]


def test_timestamps_without_offset_are_read_as_utc(trainings_file):
    trainings_file.write_text(
        json.dumps(
            {
                "naive": {"id": "naive", "title": "Legacy", "created_by": ALICE, "created_at": "2024-01-01T00:00:00"},
                "aware": {"id": "aware", "title": "Recent", "created_by": ALICE, "created_at": "2024-01-02T00:00:00Z"},
            }
        ),
        encoding="utf-8",
    )
    repo = TrainingRepository.from_path(trainings_file)

    assert [t.id for t in repo.list_active()] == ["aware", "naive"]
    assert repo.get("naive").created_at.utcoffset() == timedelta(0)

    repo.soft_delete("naive", ALICE)
    assert _ids(repo.list_trashed_for(ALICE)) == {"naive"}


def test_update_changes_fields_and_checks_owner(repo):
    training = repo.create(_training())
    blocks = [ContentBlock(type=BlockType.TEXT, order=1, content={"text": "hi"})]

    updated = repo.update(training.id, {"title": "Forklift advanced", "blocks": blocks})
    assert updated.title == "Forklift advanced"
    assert updated.blocks[0].type is BlockType.TEXT
    assert updated.created_by == ALICE
    assert updated.id == training.id

    with pytest.raises(ForbiddenError):
        repo.update(training.id, {"title": "hijacked"}, requesting_email=BOB)
    assert repo.get(training.id).title == "Forklift advanced"


def test_update_rejects_immutable_fields(repo):
    training = repo.create(_training())
    with pytest.raises(ValueError):
        repo.update(training.id, {"created_by": BOB})
