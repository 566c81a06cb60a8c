from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest

# Make the package importable when running tests from a checkout
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from trainhub.core.errors import AlreadyExistsError, NotFoundError, ValidationFailure  # noqa: E402
from trainhub.domain.models import InventoryItem, User  # noqa: E402
from trainhub.repositories.user_repository import UserRepository  # noqa: E402


@pytest.fixture()
def users_file(tmp_path):
    return tmp_path / "users.json"


@pytest.fixture()
def repo(users_file):
    return UserRepository.from_path(users_file)


def _user(email: str = "alice@x.com", name: str = "Alice") -> User:
    return User(name=name, email=email, hashed_password="digest")


def test_create_and_reload(repo, users_file):
    repo.create(_user())

    reloaded = UserRepository.from_path(users_file)
    user = reloaded.get("alice@x.com")
    assert user is not None
    assert user.name == "Alice"
    assert user.inventory == []

    on_disk = json.loads(users_file.read_text(encoding="utf-8"))
    assert set(on_disk["alice@x.com"]) == {
        "name",
        "email",
        "hashed_password",
        "inventory",
        "deleted_inventory",
        "created_at",
        "updated_at",
    }


def test_duplicate_email_is_rejected_and_original_kept(repo):
    repo.create(_user(name="Alice"))
    with pytest.raises(AlreadyExistsError):
        repo.create(_user(name="Impostor"))
    assert repo.get("alice@x.com").name == "Alice"


def test_replace_inventory_is_whole_value(repo):
    repo.create(_user())
    first = repo.replace_inventory("alice@x.com", [InventoryItem(name="drill"), InventoryItem(name="saw")])
    assert [i.name for i in first.inventory] == ["drill", "saw"]

    second = repo.replace_inventory(
        "alice@x.com",
        inventory=[InventoryItem(name="saw")],
        deleted_inventory=[InventoryItem(name="drill")],
    )
    assert [i.name for i in second.inventory] == ["saw"]
    assert [i.name for i in second.deleted_inventory] == ["drill"]
    assert second.updated_at >= first.updated_at


def test_replace_inventory_none_keeps_current(repo):
    repo.create(_user())
    repo.replace_inventory("alice@x.com", [InventoryItem(name="drill")], [InventoryItem(name="old")])
    user = repo.replace_inventory("alice@x.com", deleted_inventory=[])
    assert [i.name for i in user.inventory] == ["drill"]
    assert user.deleted_inventory == []


def test_inventory_cap_fails_before_store(repo, users_file):
    repo.create(_user())
    before = users_file.read_text(encoding="utf-8")
    too_many = [InventoryItem(name=f"item {i}") for i in range(1001)]

    with pytest.raises(ValidationFailure):
        repo.replace_inventory("alice@x.com", too_many)
    with pytest.raises(ValidationFailure):
        repo.replace_inventory("alice@x.com", deleted_inventory=too_many)

    assert users_file.read_text(encoding="utf-8") == before
    assert repo.get("alice@x.com").inventory == []


def test_inventory_cap_allows_exactly_1000(repo):
    repo.create(_user())
    user = repo.replace_inventory("alice@x.com", [InventoryItem(name=str(i)) for i in range(1000)])
    assert len(user.inventory) == 1000


def test_replace_inventory_unknown_user(repo):
    with pytest.raises(NotFoundError):
        repo.replace_inventory("ghost@x.com", [])


def test_plain_string_items_are_coerced():
    user = User.model_validate(
        {"name": "Bob", "email": "bob@x.com", "hashed_password": "h", "inventory": ["hammer", {"name": "tape", "qty": 3}]}
    )
    assert user.inventory[0].name == "hammer"
    assert user.inventory[1].name == "tape"
    # unknown keys survive
    assert user.inventory[1].model_dump()["qty"] == 3
