from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock

import pytest

from edumeta import models, repositories, schemas, services


def _create(svc, n, **extra):
    return svc.create(schemas.CreateUser(name=f"User {n}", email=f"u{n}@example.com", password="secret123", **extra))


def test_create_hashes_password(session):
    svc = services.UserService(session)
    user = _create(svc, 1)
    assert not hasattr(user, "password")
    stored = session.get(models.User, user.id)
    assert stored.password != "secret123"
    assert services.PWD_CTX.verify("secret123", stored.password)


def test_create_then_find_by_id_round_trip(session):
    svc = services.UserService(session)
    created = _create(svc, 1, walletAddress="0x" + "A" * 40)
    found = svc.find_by_id(str(created.id))
    assert found == created


def test_update_with_empty_id_touches_no_storage(session):
    svc = services.UserService(session)
    svc.user_repo = MagicMock()
    with pytest.raises(services.BadRequestError):
        svc.update("", schemas.UpdateUser(name="Nobody"))
    assert svc.user_repo.mock_calls == []


def test_find_by_id_and_delete_require_id(session):
    svc = services.UserService(session)
    with pytest.raises(services.BadRequestError):
        svc.find_by_id("")
    with pytest.raises(services.BadRequestError):
        svc.delete(None)
    with pytest.raises(services.BadRequestError):
        svc.find_by_wallet_address("")


def test_update_rehashes_password(session):
    svc = services.UserService(session)
    user = _create(svc, 1)
    svc.update(str(user.id), schemas.UpdateUser(password="newpass99"))
    stored = session.get(models.User, user.id)
    session.refresh(stored)
    assert services.PWD_CTX.verify("newpass99", stored.password)


def test_delete_reporting_nothing_removed_is_not_found(session):
    svc = services.UserService(session)
    user = _create(svc, 1)
    svc.user_repo = MagicMock(wraps=svc.user_repo)
    svc.user_repo.delete.return_value = False
    with pytest.raises(services.NotFoundError):
        svc.delete(str(user.id))


def test_link_wallet_update_race_is_not_found(session):
    svc = services.UserService(session)
    user = _create(svc, 1)
    svc.user_repo = MagicMock(wraps=svc.user_repo)
    svc.user_repo.link_wallet.return_value = None
    with pytest.raises(services.NotFoundError):
        svc.link_wallet(str(user.id), schemas.LinkWallet(walletAddress="0x" + "1" * 40))


def test_unique_violation_at_write_time_becomes_conflict(session):
    svc = services.UserService(session)
    _create(svc, 1)
    # simulate a concurrent writer that slipped past the pre-check
    svc.user_repo = MagicMock(wraps=svc.user_repo)
    svc.user_repo.email_exists.return_value = False
    with pytest.raises(services.ConflictError):
        _create(svc, 1)


def test_find_all_paginates_newest_first(session):
    repo = repositories.UserRepository(session)
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(25):
        repo.create(models.User(
            name=f"User {i}",
            email=f"u{i}@example.com",
            password="x",
            created_at=base + timedelta(minutes=i),
        ))
    svc = services.UserService(session)
    users, total = svc.find_all(page=2, limit=10)
    assert total == 25
    # newest is user 24, so the second page holds users 14..5
    assert [u.name for u in users] == [f"User {i}" for i in range(14, 4, -1)]

    everything, total = svc.find_all()
    assert total == 25
    assert len(everything) == 25


def test_find_all_date_range_is_inclusive(session):
    repo = repositories.UserRepository(session)
    base = datetime(2024, 1, 1, tzinfo=timezone.utc)
    for i in range(5):
        repo.create(models.User(name=f"User {i}", email=f"u{i}@example.com", password="x", created_at=base + timedelta(days=i)))
    rows, total = repo.find_all(start_date=base + timedelta(days=1), end_date=base + timedelta(days=3))
    assert total == 3
    assert [r.name for r in rows] == ["User 3", "User 2", "User 1"]

    # naive bounds are read as UTC
    _, total = repo.find_all(start_date=datetime(2024, 1, 2), end_date=datetime(2024, 1, 4))
    assert total == 3

    # 01:00 at UTC+2 is 23:00 UTC the previous day
    _, total = repo.find_all(start_date=datetime(2024, 1, 2, 1, tzinfo=timezone(timedelta(hours=2))))
    assert total == 4


def test_find_all_pages_are_stable_when_timestamps_tie(session):
    repo = repositories.UserRepository(session)
    stamp = datetime(2024, 1, 1, tzinfo=timezone.utc)
    ids = {
        repo.create(models.User(name=f"User {i}", email=f"u{i}@example.com", password="x", created_at=stamp)).id
        for i in range(7)
    }
    pages = [repo.find_all(page=p, limit=3)[0] for p in (1, 2, 3)]
    seen = [row.id for page in pages for row in page]
    assert len(seen) == 7
    assert set(seen) == ids
    assert seen == sorted(ids)


def test_read_projection_excludes_password(session):
    repo = repositories.UserRepository(session)
    repo.create(models.User(name="Ada", email="ada@example.com", password="hash", wallet_address="0x" + "B" * 40))
    rows, _ = repo.find_all()
    assert "password" not in rows[0]._fields
    found = repo.find_by_wallet_address("0x" + "b" * 40)
    assert "password" not in found._fields
    assert found.wallet_address == "0x" + "b" * 40


def test_email_and_wallet_exists_honour_exclude_id(session):
    repo = repositories.UserRepository(session)
    user = repo.create(models.User(name="Ada", email="ada@example.com", password="x", wallet_address="0x" + "C" * 40))
    assert repo.email_exists("ada@example.com")
    assert not repo.email_exists("ada@example.com", user.id)
    assert repo.wallet_exists("0x" + "c" * 40)
    assert not repo.wallet_exists("0x" + "C" * 40, user.id)
