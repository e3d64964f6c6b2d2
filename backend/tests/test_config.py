import pytest

from edumeta.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("ENV", raising=False)
    monkeypatch.delenv("PASSWORD_HASH_ROUNDS", raising=False)
    s = Settings()
    assert s.ENV == "dev"
    assert s.PASSWORD_HASH_ROUNDS == 29000


def test_low_hash_rounds_rejected_outside_dev(monkeypatch):
    monkeypatch.setenv("ENV", "prod")
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "1000")
    with pytest.raises(RuntimeError):
        Settings()


def test_low_hash_rounds_allowed_in_dev(monkeypatch):
    monkeypatch.setenv("ENV", "dev")
    monkeypatch.setenv("PASSWORD_HASH_ROUNDS", "1000")
    assert Settings().PASSWORD_HASH_ROUNDS == 1000
