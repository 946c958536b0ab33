"""Tests for the auth session"""
import pytest

from krisha.auth.session import AuthSession
from krisha.db import MemoryKeyValueStore, StorageKeys


def test_notifies_on_change_only():
    session = AuthSession()
    seen = []
    session.subscribe(seen.append)

    session.login("T1")
    session.login("T1")
    session.refresh("T2")
    session.logout()
    session.logout()

    assert seen == ["T1", "T2", None]


def test_login_requires_token():
    session = AuthSession()

    with pytest.raises(ValueError):
        session.login("")


def test_token_persisted_and_restored():
    store = MemoryKeyValueStore()
    session = AuthSession(store)

    session.login("T1")
    assert store.get(StorageKeys.AUTH_TOKEN) == "T1"
    assert AuthSession(store).token == "T1"

    session.logout()
    assert store.get(StorageKeys.AUTH_TOKEN) is None
    assert AuthSession(store).is_authenticated is False


def test_unsubscribe():
    session = AuthSession()
    seen = []
    unsubscribe = session.subscribe(seen.append)

    unsubscribe()
    session.login("T1")

    assert seen == []
