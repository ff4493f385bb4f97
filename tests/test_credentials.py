"""
Unit tests for CredentialManager, with keyring replaced by an in-memory store.
"""
import keyring
import pytest
from keyring.errors import KeyringError, PasswordDeleteError

from dataforge_base.utils.credential_manager import CredentialManager, Credentials


@pytest.fixture
def store(monkeypatch):
    """Dictionary standing in for the system keyring."""
    data = {}

    def set_password(service, key, value):
        data[(service, key)] = value

    def get_password(service, key):
        return data.get((service, key))

    def delete_password(service, key):
        if (service, key) not in data:
            raise PasswordDeleteError("not found")
        del data[(service, key)]

    monkeypatch.setattr(keyring, "set_password", set_password)
    monkeypatch.setattr(keyring, "get_password", get_password)
    monkeypatch.setattr(keyring, "delete_password", delete_password)
    return data


@pytest.fixture
def manager():
    return CredentialManager()


class TestCredentialManager:
    """Test credential storage."""

    def test_store_and_lookup(self, store, manager):
        assert manager.store("shop", "bob", "secret")
        assert store == {
            ("dataforge-base", "shop"): "bob",
            ("dataforge-base", "shop/bob"): "secret",
        }
        credentials = manager.lookup("shop")
        assert credentials == Credentials("bob", "secret")
        assert credentials.username == "bob"

    def test_lookup_missing(self, store, manager):
        assert manager.lookup("nothing") == ("", "")
        assert not manager.has_credentials("nothing")

    def test_store_replaces_previous_user(self, store, manager):
        manager.store("shop", "bob", "secret")
        manager.store("shop", "alice", "hunter2")
        assert manager.lookup("shop") == ("alice", "hunter2")
        assert ("dataforge-base", "shop/bob") not in store

    def test_custom_service_name(self, store):
        CredentialManager("other-app").store("shop", "bob", "secret")
        assert store[("other-app", "shop")] == "bob"
        assert not CredentialManager().has_credentials("shop")

    def test_forget(self, store, manager):
        manager.store("shop", "bob", "secret")
        assert manager.forget("shop")
        assert store == {}
        assert manager.lookup("shop") == ("", "")
        assert not manager.forget("shop")

    def test_forget_partial_entry(self, store, manager):
        store[("dataforge-base", "shop")] = "bob"
        assert not manager.forget("shop")

    def test_backend_failure(self, monkeypatch, manager):
        def fail(*args):
            raise KeyringError("no backend")

        monkeypatch.setattr(keyring, "get_password", fail)
        monkeypatch.setattr(keyring, "set_password", fail)
        assert manager.lookup("shop") == ("", "")
        assert not manager.store("shop", "bob", "secret")
        assert not manager.forget("shop")
