"""Tests for durable key-value backends and settings"""
from unittest.mock import Mock

import pytest

from krisha.config import Settings, get_settings
from krisha.db import (
    FileKeyValueStore,
    MemoryKeyValueStore,
    RedisKeyValueStore,
    create_storage,
)


class TestFileKeyValueStore:
    """Tests for the JSON file backend."""

    def test_set_get_delete(self, tmp_path):
        store = FileKeyValueStore(str(tmp_path / "nested" / "storage.json"))

        assert store.get("krisha-cart") is None
        store.set("krisha-cart", "[]")
        store.set("authToken", "abc")
        assert store.get("krisha-cart") == "[]"

        store.delete("krisha-cart")
        assert store.get("krisha-cart") is None
        assert store.get("authToken") == "abc"

    def test_survives_new_instance(self, tmp_path):
        path = str(tmp_path / "storage.json")
        FileKeyValueStore(path).set("k", "v")

        assert FileKeyValueStore(path).get("k") == "v"

    @pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
    def test_unreadable_file_is_empty(self, tmp_path, content):
        path = tmp_path / "storage.json"
        path.write_text(content, encoding="utf-8")
        store = FileKeyValueStore(str(path))

        assert store.get("k") is None
        store.set("k", "v")
        assert store.get("k") == "v"

    def test_no_temp_files_left(self, tmp_path):
        store = FileKeyValueStore(str(tmp_path / "storage.json"))
        store.set("k", "v")

        assert [p.name for p in tmp_path.iterdir()] == ["storage.json"]


class TestRedisKeyValueStore:
    """Tests for the Upstash backend against a mocked client."""

    def test_delegates_with_prefix(self):
        client = Mock()
        client.get.return_value = "[]"
        store = RedisKeyValueStore(client, prefix="ctx-1:")

        assert store.get("krisha-cart") == "[]"
        store.set("krisha-cart", "[1]")
        store.delete("krisha-cart")

        client.get.assert_called_once_with("ctx-1:krisha-cart")
        client.set.assert_called_once_with("ctx-1:krisha-cart", "[1]")
        client.delete.assert_called_once_with("ctx-1:krisha-cart")

    def test_missing_key(self):
        client = Mock()
        client.get.return_value = None

        assert RedisKeyValueStore(client).get("k") is None

    def test_from_settings_requires_credentials(self):
        with pytest.raises(ValueError):
            RedisKeyValueStore.from_settings(Settings(storage_backend="redis"))


class TestCreateStorage:
    """Backend selection."""

    def test_memory(self):
        assert isinstance(create_storage(Settings(storage_backend="memory")), MemoryKeyValueStore)

    def test_file(self, tmp_path):
        store = create_storage(Settings(storage_backend="file", storage_path=str(tmp_path / "s.json")))

        assert isinstance(store, FileKeyValueStore)

    def test_unknown(self):
        with pytest.raises(ValueError):
            create_storage(Settings(storage_backend="sqlite"))


class TestSettings:
    """Environment configuration."""

    def test_from_environment(self, monkeypatch):
        monkeypatch.setenv("KRISHA_API_URL", "https://shop.example.com/")
        monkeypatch.setenv("KRISHA_STORAGE_BACKEND", "REDIS")
        monkeypatch.setenv("KRISHA_HTTP_TIMEOUT", "2.5")
        monkeypatch.setenv("UPSTASH_REDIS_REST_URL", "https://redis.test")
        monkeypatch.setenv("UPSTASH_REDIS_REST_TOKEN", "secret")

        settings = get_settings()

        assert settings.api_url == "https://shop.example.com"
        assert settings.storage_backend == "redis"
        assert settings.http_timeout == 2.5
        assert settings.redis_token == "secret"

    def test_invalid_timeout(self, monkeypatch):
        monkeypatch.setenv("KRISHA_HTTP_TIMEOUT", "soon")

        with pytest.raises(ValueError):
            get_settings()
