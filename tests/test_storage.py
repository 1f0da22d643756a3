"""
Tests for cart storage backends
"""

import json

import pytest

from trynex.cart import CART_STORAGE_KEY, CartStore, FileStorage, MemoryStorage, RedisStorage
from trynex.cart import storage as storage_module
from trynex.db import RedisKeys


class TestMemoryStorage:

    def test_get_set_remove(self):
        storage = MemoryStorage()

        assert storage.get("k") is None
        storage.set("k", "v")
        assert storage.get("k") == "v"
        storage.remove("k")
        storage.remove("k")
        assert storage.get("k") is None


class TestFileStorage:

    def test_round_trip(self, tmp_path):
        storage = FileStorage(tmp_path / "profile")

        assert storage.get(CART_STORAGE_KEY) is None
        storage.set(CART_STORAGE_KEY, '[{"a": "ঢাকা"}]')

        assert storage.get(CART_STORAGE_KEY) == '[{"a": "ঢাকা"}]'
        assert FileStorage(tmp_path / "profile").get(CART_STORAGE_KEY) == '[{"a": "ঢাকা"}]'

    def test_no_temp_files_left_behind(self, tmp_path):
        storage = FileStorage(tmp_path)
        storage.set("cart", "[]")
        storage.set("cart", "[1]")

        assert [p.name for p in tmp_path.iterdir()] == ["cart.json"]

    def test_key_is_filename_safe(self, tmp_path):
        storage = FileStorage(tmp_path)
        storage.set("../escape/cart", "[]")

        assert storage.get("../escape/cart") == "[]"
        assert all(p.parent == tmp_path for p in tmp_path.iterdir())

    def test_remove_missing_is_noop(self, tmp_path):
        FileStorage(tmp_path).remove("nothing-here")

    @pytest.mark.asyncio
    async def test_cart_survives_restart(self, tmp_path):
        cart = CartStore(storage=FileStorage(tmp_path))
        await cart.add_item({"name": "Water Bottle", "price": 350}, {"quantity": 2})

        restarted = CartStore(storage=FileStorage(tmp_path))

        assert restarted.items == cart.items
        assert restarted.total_price() == 700


class TestRedisStorage:

    def test_uses_prefixed_key_and_ttl(self, fake_redis):
        storage = RedisStorage(redis=fake_redis, ttl=120)
        storage.set(CART_STORAGE_KEY, "[]")

        key = RedisKeys.cart_key(CART_STORAGE_KEY)
        assert fake_redis.data[key] == "[]"
        assert fake_redis.expiry[key] == 120
        assert storage.get(CART_STORAGE_KEY) == "[]"

        storage.remove(CART_STORAGE_KEY)
        assert storage.get(CART_STORAGE_KEY) is None

    def test_missing_config_raises(self, monkeypatch):
        def unavailable():
            raise ValueError("not set")

        monkeypatch.setattr(storage_module, "get_redis", unavailable)
        storage = RedisStorage()

        with pytest.raises(ValueError, match="Redis not available"):
            storage.get(CART_STORAGE_KEY)

    def test_store_with_unavailable_redis_starts_empty(self, monkeypatch):
        def unavailable():
            raise ValueError("UPSTASH_REDIS_REST_URL and UPSTASH_REDIS_REST_TOKEN must be set")

        monkeypatch.setattr(storage_module, "get_redis", unavailable)
        cart = CartStore(storage=RedisStorage())

        assert cart.items == []

    def test_corrupt_value_deleted(self, fake_redis):
        fake_redis.set(RedisKeys.cart_key(CART_STORAGE_KEY), "undefined")

        cart = CartStore(storage=RedisStorage(redis=fake_redis))

        assert cart.items == []
        assert RedisKeys.cart_key(CART_STORAGE_KEY) not in fake_redis.data

    @pytest.mark.asyncio
    async def test_cart_written_as_json_list(self, fake_redis):
        cart = CartStore(storage=RedisStorage(redis=fake_redis))
        await cart.add_item({"name": "Mug", "price": 150})

        stored = json.loads(fake_redis.data[RedisKeys.cart_key(CART_STORAGE_KEY)])
        assert [entry["name"] for entry in stored] == ["Mug"]


class TestDefaultStorage:

    @pytest.mark.parametrize("backend,expected", [
        ("memory", MemoryStorage),
        ("redis", RedisStorage),
        ("file", FileStorage),
        ("bogus", FileStorage),
    ])
    def test_backend_selection(self, monkeypatch, tmp_path, backend, expected):
        monkeypatch.setattr(storage_module, "CART_STORAGE_BACKEND", backend)
        monkeypatch.setattr(storage_module, "CART_STORAGE_DIR", str(tmp_path))

        assert isinstance(storage_module.get_default_storage(), expected)
