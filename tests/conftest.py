"""Pytest configuration and fixtures"""
import itertools
import os

import pytest

# Set test environment variables before trynex modules read them
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("UPSTASH_REDIS_REST_URL", "")
os.environ.setdefault("UPSTASH_REDIS_REST_TOKEN", "")
os.environ.setdefault("TRYNEX_API_URL", "https://shop.test")

from trynex.cart import CartStore, MemoryStorage  # noqa: E402


class FakeRedis:
    """Just enough of upstash_redis.Redis for the cart."""

    def __init__(self):
        self.data = {}
        self.expiry = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        self.expiry[key] = ex
        return True

    def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
        return removed


@pytest.fixture
def memory_storage():
    """Empty in-memory storage"""
    return MemoryStorage()


@pytest.fixture
def id_factory():
    """Predictable line ids: line-1, line-2, ..."""
    counter = itertools.count(1)
    return lambda: f"line-{next(counter)}"


@pytest.fixture
def store(memory_storage, id_factory):
    """Fresh cart store over in-memory storage"""
    return CartStore(storage=memory_storage, id_factory=id_factory)


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def sample_product():
    """Sample catalog product as the storefront API returns it"""
    return {
        "id": "prod-mug-01",
        "name": "কাস্টম মগ",
        "price": "550.00",
        "image_url": "https://cdn.test/mug.jpg",
        "category": "mugs",
        "stock": 12,
    }


@pytest.fixture
def checkout_details():
    """Checkout form as a shopper fills it in"""
    return {
        "customer_name": "রহিম উদ্দিন",
        "phone": "+8801712345678",
        "district": "ঢাকা",
        "thana": "ধানমন্ডি",
        "address": "House 12, Road 5",
        "payment_method": "bkash",
    }


# PNG signature plus a little padding; never decoded as an image
PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 24


@pytest.fixture
def png_bytes():
    return PNG_BYTES
