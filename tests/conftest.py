# tests/conftest.py

"""Shared fixtures: in-memory stand-ins for Shopify and the users table."""

import asyncio
import os
import time

import pytest

# Settings are read at import time by backend.app.main
os.environ.setdefault("SHOP_URL", "test-shop.myshopify.com")
os.environ.setdefault("SHOPIFY_ACCESS_TOKEN", "shpat_test")

from services.favorites_repo import StoreError  # noqa: E402
from services.landing_resolver import UserLandingResolver  # noqa: E402
from services.shopify_client import ShopifyError  # noqa: E402


class FakeShopify:
    """Canned Admin API answers, defaulting to the Ana/Mug example."""

    def __init__(self):
        self.customer = {"id": 42, "firstName": "Ana", "image": {"src": "https://x/a.png"}}
        self.product = {
            "id": 99,
            "title": "Mug",
            "description": "Ceramic",
            "onlineStoreUrl": "https://shop/mug",
        }
        self.image = None
        self.customer_error = None
        self.product_error = None
        self.image_error = None
        self.customer_delay = 0.0
        self.product_delay = 0.0
        self.image_delay = 0.0
        self.shop = {"name": "Test Shop", "myshopifyDomain": "test-shop.myshopify.com"}
        self.calls = []

    async def get_customer(self, customer_id):
        self.calls.append(("customer", customer_id))
        await asyncio.sleep(self.customer_delay)
        if self.customer_error:
            raise self.customer_error
        return self.customer

    async def get_product(self, product_id):
        self.calls.append(("product", product_id))
        await asyncio.sleep(self.product_delay)
        if self.product_error:
            raise self.product_error
        return self.product

    async def get_product_image(self, product_id):
        self.calls.append(("image", product_id))
        await asyncio.sleep(self.image_delay)
        if self.image_error:
            raise self.image_error
        return self.image

    async def get_shop(self):
        if self.customer_error:
            raise self.customer_error
        return self.shop

    def called(self, kind):
        return [c for c in self.calls if c[0] == kind]


class FakeFavorites:
    def __init__(self):
        self.rows = {"42": "99"}
        self.error = None
        self.delay = 0.0
        self.calls = []

    def get_favorite_product_id(self, shopify_customer_id):
        self.calls.append(shopify_customer_id)
        if self.delay:
            time.sleep(self.delay)
        if self.error:
            raise self.error
        return self.rows.get(shopify_customer_id)


@pytest.fixture
def shopify() -> FakeShopify:
    return FakeShopify()


@pytest.fixture
def favorites() -> FakeFavorites:
    return FakeFavorites()


@pytest.fixture
def resolver(shopify, favorites) -> UserLandingResolver:
    return UserLandingResolver(shopify, favorites, remote_timeout=1.0, store_timeout=1.0)


@pytest.fixture
def shopify_error() -> ShopifyError:
    return ShopifyError("boom")


@pytest.fixture
def store_error() -> StoreError:
    return StoreError("connection reset")
