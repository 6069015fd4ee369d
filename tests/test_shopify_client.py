# tests/test_shopify_client.py

"""Tests for the Admin GraphQL client against a mocked transport."""

import asyncio
import json

import httpx
import pytest

from services.shopify_client import ShopifyClient, ShopifyError, to_gid


def _client(handler) -> tuple[ShopifyClient, list[dict]]:
    sent: list[dict] = []

    def record(request: httpx.Request) -> httpx.Response:
        sent.append({
            "url": str(request.url),
            "token": request.headers.get("X-Shopify-Access-Token"),
            "body": json.loads(request.content),
        })
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(record))
    return ShopifyClient("test-shop.myshopify.com", "shpat_test", http_client=http), sent


def _data(payload: dict):
    return lambda request: httpx.Response(200, json={"data": payload})


def test_to_gid():
    assert to_gid("Customer", 42) == "gid://shopify/Customer/42"
    assert to_gid("Product", " 99 ") == "gid://shopify/Product/99"
    assert to_gid("Product", "gid://shopify/Product/99") == "gid://shopify/Product/99"


def test_missing_config_rejected():
    with pytest.raises(ValueError):
        ShopifyClient("", "token")


def test_get_customer_sends_gid_variable():
    customer = {"id": "gid://shopify/Customer/42", "firstName": "Ana", "image": {"src": "https://x/a.png"}}
    client, sent = _client(_data({"customer": customer}))

    assert asyncio.run(client.get_customer("42")) == customer
    assert sent[0]["url"] == "https://test-shop.myshopify.com/admin/api/2025-01/graphql.json"
    assert sent[0]["token"] == "shpat_test"
    assert sent[0]["body"]["variables"] == {"id": "gid://shopify/Customer/42"}
    assert "customer(id: $id)" in sent[0]["body"]["query"]


def test_get_customer_not_found():
    client, _ = _client(_data({"customer": None}))

    assert asyncio.run(client.get_customer("42")) is None


def test_get_product():
    product = {"id": "gid://shopify/Product/99", "title": "Mug", "description": "Ceramic", "onlineStoreUrl": None}
    client, sent = _client(_data({"product": product}))

    assert asyncio.run(client.get_product("99")) == product
    assert sent[0]["body"]["variables"] == {"id": "gid://shopify/Product/99"}


def test_get_product_image_is_flattened():
    media = {"nodes": [{
        "id": "gid://shopify/MediaImage/7",
        "alt": "Blue mug",
        "image": {"width": 800, "height": 600, "url": "https://cdn/mug.png"},
    }]}
    client, sent = _client(_data({"product": {"media": media}}))

    image = asyncio.run(client.get_product_image("99"))

    assert image == {
        "id": "gid://shopify/MediaImage/7",
        "alt": "Blue mug",
        "url": "https://cdn/mug.png",
        "width": 800,
        "height": 600,
    }
    assert sent[0]["body"]["variables"] == {"productId": "gid://shopify/Product/99"}
    assert 'media_type:IMAGE' in sent[0]["body"]["query"]


@pytest.mark.parametrize("payload", [
    {"product": {"media": {"nodes": []}}},
    {"product": None},
    {"product": {"media": {"nodes": [{"id": "m1", "alt": None}]}}},
])
def test_get_product_image_absent(payload):
    client, _ = _client(_data(payload))

    assert asyncio.run(client.get_product_image("99")) is None


def test_graphql_errors_raise():
    client, _ = _client(lambda r: httpx.Response(200, json={"errors": [{"message": "Invalid id"}]}))

    with pytest.raises(ShopifyError):
        asyncio.run(client.get_customer("abc"))


def test_http_error_raises():
    client, _ = _client(lambda r: httpx.Response(500, text="oops"))

    with pytest.raises(ShopifyError):
        asyncio.run(client.get_product("99"))


def test_transport_error_raises():
    def broken(request):
        raise httpx.ConnectError("refused", request=request)

    client, _ = _client(broken)

    with pytest.raises(ShopifyError):
        asyncio.run(client.get_customer("42"))


def test_get_shop():
    client, _ = _client(_data({"shop": {"name": "Test Shop", "myshopifyDomain": "test-shop.myshopify.com"}}))

    assert asyncio.run(client.get_shop())["name"] == "Test Shop"


def test_null_data_without_errors():
    client, _ = _client(lambda r: httpx.Response(200, json={"data": None}))

    assert asyncio.run(client.get_customer("42")) is None
    assert asyncio.run(client.get_product("99")) is None
    assert asyncio.run(client.get_product_image("99")) is None
    assert asyncio.run(client.get_shop()) == {}
