import logging
from typing import Optional
import httpx
from config import Settings

logger = logging.getLogger(__name__)

API_VERSION = "2025-01"


class ShopifyError(Exception):
    """Raised when the Admin GraphQL API can't give us a usable answer."""


def to_gid(kind: str, v: str | int) -> str:
    s = str(v).strip()
    return s if s.startswith("gid://") else f"gid://shopify/{kind}/{s}"


CUSTOMER_QUERY = """
query CustomerProfile($id: ID!) {
  customer(id: $id) {
    id
    firstName
    image {
      src
    }
  }
}
"""

PRODUCT_QUERY = """
query ProductDetail($id: ID!) {
  product(id: $id) {
    id
    title
    description
    onlineStoreUrl
  }
}
"""

PRODUCT_IMAGE_QUERY = """
query ProductImageList($productId: ID!) {
  product(id: $productId) {
    media(first: 1, query: "media_type:IMAGE", sortKey: POSITION) {
      nodes {
        id
        alt
        ... on MediaImage {
          image {
            width
            height
            url
          }
        }
      }
    }
  }
}
"""

SHOP_QUERY = """
query {
  shop {
    name
    myshopifyDomain
    primaryDomain { host }
  }
}
"""


class ShopifyClient:
    def __init__(
        self,
        shop_url: str,
        access_token: str,
        api_version: str = API_VERSION,
        timeout: float = 10.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        if not shop_url or not access_token:
            raise ValueError("Missing required Shopify config: SHOP_URL or SHOPIFY_ACCESS_TOKEN")
        self.base_url = f"https://{shop_url}/admin/api/{api_version}"
        self.headers = {
            "Content-Type": "application/json",
            "X-Shopify-Access-Token": access_token,
        }
        self.timeout = timeout
        # One pooled connection set for the life of the process
        self._http = http_client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def graph(self, query: str, variables: Optional[dict] = None) -> dict:
        """
        Minimal Admin GraphQL client.
        POST /admin/api/{ver}/graphql.json

        Raises ShopifyError on transport failures, non-2xx responses and
        top-level GraphQL `errors`.
        """
        url = f"{self.base_url}/graphql.json"
        payload = {"query": query, "variables": variables or {}}
        try:
            resp = await self._http.post(url, headers=self.headers, json=payload, timeout=self.timeout)
            logger.info(f"[Shopify GQL] POST {url} -> {resp.status_code}")
            resp.raise_for_status()
            body = resp.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[Shopify GQL] HTTP status error: {e.response.status_code} {e.response.text}")
            raise ShopifyError(f"Shopify returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"[Shopify GQL] Request error: {e!r}")
            raise ShopifyError(f"Shopify request failed: {e!r}") from e
        except ValueError as e:
            raise ShopifyError("Shopify returned a non-JSON body") from e

        errors = (body or {}).get("errors")
        if errors:
            logger.error(f"[Shopify GQL] errors={errors}")
            raise ShopifyError(f"GraphQL errors: {errors}")
        return body

    async def get_customer(self, customer_id: str) -> dict | None:
        """
        customer(id:) { id firstName image { src } }
        Returns the customer node, or None when Shopify has no such customer.
        """
        gid = to_gid("Customer", customer_id)
        data = await self.graph(CUSTOMER_QUERY, {"id": gid})
        customer = ((data or {}).get("data") or {}).get("customer")
        if not customer:
            logger.info(f"[ShopifyClient] No customer for id={gid}")
            return None
        return customer

    async def get_product(self, product_id: str) -> dict | None:
        gid = to_gid("Product", product_id)
        data = await self.graph(PRODUCT_QUERY, {"id": gid})
        product = ((data or {}).get("data") or {}).get("product")
        if not product:
            logger.info(f"[ShopifyClient] No product for id={gid}")
            return None
        return product

    async def get_product_image(self, product_id: str) -> dict | None:
        """
        First IMAGE media of a product ordered by position, flattened to
        {"id", "alt", "url", "width", "height"}. None when the product has no
        image media (or no longer exists).
        """
        gid = to_gid("Product", product_id)
        data = await self.graph(PRODUCT_IMAGE_QUERY, {"productId": gid})
        product = ((data or {}).get("data") or {}).get("product") or {}
        nodes = (product.get("media") or {}).get("nodes") or []
        if not nodes:
            return None

        node = nodes[0]
        image = node.get("image") or {}
        if not image.get("url"):
            # media node without an image payload (still processing, etc.)
            logger.info(f"[ShopifyClient] Media {node.get('id')} on {gid} has no image url")
            return None

        return {
            "id": node.get("id"),
            "alt": node.get("alt"),
            "url": image["url"],
            "width": image.get("width"),
            "height": image.get("height"),
        }

    async def get_shop(self) -> dict:
        data = await self.graph(SHOP_QUERY)
        return ((data or {}).get("data") or {}).get("shop") or {}


def build_shopify_client(settings: Settings) -> ShopifyClient:
    return ShopifyClient(
        shop_url=settings.SHOP_URL,
        access_token=settings.SHOPIFY_ACCESS_TOKEN,
        api_version=settings.SHOPIFY_API_VERSION,
        timeout=settings.REMOTE_TIMEOUT_SECONDS,
    )
