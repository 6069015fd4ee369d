# services/favorites_repo.py
import logging
from typing import Any

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the favorites lookup itself fails (not when it finds nothing)."""


class FavoritesRepo:
    """
    Read-only view of the users table.

    Assumed columns:
      - shopify_customer_id: the customer's id in Shopify
      - favorite_product_id: Shopify id of the user's favorite product
    """

    def __init__(self, client: Any, table: str = "users", schema: str = "public"):
        self.client = client
        self.table = table
        self.schema = schema

    def get_favorite_product_id(self, shopify_customer_id: str) -> str | None:
        try:
            res = (
                self.client.schema(self.schema)
                .from_(self.table)
                .select("favorite_product_id")
                .eq("shopify_customer_id", shopify_customer_id)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"[FavoritesRepo] query failed for shopify_customer_id={shopify_customer_id}: {e}")
            raise StoreError(str(e)) from e

        rows = res.data or []
        if not rows:
            logger.info(f"[FavoritesRepo] no row for shopify_customer_id={shopify_customer_id}")
            return None

        favorite = rows[0].get("favorite_product_id")
        # the column is nullable; an unset favorite reads the same as a missing row
        return str(favorite) if favorite is not None else None
