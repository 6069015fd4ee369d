# services/landing_resolver.py

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from pydantic import ValidationError

from backend.app.schemas import LandingViewResult, ProductDetail, ProductImage, UserProfile
from services.favorites_repo import FavoritesRepo, StoreError
from services.shopify_client import ShopifyClient, ShopifyError

logger = logging.getLogger(__name__)


class Stage(str, Enum):
    FETCH_PROFILE = "FetchProfile"
    FETCH_FAVORITE = "FetchFavorite"
    FETCH_PRODUCT = "FetchProduct"
    COMPOSE = "Compose"


class FailureKind(str, Enum):
    MISSING_PARAMETER = "missing_parameter"
    CUSTOMER_NOT_FOUND = "customer_not_found"
    FAVORITE_NOT_FOUND = "favorite_not_found"
    PRODUCT_NOT_FOUND = "product_not_found"
    STORE_FAILURE = "store_failure"
    REMOTE_FETCH_FAILURE = "remote_fetch_failure"


@dataclass(frozen=True)
class LandingFailure:
    kind: FailureKind
    stage: Optional[Stage]
    identifier: Optional[str]
    message: str  # safe to show the storefront


LandingOutcome = Union[LandingViewResult, LandingFailure]


class UserLandingResolver:
    """
    Builds the landing payload for one storefront user.

    Stages run in order (FetchProfile -> FetchFavorite -> FetchProduct ->
    Compose) and any of them can end the request with a LandingFailure.
    Exceptions and timeouts never escape resolve(); the caller always gets
    exactly one outcome back.
    """

    def __init__(
        self,
        shopify: ShopifyClient,
        favorites: FavoritesRepo,
        remote_timeout: float = 10.0,
        store_timeout: float = 5.0,
    ):
        self.shopify = shopify
        self.favorites = favorites
        self.remote_timeout = remote_timeout
        self.store_timeout = store_timeout

    async def resolve(self, user_id: str) -> LandingOutcome:
        if not user_id or not user_id.strip():
            return LandingFailure(FailureKind.MISSING_PARAMETER, None, None, "Missing user_id query parameter")

        profile = await self._fetch_profile(user_id)
        if isinstance(profile, LandingFailure):
            return profile

        # The Shopify customer id doubles as the key of the local users table.
        favorite_id = await self._fetch_favorite(user_id)
        if isinstance(favorite_id, LandingFailure):
            return favorite_id

        product = await self._fetch_product(favorite_id)
        if isinstance(product, LandingFailure):
            return product

        result = LandingViewResult(
            first_name=profile.first_name,
            profile_image=profile.profile_image,
            product=product,
        )
        logger.info(f"[LandingResolver] resolved user_id={user_id} favorite_product_id={favorite_id}")
        return result

    async def _fetch_profile(self, user_id: str) -> Union[UserProfile, LandingFailure]:
        failed = LandingFailure(
            FailureKind.REMOTE_FETCH_FAILURE, Stage.FETCH_PROFILE, user_id, "Failed to fetch customer data"
        )
        try:
            customer = await asyncio.wait_for(self.shopify.get_customer(user_id), self.remote_timeout)
        except asyncio.TimeoutError:
            logger.error(f"[LandingResolver] stage={Stage.FETCH_PROFILE.value} user_id={user_id} timed out")
            return failed
        except ShopifyError as e:
            logger.error(f"[LandingResolver] stage={Stage.FETCH_PROFILE.value} user_id={user_id} error: {e}")
            return failed

        if not customer:
            return LandingFailure(
                FailureKind.CUSTOMER_NOT_FOUND, Stage.FETCH_PROFILE, user_id, "Customer not found"
            )

        try:
            return UserProfile(
                id=customer["id"],
                first_name=customer.get("firstName"),
                profile_image=(customer.get("image") or {}).get("src"),
            )
        except (KeyError, ValidationError) as e:
            logger.error(f"[LandingResolver] stage={Stage.FETCH_PROFILE.value} user_id={user_id} bad customer shape: {e}")
            return failed

    async def _fetch_favorite(self, user_id: str) -> Union[str, LandingFailure]:
        failed = LandingFailure(FailureKind.STORE_FAILURE, Stage.FETCH_FAVORITE, user_id, "Database query error")
        try:
            # supabase-py is synchronous; keep it off the event loop
            favorite_id = await asyncio.wait_for(
                asyncio.to_thread(self.favorites.get_favorite_product_id, user_id),
                self.store_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"[LandingResolver] stage={Stage.FETCH_FAVORITE.value} user_id={user_id} timed out")
            return failed
        except StoreError as e:
            logger.error(f"[LandingResolver] stage={Stage.FETCH_FAVORITE.value} user_id={user_id} error: {e}")
            return failed

        if not favorite_id:
            return LandingFailure(
                FailureKind.FAVORITE_NOT_FOUND, Stage.FETCH_FAVORITE, user_id, "Favorite product not found"
            )
        return favorite_id

    async def _fetch_product(self, product_id: str) -> Union[ProductDetail, LandingFailure]:
        failed = LandingFailure(
            FailureKind.REMOTE_FETCH_FAILURE, Stage.FETCH_PRODUCT, product_id, "Failed to fetch product data"
        )
        # Detail and image are independent: launch both, wait for both.
        try:
            product, image = await asyncio.wait_for(
                asyncio.gather(
                    self.shopify.get_product(product_id),
                    self.shopify.get_product_image(product_id),
                ),
                self.remote_timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"[LandingResolver] stage={Stage.FETCH_PRODUCT.value} product_id={product_id} timed out")
            return failed
        except ShopifyError as e:
            logger.error(f"[LandingResolver] stage={Stage.FETCH_PRODUCT.value} product_id={product_id} error: {e}")
            return failed

        if not product:
            return LandingFailure(
                FailureKind.PRODUCT_NOT_FOUND, Stage.FETCH_PRODUCT, product_id, "Product not found"
            )

        try:
            return ProductDetail(
                id=product["id"],
                title=product["title"],
                description=product.get("description") or "",
                online_store_url=product.get("onlineStoreUrl"),
                image=ProductImage(**image) if image else None,
            )
        except (KeyError, ValidationError) as e:
            logger.error(f"[LandingResolver] stage={Stage.COMPOSE.value} product_id={product_id} bad product shape: {e}")
            return LandingFailure(
                FailureKind.REMOTE_FETCH_FAILURE, Stage.COMPOSE, product_id, "Failed to fetch product data"
            )
