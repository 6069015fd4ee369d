# backend/app/schemas.py

from typing import Optional, Union
from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Remote records (Shopify Admin GraphQL)
# Field aliases follow the GraphQL / Liquid naming so payloads go out camelCase.
# ---------------------------------------------------------------------------

class UserProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Union[str, int]
    first_name: Optional[str] = Field(default=None, alias="firstName")
    profile_image: Optional[str] = Field(default=None, alias="profileImage")  # image.src


class ProductImage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: Union[str, int]
    alt: Optional[str] = None
    url: str
    width: Optional[int] = None
    height: Optional[int] = None


class ProductDetail(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: Union[str, int]
    title: str
    description: str = ""
    online_store_url: Optional[str] = Field(default=None, alias="onlineStoreUrl")  # null when unpublished
    image: Optional[ProductImage] = None


# ---------------------------------------------------------------------------
# GET /users response
# ---------------------------------------------------------------------------

class LandingViewResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    first_name: Optional[str] = Field(default=None, alias="firstName")
    profile_image: Optional[str] = Field(default=None, alias="profileImage")
    product: ProductDetail


class ErrorResponse(BaseModel):
    error: str
