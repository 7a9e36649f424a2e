"""Typed views of the storefront catalogue API payloads.

The API reports its own ``responseCode`` inside the body, separately
from the HTTP status, so both are kept and checked independently.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr


class UserType(BaseModel):
    model_config = ConfigDict(extra="allow")

    usertype: str


class Category(BaseModel):
    """Category of a product, e.g. Women > Tops."""

    model_config = ConfigDict(extra="allow")

    usertype: Optional[UserType] = None
    category: str = ""

    @property
    def path(self) -> str:
        if self.usertype is None:
            return self.category
        return f"{self.usertype.usertype} > {self.category}"


class Product(BaseModel):
    """A catalogue product as returned by ``/productsList``."""

    model_config = ConfigDict(extra="allow")

    id: StrictInt = Field(..., gt=0)
    name: StrictStr = Field(..., min_length=1)
    price: StrictStr = Field(..., description="Rendered price, e.g. 'Rs. 500'")
    brand: StrictStr
    category: Category


class Brand(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: StrictInt
    brand: StrictStr = Field(..., min_length=1)


class ProductsResponse(BaseModel):
    """Body of ``/productsList`` and ``/searchProduct``.

    Error bodies (e.g. a search without a term) carry a ``message`` and
    no products.
    """

    model_config = ConfigDict(extra="allow")

    responseCode: StrictInt
    products: list[Product] = Field(default_factory=list)
    message: Optional[str] = None

    def product_ids(self) -> list[int]:
        return [p.id for p in self.products]


class BrandsResponse(BaseModel):
    model_config = ConfigDict(extra="allow")

    responseCode: StrictInt
    brands: list[Brand] = Field(default_factory=list)
    message: Optional[str] = None

    def brand_names(self) -> list[str]:
        return [b.brand for b in self.brands]


def dump(model: BaseModel) -> dict[str, Any]:
    return model.model_dump(mode="json")
