"""Storefront API client and payload models."""

from shopqa.api.client import ApiClient, ApiResponse, RequestRecord, decode_body
from shopqa.api.models import Brand, BrandsResponse, Category, Product, ProductsResponse

__all__ = [
    "ApiClient",
    "ApiResponse",
    "Brand",
    "BrandsResponse",
    "Category",
    "Product",
    "ProductsResponse",
    "RequestRecord",
    "decode_body",
]
