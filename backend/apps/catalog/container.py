from __future__ import annotations

from django.conf import settings
from django.core.cache import cache

from .repositories import ProductRepository
from .services import ProductService


def build_product_service(*, disable_cache: bool | None = None) -> ProductService:
    if disable_cache is None:
        disable_cache = getattr(settings, "CATALOG_DISABLE_CACHE", False)
    return ProductService(
        products=ProductRepository(),
        cache_backend=cache,
        default_limit=getattr(settings, "CATALOG_DEFAULT_PAGE_SIZE", 10),
        link_base=getattr(settings, "CATALOG_LINK_BASE", "/api/products/"),
        disable_cache=disable_cache,
    )
