from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote, urlencode

from apps.api.exceptions import InputValidationError, NotFoundError
from apps.common import get_logger
from apps.common.parsing import fits_int_column
from apps.common.repository import store_errors
from .commands import DEFAULT_LIMIT, ProductCreateCommand, ProductListQuery
from .dtos import ProductDTO, ProductPageDTO
from .mappers import ProductMapper
from .protocols import CacheBackendProtocol, ProductRepositoryProtocol

logger = get_logger(__name__).bind(component="catalog", layer="service")


class ProductService:
    def __init__(
        self,
        products: ProductRepositoryProtocol,
        cache_backend: CacheBackendProtocol,
        *,
        default_limit: int = DEFAULT_LIMIT,
        link_base: str = "/api/products/",
        disable_cache: bool = False,
    ):
        self.products = products
        self.cache = cache_backend
        self.default_limit = default_limit
        self.link_base = link_base
        self.disable_cache = disable_cache
        self.logger = logger.bind(service="ProductService")
        # Caching keys
        self._cache_prefix = "products:list"
        self._cache_version_key = f"{self._cache_prefix}:version"
        self._default_version = 1

    def _get_cache_version(self) -> int:
        v = self.cache.get(self._cache_version_key)
        return v or self._default_version

    def _bump_cache_version(self) -> None:
        v = self._get_cache_version()
        # Version key should not expire
        self.cache.set(self._cache_version_key, v + 1, timeout=None)
        self.logger.debug("Bumped product cache version", new_version=v + 1)

    def _cache_key(self, query: ProductListQuery) -> str:
        version = self._get_cache_version()
        flt = ",".join(
            f"{k}={quote(str(v), safe='')}" for k, v in sorted(query.filters.items())
        ) or "all"
        return (
            f"{self._cache_prefix}:v{version}:{flt}:sort-{query.sort or 'none'}"
            f":p{query.page}:l{query.limit}"
        )

    def _fetch_page(self, query: ProductListQuery) -> Tuple[List[ProductDTO], int]:
        with store_errors("products.list", self.logger, filters=query.filters):
            total = self.products.count_matching(query.filters)
            if query.offset >= total:
                return [], total
            # Clamp to the rows that exist; limit and page are unbounded
            rows = self.products.list_page(
                query.filters,
                query.ordering,
                query.offset,
                min(query.limit, total - query.offset),
            )
        return ProductMapper.many_to_dto(rows), total

    def _page_link(self, base: str, query: ProductListQuery, page: int) -> str:
        params: Dict[str, Any] = {"limit": query.limit, "page": page}
        if query.raw_sort is not None:
            params["sort"] = query.raw_sort
        if query.raw_query is not None:
            params["query"] = query.raw_query
        return f"{base}?{urlencode(params)}"

    def list_products(
        self,
        limit: Any = None,
        page: Any = None,
        sort: Any = None,
        query: Any = None,
        *,
        base_url: Optional[str] = None,
    ) -> ProductPageDTO:
        """Filter, sort and paginate the catalog.

        Malformed ``limit``/``page`` fall back to the defaults instead of
        failing; an out of range page yields an empty ``items`` list.
        """
        q = ProductListQuery.from_raw(
            limit, page, sort, query, default_limit=self.default_limit
        )
        self.logger.debug(
            "Listing products",
            limit=q.limit,
            page=q.page,
            sort=q.sort,
            filters=q.filters,
            cache_enabled=not self.disable_cache,
        )
        if self.disable_cache:
            items, total = self._fetch_page(q)
        else:
            # Read-through cache per filter/sort/page/limit
            key = self._cache_key(q)
            cached = self.cache.get(key)
            if cached is not None:
                self.logger.debug("Product list cache hit", cache_key=key)
                items, total = cached
            else:
                self.logger.debug("Product list cache miss", cache_key=key)
                items, total = self._fetch_page(q)
                self.cache.set(key, (items, total))

        total_pages = -(-total // q.limit)
        has_prev = q.page > 1
        has_next = q.page < total_pages
        base = base_url or self.link_base
        return ProductPageDTO(
            items=items,
            total_docs=total,
            limit=q.limit,
            page=q.page,
            total_pages=total_pages,
            has_prev_page=has_prev,
            has_next_page=has_next,
            prev_page=q.page - 1 if has_prev else None,
            next_page=q.page + 1 if has_next else None,
            prev_link=self._page_link(base, q, q.page - 1) if has_prev else None,
            next_link=self._page_link(base, q, q.page + 1) if has_next else None,
            filter=q.filters,
            sort=q.sort,
        )

    def get_product(self, product_id: int) -> ProductDTO:
        self.logger.debug("Fetching product", product_id=product_id)
        with store_errors("products.get", self.logger, product_id=product_id):
            p = (
                self.products.get(id=product_id)
                if fits_int_column(product_id)
                else None
            )
        if not p:
            self.logger.info("Product not found", product_id=product_id)
            raise NotFoundError("Product not found", {"productId": product_id})
        return ProductMapper.to_dto(p)

    def create_product(self, data: Dict[str, Any]) -> ProductDTO:
        try:
            cmd = ProductCreateCommand.from_raw(data)
        except InputValidationError as exc:
            self.logger.info(
                "Rejected product payload", reason=exc.message, details=exc.details
            )
            raise
        self.logger.info("Creating product", code=cmd.code, category=cmd.category)
        with store_errors("products.create", self.logger, code=cmd.code):
            if self.products.exists(code=cmd.code):
                self.logger.info("Duplicate product code", code=cmd.code)
                raise InputValidationError(
                    "Product code already exists",
                    {"field": "code", "value": cmd.code},
                )
            p = self.products.create(
                title=cmd.title,
                description=cmd.description,
                price=cmd.price,
                code=cmd.code,
                stock=cmd.stock,
                category=cmd.category,
                status=cmd.status,
                thumbnails=cmd.thumbnails,
            )
        if not self.disable_cache:
            self._bump_cache_version()
        self.logger.info("Product created", product_id=p.id)
        return ProductMapper.to_dto(p)
