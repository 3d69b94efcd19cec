from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from .models import Product


class ProductRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Product]:
        ...

    def exists(self, **filters) -> bool:
        ...

    def create(self, **data) -> Product:
        ...

    def count_matching(self, filters: Dict[str, Any]) -> int:
        ...

    def list_page(
        self,
        filters: Dict[str, Any],
        ordering: Sequence[str],
        offset: int,
        limit: int,
    ) -> List[Product]:
        ...

    def in_bulk(self, ids: Iterable[int]) -> Dict[int, Product]:
        ...

    def existing_ids(self, ids: Iterable[int]) -> set:
        ...


class CacheBackendProtocol(Protocol):
    def get(self, key: str, default: Any = None) -> Any:
        ...

    def set(self, key: str, value: Any, timeout: Any = ...) -> None:
        ...
