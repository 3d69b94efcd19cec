from typing import Any, Dict, Iterable, List, Sequence

from apps.common.repository import GenericRepository
from .models import Product


class ProductRepository(GenericRepository[Product]):
    def __init__(self):
        super().__init__(Product)

    def count_matching(self, filters: Dict[str, Any]) -> int:
        return self.model.objects.filter(**filters).count()

    def list_page(
        self,
        filters: Dict[str, Any],
        ordering: Sequence[str],
        offset: int,
        limit: int,
    ) -> List[Product]:
        qs = self.model.objects.filter(**filters).order_by(*ordering)
        return list(qs[offset : offset + limit])

    def in_bulk(self, ids: Iterable[int]) -> Dict[int, Product]:
        """Map the given ids to products; unknown ids are simply absent."""
        ids = list(ids)
        if not ids:
            return {}
        return self.model.objects.in_bulk(ids)

    def existing_ids(self, ids: Iterable[int]) -> set:
        ids = list(ids)
        if not ids:
            return set()
        return set(
            self.model.objects.filter(id__in=ids).values_list("id", flat=True)
        )
