"""Cart DTOs. Mapping from models lives in mappers.py."""
from dataclasses import dataclass, field
from typing import List, Optional
from apps.catalog.dtos import ProductDTO


@dataclass
class CartItemDTO:
    product_id: int
    quantity: int
    # None when the referenced product no longer exists in the catalog
    product: Optional[ProductDTO] = None

    @property
    def resolved(self) -> bool:
        return self.product is not None


@dataclass
class CartDTO:
    id: int
    items: List[CartItemDTO] = field(default_factory=list)
