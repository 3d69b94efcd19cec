from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional


@dataclass
class ProductDTO:
    id: int
    title: str
    description: str
    price: Decimal
    code: str
    stock: int
    category: str
    status: bool
    thumbnails: List[str] = field(default_factory=list)


@dataclass
class ProductPageDTO:
    items: List[ProductDTO]
    total_docs: int
    limit: int
    page: int
    total_pages: int
    has_prev_page: bool
    has_next_page: bool
    prev_page: Optional[int]
    next_page: Optional[int]
    prev_link: Optional[str]
    next_link: Optional[str]
    # Filter and sort actually applied to the store query
    filter: Dict[str, Any] = field(default_factory=dict)
    sort: Optional[str] = None


"""DTO dataclasses only. Mapping logic lives in mappers.py."""
