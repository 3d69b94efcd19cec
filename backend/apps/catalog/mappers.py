from decimal import Decimal
from typing import Iterable, List

from .dtos import ProductDTO
from .models import Product


class ProductMapper:
    @staticmethod
    def to_dto(product: Product) -> ProductDTO:
        price = product.price
        if not isinstance(price, Decimal):
            price = Decimal(str(price))
        return ProductDTO(
            id=product.id,
            title=product.title,
            description=product.description or "",
            price=price,
            code=product.code,
            stock=product.stock,
            category=product.category,
            status=bool(product.status),
            thumbnails=list(product.thumbnails or []),
        )

    @staticmethod
    def many_to_dto(products: Iterable[Product]) -> List[ProductDTO]:
        return [ProductMapper.to_dto(p) for p in products]
