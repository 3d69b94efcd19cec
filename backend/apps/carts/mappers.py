from typing import Dict, Iterable, List, Optional
from .models import Cart, CartProduct
from .dtos import CartDTO, CartItemDTO
from apps.catalog.mappers import ProductMapper
from apps.catalog.models import Product
from apps.common import get_logger

logger = get_logger(__name__).bind(component="carts", layer="mapper")


class CartItemMapper:
    def __init__(self, product_mapper: Optional[ProductMapper] = None) -> None:
        self.product_mapper = product_mapper or ProductMapper()

    def to_dto(
        self, cp: CartProduct, products_by_id: Dict[int, Product]
    ) -> CartItemDTO:
        product = products_by_id.get(cp.product_id)
        if product is None:
            logger.warning(
                "Cart item references missing product",
                cart_id=cp.cart_id,
                product_id=cp.product_id,
            )
            return CartItemDTO(product_id=cp.product_id, quantity=cp.quantity)
        return CartItemDTO(
            product_id=cp.product_id,
            quantity=cp.quantity,
            product=self.product_mapper.to_dto(product),
        )

    def many_to_dto(
        self, items: Iterable[CartProduct], products_by_id: Dict[int, Product]
    ) -> List[CartItemDTO]:
        return [self.to_dto(i, products_by_id) for i in items]


class CartMapper:
    def __init__(self, item_mapper: Optional[CartItemMapper] = None) -> None:
        self.item_mapper = item_mapper or CartItemMapper()

    def to_dto(
        self,
        cart: Cart,
        items: Iterable[CartProduct],
        products_by_id: Dict[int, Product],
    ) -> CartDTO:
        return CartDTO(
            id=cart.id, items=self.item_mapper.many_to_dto(items, products_by_id)
        )
