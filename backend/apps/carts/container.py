from __future__ import annotations

from apps.catalog.mappers import ProductMapper
from apps.catalog.repositories import ProductRepository

from .mappers import CartItemMapper, CartMapper
from .repositories import CartProductRepository, CartRepository
from .services import CartService


def build_cart_service() -> CartService:
    product_mapper = ProductMapper()
    item_mapper = CartItemMapper(product_mapper)
    cart_mapper = CartMapper(item_mapper)
    return CartService(
        carts=CartRepository(),
        cart_products=CartProductRepository(),
        products=ProductRepository(),
        cart_mapper=cart_mapper,
    )
