from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Protocol, TYPE_CHECKING

from .models import Cart, CartProduct

if TYPE_CHECKING:
    from apps.carts.dtos import CartDTO
    from apps.catalog.models import Product


class CartRepositoryProtocol(Protocol):
    def get(self, **filters) -> Optional[Cart]:
        ...

    def get_for_update(self, cart_id: int) -> Optional[Cart]:
        ...

    def create(self, **data) -> Cart:
        ...

    def touch(self, cart: Cart) -> None:
        ...


class CartProductRepositoryProtocol(Protocol):
    def create(self, **data) -> CartProduct:
        ...

    def list_for_cart(self, cart_id: int) -> List[CartProduct]:
        ...

    def get_for_cart_product(
        self, cart_id: int, product_id: int
    ) -> Optional[CartProduct]:
        ...

    def increment(self, item: CartProduct, by: int = 1) -> None:
        ...

    def set_quantity(self, item: CartProduct, quantity: int) -> None:
        ...

    def delete_product(self, cart: Cart, product_id: int) -> None:
        ...

    def delete_for_cart(self, cart: Cart) -> None:
        ...


class ProductLookupProtocol(Protocol):
    def exists(self, **filters) -> bool:
        ...

    def in_bulk(self, ids: Iterable[int]) -> Dict[int, "Product"]:
        ...

    def existing_ids(self, ids: Iterable[int]) -> set:
        ...


class CartMapperProtocol(Protocol):
    def to_dto(
        self,
        cart: Cart,
        items: Iterable[CartProduct],
        products_by_id: Dict[int, "Product"],
    ) -> "CartDTO":
        ...
