from __future__ import annotations

from typing import Any

from django.db import transaction

from apps.api.exceptions import InputValidationError, NotFoundError
from apps.common import get_logger
from apps.common.parsing import MAX_INT_COLUMN, fits_int_column
from apps.common.repository import store_errors
from .commands import CartReplaceCommand, QuantityUpdateCommand
from .dtos import CartDTO
from .models import Cart
from .protocols import (
    CartMapperProtocol,
    CartProductRepositoryProtocol,
    CartRepositoryProtocol,
    ProductLookupProtocol,
)

logger = get_logger(__name__).bind(component="carts", layer="service")


class CartService:
    """Cart mutations and read-time expansion of line items into product data.

    Every mutation locks the cart row for the duration of its transaction and
    returns the freshly re-read cart.
    """

    def __init__(
        self,
        carts: CartRepositoryProtocol,
        cart_products: CartProductRepositoryProtocol,
        products: ProductLookupProtocol,
        cart_mapper: CartMapperProtocol,
    ):
        self.carts = carts
        self.cart_products = cart_products
        self.products = products
        self.cart_mapper = cart_mapper
        self.logger = logger.bind(service="CartService")

    def _cart_not_found(self, cart_id: int, action: str) -> NotFoundError:
        self.logger.info("Cart not found", cart_id=cart_id, action=action)
        return NotFoundError("Cart not found", {"cartId": cart_id})

    def _lock_cart(self, cart_id: int, action: str) -> Cart:
        if not fits_int_column(cart_id):
            raise self._cart_not_found(cart_id, action)
        cart = self.carts.get_for_update(cart_id)
        if not cart:
            raise self._cart_not_found(cart_id, action)
        return cart

    def create_cart(self) -> CartDTO:
        self.logger.info("Creating cart")
        with store_errors("carts.create", self.logger):
            cart = self.carts.create()
        self.logger.info("Cart created", cart_id=cart.id)
        return self.cart_mapper.to_dto(cart, [], {})

    def get_cart(self, cart_id: int) -> CartDTO:
        self.logger.debug("Fetching cart", cart_id=cart_id)
        with store_errors("carts.get", self.logger, cart_id=cart_id):
            cart = self.carts.get(id=cart_id) if fits_int_column(cart_id) else None
            if not cart:
                raise self._cart_not_found(cart_id, "get")
            items = self.cart_products.list_for_cart(cart.id)
            products_by_id = self.products.in_bulk([i.product_id for i in items])
        return self.cart_mapper.to_dto(cart, items, products_by_id)

    def add_product(self, cart_id: int, product_id: int) -> CartDTO:
        """Add one unit of a product, merging into an existing line item."""
        self.logger.info("Adding product to cart", cart_id=cart_id, product_id=product_id)
        with store_errors(
            "carts.add_product", self.logger, cart_id=cart_id, product_id=product_id
        ), transaction.atomic():
            cart = self._lock_cart(cart_id, "add_product")
            if not fits_int_column(product_id) or not self.products.exists(
                id=product_id
            ):
                self.logger.info(
                    "Product not found", cart_id=cart_id, product_id=product_id
                )
                raise NotFoundError("Product not found", {"productId": product_id})
            current = self.cart_products.get_for_cart_product(cart.id, product_id)
            if current:
                if current.quantity >= MAX_INT_COLUMN:
                    raise InputValidationError(
                        f"Quantity must not exceed {MAX_INT_COLUMN}",
                        {"field": "quantity", "productId": product_id},
                    )
                self.cart_products.increment(current, 1)
            else:
                self.cart_products.create(cart=cart, product_id=product_id, quantity=1)
            self.carts.touch(cart)
        return self.get_cart(cart_id)

    def remove_product(self, cart_id: int, product_id: int) -> CartDTO:
        self.logger.info(
            "Removing product from cart", cart_id=cart_id, product_id=product_id
        )
        with store_errors(
            "carts.remove_product", self.logger, cart_id=cart_id, product_id=product_id
        ), transaction.atomic():
            cart = self._lock_cart(cart_id, "remove_product")
            # Removing a product that is not in the cart is a no-op
            if fits_int_column(product_id):
                self.cart_products.delete_product(cart, product_id)
            self.carts.touch(cart)
        return self.get_cart(cart_id)

    def replace_products(self, cart_id: int, raw_items: Any) -> CartDTO:
        """Replace every line item with ``raw_items``, keeping the supplied order."""
        try:
            command = CartReplaceCommand.from_raw(cart_id, raw_items)
        except InputValidationError as exc:
            self.logger.info(
                "Rejected cart items",
                cart_id=cart_id,
                reason=exc.message,
                details=exc.details,
            )
            raise
        self.logger.info(
            "Replacing cart products", cart_id=cart_id, item_count=len(command.items)
        )
        with store_errors(
            "carts.replace_products", self.logger, cart_id=cart_id
        ), transaction.atomic():
            cart = self._lock_cart(cart_id, "replace_products")
            known = self.products.existing_ids(command.product_ids)
            unknown = [pid for pid in command.product_ids if pid not in known]
            if unknown:
                self.logger.info(
                    "Rejected cart items: unknown products",
                    cart_id=cart_id,
                    unknown=unknown,
                )
                raise InputValidationError(
                    "Unknown products in cart items",
                    {"unknownProductIds": unknown},
                )
            self.cart_products.delete_for_cart(cart)
            for item in command.items:
                self.cart_products.create(
                    cart=cart, product_id=item.product_id, quantity=item.quantity
                )
            self.carts.touch(cart)
        return self.get_cart(cart_id)

    def update_quantity(self, cart_id: int, product_id: int, quantity: Any) -> CartDTO:
        try:
            command = QuantityUpdateCommand.from_raw(cart_id, product_id, quantity)
        except InputValidationError:
            self.logger.info(
                "Rejected quantity",
                cart_id=cart_id,
                product_id=product_id,
                quantity=quantity,
            )
            raise
        self.logger.info(
            "Updating cart quantity",
            cart_id=cart_id,
            product_id=product_id,
            quantity=command.quantity,
        )
        with store_errors(
            "carts.update_quantity", self.logger, cart_id=cart_id, product_id=product_id
        ), transaction.atomic():
            cart = self._lock_cart(cart_id, "update_quantity")
            current = (
                self.cart_products.get_for_cart_product(cart.id, product_id)
                if fits_int_column(product_id)
                else None
            )
            if not current:
                self.logger.info(
                    "Product not found in cart", cart_id=cart_id, product_id=product_id
                )
                raise NotFoundError(
                    "Product not found in cart", {"productId": product_id}
                )
            self.cart_products.set_quantity(current, command.quantity)
            self.carts.touch(cart)
        return self.get_cart(cart_id)

    def clear_cart(self, cart_id: int) -> CartDTO:
        self.logger.info("Clearing cart", cart_id=cart_id)
        with store_errors(
            "carts.clear", self.logger, cart_id=cart_id
        ), transaction.atomic():
            cart = self._lock_cart(cart_id, "clear")
            self.cart_products.delete_for_cart(cart)
            self.carts.touch(cart)
        return self.get_cart(cart_id)
