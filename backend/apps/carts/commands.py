from dataclasses import dataclass, field
from typing import Any, Dict, List

from apps.api.exceptions import InputValidationError
from apps.common.parsing import MAX_INT_COLUMN, as_int, fits_int_column


@dataclass
class CartItemCommand:
    product_id: int
    quantity: int = 1

    @staticmethod
    def _raw_product_id(raw: Dict[str, Any]) -> Any:
        pid = raw.get("product")
        if pid is None:
            pid = raw.get("productId", raw.get("product_id"))
        # nested product object fallback
        if isinstance(pid, dict):
            pid = pid.get("id")
        return pid

    @staticmethod
    def from_raw(raw: Any, index: int):
        if not isinstance(raw, dict):
            raise InputValidationError(
                "Each cart item must be an object", {"index": index}
            )
        pid = as_int(CartItemCommand._raw_product_id(raw))
        if pid is None or pid <= 0 or not fits_int_column(pid):
            raise InputValidationError(
                "Cart item product must be a positive integer id",
                {"index": index, "field": "product"},
            )
        raw_qty = raw.get("quantity")
        qty = 1 if raw_qty is None else as_int(raw_qty)
        if qty is None or qty < 1 or not fits_int_column(qty):
            raise InputValidationError(
                f"Cart item quantity must be an integer between 1 and {MAX_INT_COLUMN}",
                {"index": index, "field": "quantity", "productId": pid},
            )
        return CartItemCommand(product_id=pid, quantity=qty)


@dataclass
class CartReplaceCommand:
    cart_id: int
    items: List[CartItemCommand] = field(default_factory=list)

    @property
    def product_ids(self) -> List[int]:
        return [i.product_id for i in self.items]

    @staticmethod
    def from_raw(cart_id: int, raw_items: Any):
        if not isinstance(raw_items, list):
            raise InputValidationError(
                "Products must be an array", {"field": "products"}
            )
        items: List[CartItemCommand] = []
        seen = set()
        for index, raw in enumerate(raw_items):
            cmd = CartItemCommand.from_raw(raw, index)
            if cmd.product_id in seen:
                raise InputValidationError(
                    "Duplicate product in cart items",
                    {"index": index, "productId": cmd.product_id},
                )
            seen.add(cmd.product_id)
            items.append(cmd)
        return CartReplaceCommand(cart_id=cart_id, items=items)


@dataclass
class QuantityUpdateCommand:
    cart_id: int
    product_id: int
    quantity: int

    @staticmethod
    def from_raw(cart_id: int, product_id: int, quantity: Any):
        # Only JSON numbers are accepted; numeric strings are not coerced
        if (
            isinstance(quantity, bool)
            or not isinstance(quantity, (int, float))
            or quantity <= 0
        ):
            raise InputValidationError(
                "Quantity must be a number greater than 0",
                {"field": "quantity"},
            )
        qty = as_int(quantity)
        if qty is None:
            raise InputValidationError(
                "Quantity must be a whole number",
                {"field": "quantity"},
            )
        if not fits_int_column(qty):
            raise InputValidationError(
                f"Quantity must not exceed {MAX_INT_COLUMN}",
                {"field": "quantity"},
            )
        return QuantityUpdateCommand(
            cart_id=cart_id, product_id=product_id, quantity=qty
        )
