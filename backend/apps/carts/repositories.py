from typing import List, Optional

from django.db.models import F

from apps.common.repository import GenericRepository
from .models import Cart, CartProduct


class CartRepository(GenericRepository[Cart]):
    def __init__(self):
        super().__init__(Cart)

    def get_for_update(self, cart_id: int) -> Optional[Cart]:
        """Fetch and lock the cart row. Must run inside ``transaction.atomic``."""
        return self.model.objects.select_for_update().filter(id=cart_id).first()

    def touch(self, cart: Cart) -> None:
        cart.save(update_fields=["updated_at"])


class CartProductRepository(GenericRepository[CartProduct]):
    def __init__(self):
        super().__init__(CartProduct)

    def list_for_cart(self, cart_id: int) -> List[CartProduct]:
        return list(self.model.objects.filter(cart_id=cart_id).order_by("id"))

    def get_for_cart_product(self, cart_id: int, product_id: int):
        return self.model.objects.filter(
            cart_id=cart_id, product_id=product_id
        ).first()

    def increment(self, item: CartProduct, by: int = 1) -> None:
        self.model.objects.filter(pk=item.pk).update(quantity=F("quantity") + by)

    def set_quantity(self, item: CartProduct, quantity: int) -> None:
        self.model.objects.filter(pk=item.pk).update(quantity=quantity)

    def delete_for_cart(self, cart: Cart):
        self.model.objects.filter(cart=cart).delete()

    def delete_product(self, cart: Cart, product_id: int):
        self.model.objects.filter(cart=cart, product_id=product_id).delete()
