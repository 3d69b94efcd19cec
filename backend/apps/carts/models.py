from django.db import models
from django.utils import timezone


class Cart(models.Model):
    # Use auto-incrementing PK so DB assigns IDs on insert
    id = models.AutoField(primary_key=True)
    created_at = models.DateTimeField(default=timezone.now)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self):
        return f"Cart {self.id}"


class CartProduct(models.Model):
    cart = models.ForeignKey(
        Cart, on_delete=models.CASCADE, related_name="cart_products"
    )
    # Plain identifier rather than a foreign key: catalog rows may disappear
    # while carts still reference them.
    product_id = models.PositiveIntegerField()
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        unique_together = ("cart", "product_id")
        db_table = "cart_products"
        ordering = ["id"]

    def __str__(self):
        return f"{self.quantity} x product {self.product_id} in cart {self.cart_id}"
