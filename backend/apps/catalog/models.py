from django.core.validators import MinValueValidator
from django.db import models


class Product(models.Model):
    id = models.AutoField(primary_key=True)
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10, decimal_places=2, validators=[MinValueValidator(0)]
    )
    code = models.CharField(max_length=64, unique=True)
    stock = models.PositiveIntegerField(default=0)
    category = models.CharField(max_length=100)
    status = models.BooleanField(default=True)
    # Ordered list of thumbnail paths/URLs
    thumbnails = models.JSONField(default=list, blank=True)

    def __str__(self):
        return self.title

    class Meta:
        indexes = [
            models.Index(fields=["category"], name="product_category_idx"),
            models.Index(fields=["status"], name="product_status_idx"),
            models.Index(fields=["price"], name="product_price_idx"),
        ]
