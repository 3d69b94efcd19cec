from rest_framework import serializers
from apps.catalog.serializers import ProductReadSerializer


class CartItemSerializer(serializers.Serializer):
    productId = serializers.IntegerField(source="product_id")
    quantity = serializers.IntegerField()
    resolved = serializers.BooleanField()
    # Null when the product no longer exists in the catalog
    product = ProductReadSerializer(allow_null=True)


class CartReadSerializer(serializers.Serializer):
    id = serializers.IntegerField()
    items = CartItemSerializer(many=True)


class CartItemWriteSerializer(serializers.Serializer):
    product = serializers.IntegerField(min_value=1)
    quantity = serializers.IntegerField(min_value=1, required=False, default=1)


class CartReplaceSerializer(serializers.Serializer):
    # Documents the PUT payload; items are validated by CartReplaceCommand
    products = CartItemWriteSerializer(many=True)


class CartQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField(min_value=1)
