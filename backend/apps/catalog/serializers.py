from rest_framework import serializers


class ProductReadSerializer(serializers.Serializer):
    # Matches ProductDTO shapes used for responses
    id = serializers.IntegerField()
    title = serializers.CharField()
    description = serializers.CharField(allow_blank=True)
    price = serializers.DecimalField(
        max_digits=10, decimal_places=2, coerce_to_string=False
    )
    code = serializers.CharField()
    stock = serializers.IntegerField()
    category = serializers.CharField()
    status = serializers.BooleanField()
    thumbnails = serializers.ListField(child=serializers.CharField())

    def to_representation(self, instance):
        if instance is None:
            return None
        # If it's already a dataclass DTO, extract attributes directly for speed
        if hasattr(instance, "__dataclass_fields__"):
            return {
                "id": instance.id,
                "title": instance.title,
                "description": instance.description,
                "price": instance.price,
                "code": instance.code,
                "stock": instance.stock,
                "category": instance.category,
                "status": instance.status,
                "thumbnails": list(instance.thumbnails),
            }
        return super().to_representation(instance)


class ProductWriteSerializer(serializers.Serializer):
    # Documents the create payload. Required-field and type checks happen in
    # ProductCreateCommand so that missing fields are reported together.
    # 'id' is server-assigned and ignored when provided.
    title = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)
    code = serializers.CharField()
    stock = serializers.IntegerField(min_value=0)
    category = serializers.CharField()
    status = serializers.BooleanField(required=False, default=True)
    thumbnails = serializers.ListField(
        child=serializers.CharField(), required=False
    )


class ProductPageSerializer(serializers.Serializer):
    status = serializers.CharField()
    payload = ProductReadSerializer(many=True)
    totalDocs = serializers.IntegerField()
    limit = serializers.IntegerField()
    page = serializers.IntegerField()
    totalPages = serializers.IntegerField()
    hasPrevPage = serializers.BooleanField()
    hasNextPage = serializers.BooleanField()
    prevPage = serializers.IntegerField(allow_null=True)
    nextPage = serializers.IntegerField(allow_null=True)
    prevLink = serializers.CharField(allow_null=True)
    nextLink = serializers.CharField(allow_null=True)
    filter = serializers.DictField()
    sort = serializers.CharField(allow_null=True)

    def to_representation(self, instance):
        return {
            "status": "success",
            "payload": ProductReadSerializer(instance.items, many=True).data,
            "totalDocs": instance.total_docs,
            "limit": instance.limit,
            "page": instance.page,
            "totalPages": instance.total_pages,
            "hasPrevPage": instance.has_prev_page,
            "hasNextPage": instance.has_next_page,
            "prevPage": instance.prev_page,
            "nextPage": instance.next_page,
            "prevLink": instance.prev_link,
            "nextLink": instance.next_link,
            "filter": dict(instance.filter),
            "sort": instance.sort,
        }
