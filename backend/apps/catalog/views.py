from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from .container import build_product_service
from .serializers import (
    ProductReadSerializer,
    ProductWriteSerializer,
    ProductPageSerializer,
)
from apps.common import get_logger
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from apps.api.schemas import ErrorResponseSerializer

logger = get_logger(__name__).bind(component="catalog", layer="view")


@extend_schema(tags=["Catalog"])
class ProductListView(APIView):
    service = build_product_service()
    log = logger.bind(view="ProductListView")

    @extend_schema(
        operation_id="products_list",
        summary="List products",
        description=(
            "Filter, sort and paginate the catalog. Malformed limit/page values "
            "fall back to the defaults. Cached results may be served."
        ),
        parameters=[
            OpenApiParameter(
                name="limit", description="Page size (default 10)", required=False, type=int
            ),
            OpenApiParameter(
                name="page", description="One-based page index", required=False, type=int
            ),
            OpenApiParameter(
                name="sort",
                description="'asc' or 'desc' by price; anything else keeps store order",
                required=False,
                type=str,
            ),
            OpenApiParameter(
                name="query",
                description="'available', 'unavailable' or a category name",
                required=False,
                type=str,
            ),
        ],
        responses={
            200: ProductPageSerializer,
            503: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request):
        params = request.query_params
        self.log.debug(
            "Handling product list request",
            limit=params.get("limit"),
            page=params.get("page"),
            sort=params.get("sort"),
            query=params.get("query"),
        )
        page = self.service.list_products(
            params.get("limit"),
            params.get("page"),
            params.get("sort"),
            params.get("query"),
            base_url=request.build_absolute_uri(request.path),
        )
        return Response(ProductPageSerializer(page).data)

    @extend_schema(
        operation_id="products_create",
        summary="Create product",
        request=ProductWriteSerializer,
        responses={
            201: ProductReadSerializer,
            400: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def post(self, request):
        payload = request.data
        code = payload.get("code") if isinstance(payload, dict) else None
        self.log.info("Creating product via API", code=code)
        dto = self.service.create_product(request.data)
        self.log.info("Product created via API", product_id=dto.id)
        return Response(ProductReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Catalog"])
class ProductDetailView(APIView):
    service = build_product_service()
    log = logger.bind(view="ProductDetailView")

    @extend_schema(
        operation_id="products_retrieve",
        summary="Get product",
        parameters=[OpenApiParameter("product_id", int, OpenApiParameter.PATH)],
        responses={
            200: ProductReadSerializer,
            404: OpenApiResponse(response=ErrorResponseSerializer),
        },
    )
    def get(self, request, product_id: int):
        self.log.debug("Fetching product detail", product_id=product_id)
        dto = self.service.get_product(product_id)
        return Response(ProductReadSerializer(dto).data)
