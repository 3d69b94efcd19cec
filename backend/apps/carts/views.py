from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework import status
from .container import build_cart_service
from .serializers import (
    CartReadSerializer,
    CartReplaceSerializer,
    CartQuantitySerializer,
)
from drf_spectacular.utils import extend_schema, OpenApiParameter, OpenApiResponse
from apps.api.schemas import ErrorResponseSerializer
from apps.common import get_logger
logger = get_logger(__name__).bind(component="carts", layer="view")

CART_ID_PARAM = OpenApiParameter("cart_id", int, OpenApiParameter.PATH)
PRODUCT_ID_PARAM = OpenApiParameter("product_id", int, OpenApiParameter.PATH)
NOT_FOUND_RESPONSE = OpenApiResponse(
    response=ErrorResponseSerializer, description="Cart or product not found"
)
VALIDATION_RESPONSE = OpenApiResponse(
    response=ErrorResponseSerializer, description="Malformed input"
)


@extend_schema(tags=["Carts"])
class CartListView(APIView):
    service = build_cart_service()
    log = logger.bind(view="CartListView")

    @extend_schema(
        operation_id="carts_create",
        summary="Create cart",
        description="Creates a new, empty cart.",
        request=None,
        responses={201: CartReadSerializer},
    )
    def post(self, request):
        dto = self.service.create_cart()
        self.log.info("Cart created via API", cart_id=dto.id)
        return Response(CartReadSerializer(dto).data, status=status.HTTP_201_CREATED)


@extend_schema(tags=["Carts"])
class CartDetailView(APIView):
    service = build_cart_service()
    log = logger.bind(view="CartDetailView")

    @extend_schema(
        operation_id="carts_retrieve",
        summary="Get cart",
        description=(
            "Returns the cart with every line item expanded to product data. "
            "Items whose product no longer exists are returned with resolved=false."
        ),
        parameters=[CART_ID_PARAM],
        responses={200: CartReadSerializer, 404: NOT_FOUND_RESPONSE},
    )
    def get(self, request, cart_id: int):
        self.log.debug("Fetching cart detail", cart_id=cart_id)
        dto = self.service.get_cart(cart_id)
        return Response(CartReadSerializer(dto).data)

    @extend_schema(
        operation_id="carts_replace_products",
        summary="Replace cart products",
        description="Replaces every line item, in the supplied order.",
        parameters=[CART_ID_PARAM],
        request=CartReplaceSerializer,
        responses={
            200: CartReadSerializer,
            400: VALIDATION_RESPONSE,
            404: NOT_FOUND_RESPONSE,
        },
    )
    def put(self, request, cart_id: int):
        payload = request.data
        products = payload.get("products") if isinstance(payload, dict) else payload
        self.log.info("Replacing cart products via API", cart_id=cart_id)
        dto = self.service.replace_products(cart_id, products)
        return Response(CartReadSerializer(dto).data)

    @extend_schema(
        operation_id="carts_clear",
        summary="Empty cart",
        description="Removes every line item; the cart itself is kept.",
        parameters=[CART_ID_PARAM],
        responses={200: CartReadSerializer, 404: NOT_FOUND_RESPONSE},
    )
    def delete(self, request, cart_id: int):
        self.log.info("Clearing cart via API", cart_id=cart_id)
        dto = self.service.clear_cart(cart_id)
        return Response(CartReadSerializer(dto).data)


@extend_schema(tags=["Carts"])
class CartProductView(APIView):
    service = build_cart_service()
    log = logger.bind(view="CartProductView")

    @extend_schema(
        operation_id="carts_add_product",
        summary="Add product to cart",
        description="Adds one unit; an existing line item is incremented by one.",
        parameters=[CART_ID_PARAM, PRODUCT_ID_PARAM],
        request=None,
        responses={200: CartReadSerializer, 404: NOT_FOUND_RESPONSE},
    )
    def post(self, request, cart_id: int, product_id: int):
        self.log.info("Adding product via API", cart_id=cart_id, product_id=product_id)
        dto = self.service.add_product(cart_id, product_id)
        return Response(CartReadSerializer(dto).data)

    @extend_schema(
        operation_id="carts_update_quantity",
        summary="Set product quantity",
        parameters=[CART_ID_PARAM, PRODUCT_ID_PARAM],
        request=CartQuantitySerializer,
        responses={
            200: CartReadSerializer,
            400: VALIDATION_RESPONSE,
            404: NOT_FOUND_RESPONSE,
        },
    )
    def put(self, request, cart_id: int, product_id: int):
        payload = request.data
        quantity = payload.get("quantity") if isinstance(payload, dict) else None
        self.log.info(
            "Updating quantity via API",
            cart_id=cart_id,
            product_id=product_id,
            quantity=quantity,
        )
        dto = self.service.update_quantity(cart_id, product_id, quantity)
        return Response(CartReadSerializer(dto).data)

    @extend_schema(
        operation_id="carts_remove_product",
        summary="Remove product from cart",
        description="Removing a product that is not in the cart is a no-op.",
        parameters=[CART_ID_PARAM, PRODUCT_ID_PARAM],
        responses={200: CartReadSerializer, 404: NOT_FOUND_RESPONSE},
    )
    def delete(self, request, cart_id: int, product_id: int):
        self.log.info("Removing product via API", cart_id=cart_id, product_id=product_id)
        dto = self.service.remove_product(cart_id, product_id)
        return Response(CartReadSerializer(dto).data)
