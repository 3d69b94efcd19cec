from django.urls import path
from .views import CartListView, CartDetailView, CartProductView

urlpatterns = [
    path("", CartListView.as_view(), name="api-carts-list"),
    path("<int:cart_id>/", CartDetailView.as_view(), name="api-carts-detail"),
    path(
        "<int:cart_id>/products/<int:product_id>/",
        CartProductView.as_view(),
        name="api-carts-product",
    ),
]
