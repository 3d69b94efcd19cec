from django.urls import path, include

urlpatterns = [
    path("", include("apps.catalog.urls")),
    path("carts/", include("apps.carts.urls")),
]
