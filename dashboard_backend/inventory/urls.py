# inventory/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from inventory.views import StockAdjustmentViewSet, StockLevelViewSet

router = DefaultRouter()
router.register(r"stock-levels", StockLevelViewSet, basename="stock-levels")
router.register(r"stock-adjustments", StockAdjustmentViewSet, basename="stock-adjustments")

urlpatterns = [
    path("", include(router.urls)),
]
