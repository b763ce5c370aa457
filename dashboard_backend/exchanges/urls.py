# exchanges/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from exchanges.views import ExchangeViewSet

router = DefaultRouter()
router.register(r"exchanges", ExchangeViewSet, basename="exchanges")

urlpatterns = [
    path("", include(router.urls)),
]
