# backend/urls.py
"""
PROJECT URLS

Everything lives under /api/ except the admin (ADMIN_PATH) and a redirect
from / to the Swagger UI.

    /api/               module index (public)
    /api/health/        liveness + database ping (public)
    /api/auth/jwt/...   SimpleJWT token create / refresh
    /api/inventory/     stock levels, adjustment ledger
    /api/exchanges/     exchanges + status transitions
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import admin
from django.db import DatabaseError, connection
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import extend_schema, inline_serializer
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import serializers, status
from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

logger = logging.getLogger(__name__)

API_MODULES = {
    "inventory": {
        "stock_levels": "/api/inventory/stock-levels/",
        "stock_adjustments": "/api/inventory/stock-adjustments/",
    },
    "exchanges": {
        "exchanges": "/api/exchanges/exchanges/",
    },
}


@extend_schema(
    responses=inline_serializer(
        name="ApiIndex",
        fields={
            "name": serializers.CharField(),
            "auth": serializers.DictField(),
            "docs": serializers.DictField(),
            "modules": serializers.DictField(),
        },
    )
)
@api_view(["GET"])
@permission_classes([AllowAny])
def api_index(request):
    return Response(
        {
            "name": "Dashboard Backend API",
            "auth": {
                "jwt_create": "/api/auth/jwt/create/",
                "jwt_refresh": "/api/auth/jwt/refresh/",
            },
            "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
            "modules": API_MODULES,
        }
    )


@extend_schema(
    responses=inline_serializer(
        name="HealthStatus",
        fields={"status": serializers.CharField(), "db": serializers.CharField()},
    )
)
@api_view(["GET"])
@permission_classes([AllowAny])
@throttle_classes([])
def health(request):
    """Process is up and the default database answers SELECT 1 (503 otherwise)."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.exception("Health check: database unavailable")
        return Response(
            {"status": "degraded", "db": "down"},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response({"status": "ok", "db": "ok"})


admin_path = getattr(settings, "ADMIN_PATH", "admin/").strip("/") + "/"

api_urlpatterns = [
    path("", api_index, name="api-index"),
    path("health/", health, name="health"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("auth/jwt/create/", TokenObtainPairView.as_view(), name="jwt-create"),
    path("auth/jwt/refresh/", TokenRefreshView.as_view(), name="jwt-refresh"),
    path("inventory/", include("inventory.urls")),
    path("exchanges/", include("exchanges.urls")),
]

urlpatterns = [
    path(admin_path, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
