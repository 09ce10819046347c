# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/

- /api/health/ (AllowAny) checks DB connectivity.
- Django admin path is configurable via env var (ADMIN_PATH)
  to reduce bot scanning/noise.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import admin
from django.db import DatabaseError, connections
from django.urls import include, path
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger("common.health")


# ------------------ API ROOT (PUBLIC) ------------------
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(
        {
            "message": "Medication donation API is running",
            "auth": {
                "jwt_create": "/api/auth/jwt/create/",
                "jwt_refresh": "/api/auth/jwt/refresh/",
                "me": "/api/auth/me/",
            },
            "modules": {
                "requests": "/api/requests/",
                "dispatches": "/api/dispatches/",
                "donations": "/api/donations/",
                "inventory": "/api/inventory/",
                "catalog": "/api/catalog/",
            },
        }
    )


# ------------------ HEALTH CHECK (PUBLIC) ------------------
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """
    Minimal operational endpoint:
    - Confirms app is responding
    - Confirms DB connection + simple query works
    """
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.exception("Health check could not reach the database")
        return Response({"status": "degraded", "db": "down"}, status=503)

    return Response({"status": "ok", "db": "ok"})


# ------------------ ADMIN PATH (HARDENED) ------------------
# In production set ADMIN_PATH to something non-obvious (keep the trailing slash).
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # Auth (SimpleJWT) & current user
    path("auth/", include("users.urls")),
    # Core workflow
    path("requests/", include("medication_requests.urls")),
    path("dispatches/", include("dispatches.urls")),
    path("donations/", include("donations.urls")),
    path("inventory/", include("inventory.urls")),
    # Reference data
    path("catalog/", include("catalog.urls")),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("api/", include(api_urlpatterns)),
]
