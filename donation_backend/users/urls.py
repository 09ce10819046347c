# users/urls.py

from django.urls import path

from .views import MeView, TokenCreateView, TokenRefreshThrottledView

app_name = "users"

urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("jwt/create/", TokenCreateView.as_view(), name="jwt-create"),
    path("jwt/refresh/", TokenRefreshThrottledView.as_view(), name="jwt-refresh"),
    # ---------------- AUTHENTICATED ----------------
    path("me/", MeView.as_view(), name="me"),
]
