# users/views/auth.py
"""
JWT TOKEN VIEWS

simplejwt's pair/refresh views with targeted anonymous throttling.
No custom credential logic: email + password against the User model.
"""

from rest_framework.throttling import AnonRateThrottle
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView


class LoginAnonThrottle(AnonRateThrottle):
    """
    Anonymous login throttling.
    Uses REST_FRAMEWORK['DEFAULT_THROTTLE_RATES']['anon'].
    """

    scope = "anon"


class TokenCreateView(TokenObtainPairView):
    throttle_classes = [LoginAnonThrottle]


class TokenRefreshThrottledView(TokenRefreshView):
    throttle_classes = [LoginAnonThrottle]
