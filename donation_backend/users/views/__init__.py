from .auth import TokenCreateView, TokenRefreshThrottledView
from .me import MeView

__all__ = ["MeView", "TokenCreateView", "TokenRefreshThrottledView"]
