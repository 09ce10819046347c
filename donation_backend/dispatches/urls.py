# dispatches/urls.py
from rest_framework.routers import SimpleRouter

from dispatches.views import DispatchViewSet

router = SimpleRouter()
router.register(r"", DispatchViewSet, basename="dispatches")

urlpatterns = router.urls
