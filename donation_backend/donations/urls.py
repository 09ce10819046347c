# donations/urls.py
from rest_framework.routers import SimpleRouter

from donations.views import DonationViewSet

router = SimpleRouter()
router.register(r"", DonationViewSet, basename="donations")

urlpatterns = router.urls
