# medication_requests/urls.py
from rest_framework.routers import SimpleRouter

from medication_requests.views import MedicationRequestViewSet

router = SimpleRouter()
router.register(r"", MedicationRequestViewSet, basename="requests")

urlpatterns = router.urls
