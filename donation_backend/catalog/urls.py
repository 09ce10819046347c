# catalog/urls.py
from rest_framework.routers import DefaultRouter

from catalog.views import (
    BatchViewSet,
    MedicalCenterViewSet,
    MedicationViewSet,
    PersonViewSet,
    ProviderViewSet,
    WarehouseViewSet,
)

router = DefaultRouter()
router.register(r"warehouses", WarehouseViewSet, basename="warehouses")
router.register(r"medications", MedicationViewSet, basename="medications")
router.register(r"batches", BatchViewSet, basename="batches")
router.register(r"persons", PersonViewSet, basename="persons")
router.register(r"providers", ProviderViewSet, basename="providers")
router.register(r"medical-centers", MedicalCenterViewSet, basename="medical-centers")

urlpatterns = router.urls
