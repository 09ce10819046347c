# inventory/urls.py
from rest_framework.routers import DefaultRouter

from inventory.views import StockMovementViewSet, WarehouseStockViewSet

router = DefaultRouter()
router.register(r"stock", WarehouseStockViewSet, basename="stock")
router.register(r"movements", StockMovementViewSet, basename="stock-movements")

urlpatterns = router.urls
