# inventory/views.py

"""
INVENTORY VIEWS

Purpose:
- Read access to warehouse stock cells and the movement audit trail.
- Manual adjustment (absolute quantity) through the stock ledger.

Quantities are never edited through a serializer save; the adjust action is
the only write and it delegates to inventory.services.inventory_adjustments.
"""

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from common.api.mixins import GatewayMixin
from inventory.models import StockMovement, WarehouseStock
from inventory.serializers import (
    StockAdjustmentSerializer,
    StockMovementSerializer,
    WarehouseStockSerializer,
)
from inventory.services.inventory_adjustments import adjust_inventory


class WarehouseStockViewSet(GatewayMixin, viewsets.ReadOnlyModelViewSet):
    serializer_class = WarehouseStockSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["warehouse", "medication", "batch"]

    def get_queryset(self):
        qs = WarehouseStock.objects.select_related("warehouse", "medication", "batch")

        in_stock = (self.request.query_params.get("in_stock") or "").strip().lower()
        if in_stock in ("1", "true", "yes"):
            qs = qs.filter(quantity__gt=0)

        return qs

    @action(detail=False, methods=["post"], url_path="adjust")
    def adjust(self, request):
        """
        POST /api/inventory/stock/adjust/
        body: {warehouse, medication, batch, quantity}
        """
        serializer = StockAdjustmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        v = serializer.validated_data

        stock = adjust_inventory(
            gateway=self.get_gateway(),
            warehouse_id=v["warehouse"],
            medication_code=v["medication"],
            batch_code=v["batch"],
            quantity=v["quantity"],
            user=request.user,
        )

        stock = WarehouseStock.objects.select_related("warehouse", "medication", "batch").get(pk=stock.pk)
        return Response(WarehouseStockSerializer(stock).data, status=status.HTTP_200_OK)


class StockMovementViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = StockMovement.objects.all()
    serializer_class = StockMovementSerializer
    permission_classes = [IsAuthenticated]
    filterset_fields = ["warehouse", "medication", "batch", "reason", "direction", "reference"]
