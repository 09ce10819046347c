# inventory/serializers.py

from rest_framework import serializers

from inventory.models import StockMovement, WarehouseStock


class WarehouseStockSerializer(serializers.ModelSerializer):
    warehouse_name = serializers.CharField(source="warehouse.name", read_only=True)
    medication_name = serializers.CharField(source="medication.name", read_only=True)
    expires_on = serializers.DateField(source="batch.expires_on", read_only=True)

    class Meta:
        model = WarehouseStock
        fields = [
            "id",
            "warehouse",
            "warehouse_name",
            "medication",
            "medication_name",
            "batch",
            "expires_on",
            "quantity",
            "updated_at",
        ]
        read_only_fields = fields


class StockMovementSerializer(serializers.ModelSerializer):
    class Meta:
        model = StockMovement
        fields = [
            "id",
            "warehouse",
            "medication",
            "batch",
            "direction",
            "reason",
            "quantity",
            "reference",
            "created_at",
        ]
        read_only_fields = fields


class StockAdjustmentSerializer(serializers.Serializer):
    """Input for POST /api/inventory/stock/adjust/."""

    warehouse = serializers.IntegerField(min_value=1)
    medication = serializers.CharField(max_length=32)
    batch = serializers.CharField(max_length=64)
    quantity = serializers.IntegerField(min_value=0)
