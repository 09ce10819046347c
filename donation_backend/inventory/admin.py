from django.contrib import admin

from inventory.models import StockMovement, WarehouseStock


@admin.register(WarehouseStock)
class WarehouseStockAdmin(admin.ModelAdmin):
    list_display = ("warehouse", "medication", "batch", "quantity", "updated_at")
    list_filter = ("warehouse",)
    search_fields = ("medication__name", "batch__code")
    readonly_fields = ("warehouse", "medication", "batch", "quantity", "updated_at")

    def has_add_permission(self, request):
        return False


@admin.register(StockMovement)
class StockMovementAdmin(admin.ModelAdmin):
    list_display = ("created_at", "direction", "reason", "batch", "warehouse", "quantity", "reference")
    list_filter = ("reason", "direction")
    search_fields = ("reference", "batch__code")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
