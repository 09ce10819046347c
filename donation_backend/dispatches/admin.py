from django.contrib import admin

from dispatches.models import Dispatch


@admin.register(Dispatch)
class DispatchAdmin(admin.ModelAdmin):
    list_display = ("number", "request", "receiver", "dispatched_at")
    search_fields = ("number", "request__number", "receiver__national_id")
    readonly_fields = ("number", "request", "receiver", "dispatched_by", "dispatched_at")

    # dispatches are created and reversed through the API so stock stays in step
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
