from django.contrib import admin

from medication_requests.models import MedicationRequest, RequestDetail, RequestedMedication


class RequestedMedicationInline(admin.TabularInline):
    model = RequestedMedication
    extra = 0


class RequestDetailInline(admin.TabularInline):
    model = RequestDetail
    extra = 0
    raw_id_fields = ("batch",)


@admin.register(MedicationRequest)
class MedicationRequestAdmin(admin.ModelAdmin):
    list_display = ("number", "user", "beneficiary", "status", "created_at")
    list_filter = ("status",)
    search_fields = ("number", "user__email", "beneficiary__national_id", "pathology")
    # status moves only through the state machine
    readonly_fields = ("status", "created_at", "updated_at")
    inlines = [RequestedMedicationInline, RequestDetailInline]
