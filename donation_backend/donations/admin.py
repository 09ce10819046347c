from django.contrib import admin

from donations.models import Donation, DonationMedication


class DonationMedicationInline(admin.TabularInline):
    model = DonationMedication
    extra = 0
    can_delete = False
    readonly_fields = ("warehouse", "batch", "quantity", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ("number", "provider", "received_at")
    search_fields = ("number", "provider__name", "provider__provider_id")
    inlines = [DonationMedicationInline]

    # stock moves only through the intake engine
    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
