from django.contrib import admin

from catalog.models import Batch, MedicalCenter, Medication, Person, Provider, Warehouse


@admin.register(Warehouse)
class WarehouseAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "status")
    list_filter = ("status",)
    search_fields = ("name",)


@admin.register(Medication)
class MedicationAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "status", "global_available_quantity")
    list_filter = ("status",)
    search_fields = ("code", "name")
    readonly_fields = ("global_available_quantity",)


@admin.register(Batch)
class BatchAdmin(admin.ModelAdmin):
    list_display = ("code", "medication", "manufactured_on", "expires_on")
    list_filter = ("expires_on",)
    search_fields = ("code", "medication__name")


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ("national_id", "first_name", "last_name")
    search_fields = ("national_id", "first_name", "last_name")


@admin.register(Provider)
class ProviderAdmin(admin.ModelAdmin):
    list_display = ("provider_id", "name", "phone")
    search_fields = ("provider_id", "name")


admin.site.register(MedicalCenter)
