from django.apps import AppConfig


class MedicationRequestsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "medication_requests"
    verbose_name = "Medication requests"
