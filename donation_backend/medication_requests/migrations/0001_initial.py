from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="MedicationRequest",
            fields=[
                ("number", models.BigAutoField(primary_key=True, serialize=False)),
                ("pathology", models.CharField(blank=True, max_length=255)),
                ("status", models.CharField(choices=[("PENDIENTE", "Pending"), ("EN_REVISION", "In review"), ("APROBADA", "Approved"), ("RECHAZADA", "Rejected"), ("INCOMPLETA", "Incomplete"), ("DESPACHADA", "Dispatched"), ("CANCELADA", "Cancelled")], db_index=True, default="PENDIENTE", max_length=16)),
                ("observations", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("beneficiary", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="medication_requests", to="catalog.person")),
                ("medical_center", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="medication_requests", to="catalog.medicalcenter")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="medication_requests", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at", "-number"],
            },
        ),
        migrations.CreateModel(
            name="RequestedMedication",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=255)),
                ("dosage", models.CharField(blank=True, max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("request", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="requested_medications", to="medication_requests.medicationrequest")),
            ],
            options={
                "ordering": ["id"],
            },
        ),
        migrations.CreateModel(
            name="RequestDetail",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField()),
                ("dosage_instructions", models.CharField(blank=True, max_length=255)),
                ("treatment_duration", models.CharField(blank=True, max_length=120)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("batch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="request_details", to="catalog.batch")),
                ("request", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="details", to="medication_requests.medicationrequest")),
                ("warehouse", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="request_details", to="catalog.warehouse")),
            ],
            options={
                "ordering": ["id"],
                "constraints": [
                    models.UniqueConstraint(fields=("request", "warehouse", "batch"), name="uq_request_detail_allocation"),
                    models.CheckConstraint(condition=models.Q(("quantity__gt", 0)), name="chk_request_detail_qty_gt_zero"),
                ],
            },
        ),
    ]
