from django.conf import settings
from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        ("medication_requests", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Dispatch",
            fields=[
                ("number", models.BigAutoField(primary_key=True, serialize=False)),
                ("dispatched_at", models.DateTimeField(default=django.utils.timezone.now)),
                ("dispatched_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="dispatches", to=settings.AUTH_USER_MODEL)),
                ("receiver", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="received_dispatches", to="catalog.person")),
                ("request", models.OneToOneField(on_delete=django.db.models.deletion.PROTECT, related_name="dispatch", to="medication_requests.medicationrequest")),
            ],
            options={
                "ordering": ["-dispatched_at", "-number"],
            },
        ),
    ]
