from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="WarehouseStock",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("quantity", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("batch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock", to="catalog.batch")),
                ("medication", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock", to="catalog.medication")),
                ("warehouse", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock", to="catalog.warehouse")),
            ],
            options={
                "ordering": ["warehouse_id", "medication_id", "batch_id"],
                "indexes": [
                    models.Index(fields=["warehouse", "batch"], name="inv_stock_wh_batch_idx"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("warehouse", "medication", "batch"), name="uq_stock_cell"),
                    models.CheckConstraint(condition=models.Q(("quantity__gte", 0)), name="chk_stock_quantity_gte_zero"),
                ],
            },
        ),
        migrations.CreateModel(
            name="StockMovement",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("direction", models.CharField(choices=[("IN", "Stock In"), ("OUT", "Stock Out")], max_length=3)),
                ("reason", models.CharField(choices=[("DONATION", "Donation received"), ("DONATION_REVERSAL", "Donation deleted"), ("DISPATCH", "Dispatched to beneficiary"), ("DISPATCH_REVERSAL", "Dispatch deleted"), ("ADJUSTMENT", "Manual adjustment")], max_length=20)),
                ("quantity", models.PositiveIntegerField()),
                ("reference", models.CharField(blank=True, max_length=64)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("batch", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_movements", to="catalog.batch")),
                ("medication", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_movements", to="catalog.medication")),
                ("warehouse", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="stock_movements", to="catalog.warehouse")),
            ],
            options={
                "ordering": ["created_at", "id"],
                "indexes": [
                    models.Index(fields=["reason"], name="inv_move_reason_idx"),
                    models.Index(fields=["batch", "created_at"], name="inv_move_batch_idx"),
                    models.Index(fields=["reference"], name="inv_move_ref_idx"),
                ],
            },
        ),
    ]
