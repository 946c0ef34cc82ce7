import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="InventoryItem",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                ("name", models.CharField(max_length=255)),
                ("sku", models.CharField(blank=True, max_length=64)),
                ("category", models.CharField(blank=True, max_length=64)),
                ("unit", models.CharField(default="unit", max_length=32)),
                ("quantity", models.IntegerField(default=0)),
                ("reorder_threshold", models.PositiveIntegerField(default=0)),
            ],
            options={
                "db_table": "inventory_item",
                "indexes": [
                    models.Index(fields=["tenant_id", "name"], name="inventory_tenant_name_idx"),
                    models.Index(fields=["tenant_id", "sku"], name="inventory_tenant_sku_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=models.Q(quantity__gte=0), name="inventory_item_quantity_gte_0"),
                ],
            },
        ),
        migrations.CreateModel(
            name="InventoryTransaction",
            fields=[
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("tenant_id", models.UUIDField(db_index=True)),
                (
                    "kind",
                    models.CharField(
                        choices=[("RECEIVED", "Received"), ("DISPENSED", "Dispensed"), ("ADJUSTED", "Adjusted")],
                        max_length=16,
                    ),
                ),
                ("quantity_delta", models.IntegerField()),
                ("quantity_after", models.IntegerField()),
                ("reference", models.CharField(blank=True, max_length=128)),
                ("reason", models.CharField(blank=True, max_length=500)),
                ("actor_user_id", models.BigIntegerField(blank=True, null=True)),
                (
                    "item",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="transactions",
                        to="inventory.inventoryitem",
                    ),
                ),
            ],
            options={
                "db_table": "inventory_transaction",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["tenant_id", "item", "created_at"], name="inv_txn_item_time_idx"),
                ],
            },
        ),
    ]
