"""
======================================================
PATH: orders/migrations/0002_orderitem_position.py
======================================================
MIGRATION: ORDER ITEMS KEEP THE CART'S LINE ORDER
"""

from __future__ import annotations

from django.db import migrations, models


class Migration(migrations.Migration):
    dependencies = [
        ("orders", "0001_initial"),
    ]

    operations = [
        migrations.AddField(
            model_name="orderitem",
            name="position",
            field=models.PositiveIntegerField(
                default=0,
                help_text="Index of the line in the cart it was converted from",
            ),
        ),
        migrations.AlterModelOptions(
            name="orderitem",
            options={"ordering": ["position", "id"]},
        ),
    ]
