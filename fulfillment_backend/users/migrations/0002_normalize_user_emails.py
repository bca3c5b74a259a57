"""
======================================================
PATH: users/migrations/0002_normalize_user_emails.py
======================================================
MIGRATION: NORMALIZE EMAIL IDENTITY (case-insensitive)

Purpose:
- Lower-case every stored email so identity lookups by email are stable.
- Add a case-insensitive unique constraint on email.

Idempotent:
- Re-running the data step on already-normalized rows changes nothing.
- If two rows collide case-insensitively the migration stops and names them;
  merging accounts is a manual decision.
"""

from __future__ import annotations

from collections import defaultdict

from django.db import migrations, models
from django.db.models.functions import Lower


def normalize_emails(apps, schema_editor):
    User = apps.get_model("users", "User")

    by_normalized = defaultdict(list)
    for row in User.objects.only("id", "email").iterator():
        by_normalized[(row.email or "").strip().lower()].append(row)

    duplicates = {k: v for k, v in by_normalized.items() if len(v) > 1}
    if duplicates:
        listing = ", ".join(sorted(duplicates.keys()))
        raise RuntimeError(
            f"Case-insensitive duplicate user emails must be merged before migrating: {listing}"
        )

    for normalized, rows in by_normalized.items():
        row = rows[0]
        if row.email != normalized:
            User.objects.filter(pk=row.pk).update(email=normalized)


class Migration(migrations.Migration):
    dependencies = [
        ("users", "0001_initial"),
    ]

    operations = [
        migrations.RunPython(normalize_emails, migrations.RunPython.noop),
        migrations.AddConstraint(
            model_name="user",
            constraint=models.UniqueConstraint(
                Lower("email"),
                name="uniq_user_email_ci",
            ),
        ),
    ]
