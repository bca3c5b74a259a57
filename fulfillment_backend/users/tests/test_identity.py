# users/tests/test_identity.py

import importlib

from django.apps import apps as django_apps
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.test import TestCase

from core.exceptions import InvalidArgumentError, UserNotFoundError
from users.services.lookup import get_user_by_email, resolve_user_by_email

User = get_user_model()


class EmailIdentityTests(TestCase):
    """
    GUARANTEES:
    - Emails are stored lower-cased
    - Lookups are case-insensitive
    - Two accounts can never differ only by email case
    """

    def setUp(self):
        self.user = User.objects.create_user(email="  Alice@Example.com ", password="pass")

    def test_email_is_normalized_on_create(self):
        self.assertEqual(self.user.email, "alice@example.com")
        self.assertEqual(self.user.role, User.ROLE_CUSTOMER)

    def test_lookup_is_case_insensitive(self):
        self.assertEqual(get_user_by_email(email="ALICE@example.COM"), self.user)

    def test_unknown_email_returns_none(self):
        self.assertIsNone(get_user_by_email(email="nobody@example.com"))
        self.assertIsNone(get_user_by_email(email=""))

    def test_resolve_raises_for_unknown_email(self):
        with self.assertRaises(UserNotFoundError):
            resolve_user_by_email(email="nobody@example.com")

    def test_resolve_rejects_blank_email(self):
        with self.assertRaises(InvalidArgumentError):
            resolve_user_by_email(email="   ")

    def test_case_variant_duplicate_rejected_by_validation(self):
        with self.assertRaises(ValidationError):
            User.objects.create_user(email="ALICE@example.com", password="pass")

    def test_case_variant_duplicate_rejected_by_database(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                User(email="ALICE@EXAMPLE.COM").save()

    def test_superuser_is_admin(self):
        admin = User.objects.create_superuser(email="root@example.com", password="pass")
        self.assertTrue(admin.is_admin)
        self.assertTrue(admin.is_staff)

    def test_authentication_by_natural_key_ignores_case(self):
        self.assertEqual(User.objects.get_by_natural_key("ALICE@EXAMPLE.COM"), self.user)


class NormalizeEmailsMigrationTests(TestCase):
    def test_normalization_is_idempotent(self):
        migration = importlib.import_module("users.migrations.0002_normalize_user_emails")

        user = User.objects.create_user(email="bob@example.com", password="pass")
        User.objects.filter(pk=user.pk).update(email="Bob@Example.COM")

        migration.normalize_emails(django_apps, None)
        migration.normalize_emails(django_apps, None)

        user.refresh_from_db()
        self.assertEqual(user.email, "bob@example.com")
