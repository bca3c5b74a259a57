"""
PATH: users/models/user.py

CUSTOM USER MODEL

Identity for cart/order ownership:
- email is the canonical identity (USERNAME_FIELD) and is stored lower-cased.
- Case-insensitive uniqueness is enforced by a functional unique constraint
  (see migration 0002_normalize_user_emails).

Credential issuance lives outside this service; passwords are only kept so the
Django admin keeps working.
"""

from __future__ import annotations

import uuid

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models.functions import Lower


def normalize_identity_email(email) -> str:
    return (email or "").strip().lower()


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def get_by_natural_key(self, username):
        return self.get(email__iexact=normalize_identity_email(username))

    def create_user(self, email=None, password=None, **extra_fields):
        email = normalize_identity_email(email)
        if not email:
            raise ValueError("An email address is required")

        extra_fields.setdefault("is_active", True)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean()
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not email:
            raise ValueError("Superuser must have an email")
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", User.ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_ADMIN = "admin"
    ROLE_CUSTOMER = "customer"

    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_CUSTOMER, "Customer"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    email = models.EmailField(unique=True)

    first_name = models.CharField(max_length=100, blank=True)
    last_name = models.CharField(max_length=100, blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_CUSTOMER)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]
        constraints = [
            models.UniqueConstraint(
                Lower("email"),
                name="uniq_user_email_ci",
            )
        ]

    def clean(self):
        self.email = normalize_identity_email(self.email)
        if not self.email:
            raise ValidationError({"email": "email is required"})

    @property
    def is_admin(self) -> bool:
        return self.role == self.ROLE_ADMIN or bool(self.is_superuser)

    def __str__(self):
        return f"{self.email} ({self.role})"
