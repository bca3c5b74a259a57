# users/services/lookup.py

"""
USER IDENTITY LOOKUP

The only place that resolves userId <-> email for cart/order ownership.
Emails are compared case-insensitively (stored lower-cased).
"""

from __future__ import annotations

from django.contrib.auth import get_user_model

from core.exceptions import InvalidArgumentError, UserNotFoundError
from users.models import normalize_identity_email


def get_user_by_email(*, email):
    """Return the user for `email`, or None."""
    normalized = normalize_identity_email(email)
    if not normalized:
        return None
    User = get_user_model()
    return User.objects.filter(email__iexact=normalized).first()


def resolve_user_by_email(*, email):
    """Like get_user_by_email() but raises UserNotFoundError."""
    normalized = normalize_identity_email(email)
    if not normalized:
        raise InvalidArgumentError("email is required", identifier="email")

    user = get_user_by_email(email=normalized)
    if user is None:
        raise UserNotFoundError(
            f"User not found with email {normalized}", identifier=normalized
        )
    return user

