# users/models/__init__.py

from .user import User, UserManager, normalize_identity_email

__all__ = [
    "User",
    "UserManager",
    "normalize_identity_email",
]
