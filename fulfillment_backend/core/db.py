# core/db.py

"""
STORAGE ERROR TRANSLATION

Driver-level database errors are mapped onto the fulfillment taxonomy:
- IntegrityError                  -> ConflictError (constraint race, retry)
- OperationalError/InterfaceError -> StorageUnavailableError (timeout, lost conn)

Lock/statement timeouts come from settings (see backend/settings/base.py), so a
blocked storage call always ends in one of these instead of hanging.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

from django.db import IntegrityError, InterfaceError, OperationalError

from core.exceptions import (
    ConflictError,
    InvalidArgumentError,
    StorageUnavailableError,
)

logger = logging.getLogger(__name__)


def to_positive_amount(value, *, field: str = "amount") -> int:
    """
    Amount normalizer.
    HARD RULE: amounts are whole units >= 1 (bools rejected).
    """
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{field} must be a whole number", identifier=field)

    if isinstance(value, str):
        s = value.strip()
        if not (s.isascii() and s.isdigit()):
            raise InvalidArgumentError(f"{field} must be a whole number", identifier=field)
        value = int(s)

    if not isinstance(value, int):
        raise InvalidArgumentError(f"{field} must be a whole number", identifier=field)

    if value <= 0:
        raise InvalidArgumentError(f"{field} must be greater than zero", identifier=field)

    return value


@contextmanager
def translate_storage_errors(*, identifier=None, conflict_cls=ConflictError):
    try:
        yield
    except IntegrityError as exc:
        logger.warning(
            "Storage conflict",
            extra={"identifier": str(identifier) if identifier else None},
        )
        raise conflict_cls(
            f"Concurrent update conflict: {exc}", identifier=identifier
        ) from exc
    except (OperationalError, InterfaceError) as exc:
        logger.warning(
            "Storage unavailable",
            extra={"identifier": str(identifier) if identifier else None},
        )
        raise StorageUnavailableError(
            f"Storage unavailable: {exc}", identifier=identifier
        ) from exc
