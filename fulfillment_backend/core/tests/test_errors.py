# core/tests/test_errors.py

from django.db import IntegrityError, OperationalError
from django.test import SimpleTestCase
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from core.api import fulfillment_exception_handler, status_for
from core.db import to_positive_amount, translate_storage_errors
from core.exceptions import (
    CartConflictError,
    CartItemNotFoundError,
    CartReconciliationError,
    ConflictError,
    EmptyCartError,
    ExcessRemovalError,
    InsufficientStockError,
    InvalidArgumentError,
    NoActiveCartError,
    NotFoundError,
    ProductNotFoundError,
    StorageUnavailableError,
    UserNotFoundError,
)


class ErrorTaxonomyTests(SimpleTestCase):
    """
    GUARANTEES:
    - Every error carries a stable code and a string identifier
    - Only Conflict / StorageUnavailable are retryable
    """

    def test_identifier_is_stringified(self):
        exc = ProductNotFoundError("missing", identifier=42)
        self.assertEqual(exc.identifier, "42")
        self.assertEqual(exc.as_dict(), {"code": "PRODUCT_NOT_FOUND", "message": "missing", "identifier": "42"})

    def test_not_found_family(self):
        for cls in (ProductNotFoundError, CartItemNotFoundError, UserNotFoundError):
            self.assertTrue(issubclass(cls, NotFoundError))

    def test_retryable_flags(self):
        self.assertTrue(ConflictError.retryable)
        self.assertTrue(CartReconciliationError.retryable)
        self.assertTrue(StorageUnavailableError.retryable)
        self.assertFalse(InsufficientStockError.retryable)
        self.assertFalse(InvalidArgumentError.retryable)

    def test_insufficient_stock_carries_amounts(self):
        exc = InsufficientStockError("nope", identifier="p1", requested=3, available=2)
        self.assertEqual((exc.requested, exc.available), (3, 2))

    def test_excess_removal_carries_amounts(self):
        exc = ExcessRemovalError("nope", identifier="p1", held=2, requested=5)
        self.assertEqual((exc.held, exc.requested), (2, 5))

    def test_message_defaults_to_code(self):
        self.assertEqual(EmptyCartError().message, "EMPTY_CART")


class AmountValidationTests(SimpleTestCase):
    def test_accepts_positive_ints_and_digit_strings(self):
        self.assertEqual(to_positive_amount(3), 3)
        self.assertEqual(to_positive_amount(" 7 "), 7)

    def test_rejects_non_positive_and_non_integral(self):
        for bad in (0, -1, 1.5, "1.5", "abc", "", "\u00b2", "\u0663", None, True, False):
            with self.subTest(value=bad):
                with self.assertRaises(InvalidArgumentError):
                    to_positive_amount(bad)


class StorageTranslationTests(SimpleTestCase):
    def test_integrity_error_becomes_conflict(self):
        with self.assertRaises(ConflictError) as ctx:
            with translate_storage_errors(identifier="x"):
                raise IntegrityError("duplicate key")
        self.assertIsInstance(ctx.exception.__cause__, IntegrityError)

    def test_conflict_class_is_configurable(self):
        with self.assertRaises(CartConflictError):
            with translate_storage_errors(conflict_cls=CartConflictError):
                raise IntegrityError("duplicate key")

    def test_operational_error_becomes_storage_unavailable(self):
        with self.assertRaises(StorageUnavailableError):
            with translate_storage_errors(identifier="x"):
                raise OperationalError("canceling statement due to lock timeout")

    def test_domain_errors_pass_through(self):
        with self.assertRaises(InvalidArgumentError):
            with translate_storage_errors():
                raise InvalidArgumentError("bad")


class ExceptionHandlerTests(SimpleTestCase):
    def test_status_mapping(self):
        cases = [
            (ProductNotFoundError(), status.HTTP_404_NOT_FOUND),
            (NoActiveCartError(), status.HTTP_404_NOT_FOUND),
            (InvalidArgumentError(), status.HTTP_400_BAD_REQUEST),
            (ExcessRemovalError(), status.HTTP_400_BAD_REQUEST),
            (EmptyCartError(), status.HTTP_400_BAD_REQUEST),
            (InsufficientStockError(), status.HTTP_409_CONFLICT),
            (CartConflictError(), status.HTTP_409_CONFLICT),
            (StorageUnavailableError(), status.HTTP_503_SERVICE_UNAVAILABLE),
        ]
        for exc, expected in cases:
            with self.subTest(exc=type(exc).__name__):
                self.assertEqual(status_for(exc), expected)

    def test_error_body_shape(self):
        response = fulfillment_exception_handler(
            InsufficientStockError("only 2 left", identifier="p1"), {}
        )
        self.assertEqual(response.status_code, 409)
        self.assertEqual(
            response.data,
            {"error": {"code": "INSUFFICIENT_STOCK", "message": "only 2 left", "identifier": "p1"}},
        )

    def test_storage_unavailable_sets_retry_after(self):
        response = fulfillment_exception_handler(StorageUnavailableError("down"), {})
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response["Retry-After"], "1")

    def test_non_domain_errors_fall_through_to_drf(self):
        response = fulfillment_exception_handler(NotAuthenticated(), {})
        self.assertEqual(response.status_code, 401)

    def test_unknown_exceptions_are_not_swallowed(self):
        self.assertIsNone(fulfillment_exception_handler(RuntimeError("boom"), {}))
