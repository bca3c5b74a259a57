# products/tests/test_inventory.py

import uuid
from decimal import Decimal
from io import StringIO

from django.core.management import call_command
from django.db import IntegrityError, transaction
from django.test import TestCase

from core.exceptions import (
    InsufficientStockError,
    InvalidArgumentError,
    ProductNotFoundError,
)
from products.models import Product
from products.services.inventory import get_stock, release_stock, reserve_stock


class InventoryLedgerTests(TestCase):
    """
    GUARANTEES:
    - stock >= 0 at all times
    - A refused reservation writes nothing
    - Invalid amounts are rejected before any write
    """

    def setUp(self):
        self.product = Product.objects.create(
            sku="REC-100",
            title="Kind of Blue",
            price=Decimal("29.99"),
            stock=5,
        )

    def _stock(self) -> int:
        self.product.refresh_from_db()
        return self.product.stock

    # =====================================================
    # RESERVE
    # =====================================================

    def test_reserve_decrements_and_returns_new_stock(self):
        self.assertEqual(reserve_stock(product_id=self.product.id, amount=3), 2)
        self.assertEqual(self._stock(), 2)

    def test_reserve_exact_remaining_reaches_zero(self):
        self.assertEqual(reserve_stock(product_id=self.product.id, amount=5), 0)

    def test_oversell_is_refused_without_mutation(self):
        reserve_stock(product_id=self.product.id, amount=3)

        with self.assertRaises(InsufficientStockError) as ctx:
            reserve_stock(product_id=self.product.id, amount=3)

        self.assertEqual(ctx.exception.requested, 3)
        self.assertEqual(ctx.exception.available, 2)
        self.assertEqual(self._stock(), 2)

        self.assertEqual(reserve_stock(product_id=self.product.id, amount=2), 0)

    def test_sequential_exhaustion_never_goes_negative(self):
        successes = 0
        for _ in range(10):
            try:
                reserve_stock(product_id=self.product.id, amount=1)
                successes += 1
            except InsufficientStockError:
                pass

        self.assertEqual(successes, 5)
        self.assertEqual(self._stock(), 0)

    def test_reserve_unknown_product(self):
        with self.assertRaises(ProductNotFoundError):
            reserve_stock(product_id=uuid.uuid4(), amount=1)

    def test_reserve_malformed_product_id(self):
        with self.assertRaises(InvalidArgumentError):
            reserve_stock(product_id="not-a-uuid", amount=1)

    def test_reserve_rejects_invalid_amounts(self):
        for bad in (0, -2, 1.5, True, None):
            with self.subTest(amount=bad):
                with self.assertRaises(InvalidArgumentError):
                    reserve_stock(product_id=self.product.id, amount=bad)
        self.assertEqual(self._stock(), 5)

    # =====================================================
    # RELEASE
    # =====================================================

    def test_release_increments_and_returns_new_stock(self):
        reserve_stock(product_id=self.product.id, amount=4)
        self.assertEqual(release_stock(product_id=self.product.id, amount=4), 5)

    def test_release_unknown_product(self):
        with self.assertRaises(ProductNotFoundError):
            release_stock(product_id=uuid.uuid4(), amount=1)

    def test_release_rejects_invalid_amounts(self):
        with self.assertRaises(InvalidArgumentError):
            release_stock(product_id=self.product.id, amount=0)
        self.assertEqual(self._stock(), 5)

    # =====================================================
    # READ + DB GUARD
    # =====================================================

    def test_get_stock(self):
        self.assertEqual(get_stock(product_id=self.product.id), 5)
        with self.assertRaises(ProductNotFoundError):
            get_stock(product_id=uuid.uuid4())

    def test_database_rejects_negative_stock(self):
        with self.assertRaises(IntegrityError):
            with transaction.atomic():
                Product.objects.filter(pk=self.product.pk).update(stock=-1)


class SeedProductsCommandTests(TestCase):
    def test_seed_is_idempotent(self):
        out = StringIO()
        call_command("seed_products", stdout=out)
        call_command("seed_products", stdout=out)

        self.assertEqual(Product.objects.filter(sku__startswith="REC-0").count(), 5)
        self.assertTrue(all(p.stock > 0 for p in Product.objects.all()))
