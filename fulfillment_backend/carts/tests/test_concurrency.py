# carts/tests/test_concurrency.py

"""
Parallel cart mutations for one user.

Needs a backend with row-level locking (PostgreSQL via TEST_DATABASE_URL);
skipped on SQLite.
"""

import threading
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from carts.services import add_item, get_or_create_cart, remove_item
from products.models import Product

User = get_user_model()


def _run_parallel(n, target):
    errors = []
    lock = threading.Lock()
    barrier = threading.Barrier(n)

    def worker():
        try:
            barrier.wait()
            target()
        except Exception as exc:
            with lock:
                errors.append(exc)
        finally:
            connection.close()

    threads = [threading.Thread(target=worker) for _ in range(n)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    return errors


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentCartMutationTests(TransactionTestCase):
    """
    GUARANTEES:
    - N parallel add_item calls on one cart lose no update
    - N parallel remove_item calls give back exactly what they took
    - total_price and stock agree with the final line amount
    """

    THREADS = 8

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass")
        self.product = Product.objects.create(
            sku="REC-CART-CONC",
            title="Concurrency Test Pressing",
            price=Decimal("12.50"),
            stock=20,
        )
        self.cart = get_or_create_cart(user=self.user)

    def _line_amount(self):
        item = self.cart.items.filter(product=self.product).first()
        return 0 if item is None else item.amount

    def test_parallel_adds_lose_no_update(self):
        n = self.THREADS
        errors = _run_parallel(
            n, lambda: add_item(user=self.user, product_id=self.product.id, amount=1)
        )

        self.assertEqual(errors, [])
        self.cart.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self._line_amount(), n)
        self.assertEqual(self.cart.total_price, Decimal("12.50") * n)
        self.assertEqual(self.product.stock, 20 - n)

    def test_parallel_removes_lose_no_update(self):
        n = self.THREADS
        add_item(user=self.user, product_id=self.product.id, amount=n + 2)

        errors = _run_parallel(
            n, lambda: remove_item(user=self.user, product_id=self.product.id, amount=1)
        )

        self.assertEqual(errors, [])
        self.cart.refresh_from_db()
        self.product.refresh_from_db()
        self.assertEqual(self._line_amount(), 2)
        self.assertEqual(self.cart.total_price, Decimal("25.00"))
        self.assertEqual(self.product.stock, 18)
