# products/tests/test_concurrency.py

"""
Real parallel reservations against one product row.

Needs a backend with row-level locking (PostgreSQL via TEST_DATABASE_URL);
skipped on SQLite. The sequential equivalent runs everywhere in
test_inventory.py.
"""

import threading
from decimal import Decimal

from django.db import connection
from django.test import TransactionTestCase, skipUnlessDBFeature

from core.exceptions import InsufficientStockError
from products.models import Product
from products.services.inventory import reserve_stock


@skipUnlessDBFeature("has_select_for_update")
class ConcurrentReservationTests(TransactionTestCase):
    """
    GUARANTEES:
    - N parallel reservations of 1 unit against stock S: exactly min(N, S) succeed
    - Final stock is S - successes, never negative
    """

    def test_parallel_reservations_never_oversell(self):
        product = Product.objects.create(
            sku="REC-CONC",
            title="Concurrency Test Pressing",
            price=Decimal("10.00"),
            stock=5,
        )

        results = []
        lock = threading.Lock()
        barrier = threading.Barrier(12)

        def worker():
            try:
                barrier.wait()
                reserve_stock(product_id=product.id, amount=1)
                outcome = "ok"
            except InsufficientStockError:
                outcome = "refused"
            finally:
                connection.close()
            with lock:
                results.append(outcome)

        threads = [threading.Thread(target=worker) for _ in range(12)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        product.refresh_from_db()
        self.assertEqual(results.count("ok"), 5)
        self.assertEqual(results.count("refused"), 7)
        self.assertEqual(product.stock, 0)
