# orders/tests/test_order_converter.py

import uuid
from datetime import timedelta
from decimal import Decimal
from unittest import mock

from django.contrib.auth import get_user_model
from django.db import OperationalError
from django.test import TestCase
from django.utils import timezone

from carts.models import Cart
from carts.services import add_item, get_cart_by_user, get_or_create_cart
from core.exceptions import (
    EmptyCartError,
    InvalidArgumentError,
    NoActiveCartError,
    OrderNotFoundError,
    StorageUnavailableError,
    UserNotFoundError,
)
from orders.models import Order, OrderItem
from orders.services import (
    convert_cart_to_order,
    get_order,
    list_all_orders,
    list_orders_for_email,
    list_orders_for_user,
)
from products.models import Product

User = get_user_model()


class OrderConversionTests(TestCase):
    """
    GUARANTEES:
    - Conversion is atomic: order written AND cart emptied/disabled, or neither
    - Stock is not released on conversion
    - Orders are immutable snapshots
    """

    def setUp(self):
        self.user = User.objects.create_user(email="buyer@example.com", password="pass")
        self.a = Product.objects.create(sku="REC-A", title="Nevermind", price=Decimal("19.99"), stock=10)
        self.b = Product.objects.create(sku="REC-B", title="Rumours", price=Decimal("10.00"), stock=10)

    def _stock(self, product):
        product.refresh_from_db()
        return product.stock

    def test_two_item_conversion(self):
        add_item(user=self.user, product_id=self.a.id, amount=2)
        add_item(user=self.user, product_id=self.b.id, amount=2)

        order = convert_cart_to_order(user=self.user)

        self.assertEqual(order.total, Decimal("59.98"))
        self.assertEqual(order.user_email, "buyer@example.com")
        self.assertEqual(order.payment_method, "Credit Card")
        self.assertTrue(order.order_no.startswith("ORD"))

        lines = {i.product_id: i for i in order.items.all()}
        self.assertEqual(lines[self.a.id].amount, 2)
        self.assertEqual(lines[self.a.id].price, Decimal("19.99"))
        self.assertEqual(lines[self.b.id].title, "Rumours")

        cart = Cart.objects.get(user=self.user)
        self.assertFalse(cart.enabled)
        self.assertEqual(cart.items.count(), 0)
        self.assertEqual(cart.total_price, Decimal("0.00"))

        # Units left with the order; nothing was put back.
        self.assertEqual(self._stock(self.a), 8)
        self.assertEqual(self._stock(self.b), 8)

    def test_order_items_keep_cart_line_order(self):
        zeppelin = Product.objects.create(sku="REC-Z", title="Zeppelin IV", price=Decimal("15.00"), stock=5)
        abbey = Product.objects.create(sku="REC-AR", title="Abbey Road", price=Decimal("15.00"), stock=5)
        add_item(user=self.user, product_id=zeppelin.id, amount=1)
        add_item(user=self.user, product_id=abbey.id, amount=1)

        cart = get_cart_by_user(user=self.user)
        base = timezone.now()
        cart.items.filter(product=zeppelin).update(created_at=base)
        cart.items.filter(product=abbey).update(created_at=base + timedelta(seconds=1))
        cart_titles = [i.title for i in cart.items.order_by("created_at", "id")]

        order = convert_cart_to_order(user=self.user)

        self.assertEqual(cart_titles, ["Zeppelin IV", "Abbey Road"])
        self.assertEqual([i.title for i in order.items.all()], cart_titles)
        self.assertEqual([i.position for i in order.items.all()], [0, 1])

    def test_explicit_payment_method_and_email(self):
        add_item(user=self.user, product_id=self.a.id, amount=1)
        order = convert_cart_to_order(user=self.user, user_email="Billing@Example.com", payment_method="PayPal")
        self.assertEqual(order.payment_method, "PayPal")
        self.assertEqual(order.user_email, "billing@example.com")

    def test_order_keeps_captured_price(self):
        add_item(user=self.user, product_id=self.a.id, amount=1)
        Product.objects.filter(pk=self.a.pk).update(price=Decimal("50.00"))

        order = convert_cart_to_order(user=self.user)

        self.assertEqual(order.total, Decimal("19.99"))
        self.assertEqual(order.items.get().price, Decimal("19.99"))

    def test_empty_cart_is_refused(self):
        get_or_create_cart(user=self.user)

        with self.assertRaises(EmptyCartError):
            convert_cart_to_order(user=self.user)

        self.assertFalse(Order.objects.exists())
        self.assertTrue(get_cart_by_user(user=self.user).enabled)

    def test_no_active_cart(self):
        with self.assertRaises(NoActiveCartError):
            convert_cart_to_order(user=self.user)

    def test_invalid_email_is_refused(self):
        add_item(user=self.user, product_id=self.a.id, amount=1)
        with self.assertRaises(InvalidArgumentError):
            convert_cart_to_order(user=self.user, user_email="nope")
        self.assertFalse(Order.objects.exists())

    def test_failure_leaves_cart_untouched(self):
        add_item(user=self.user, product_id=self.a.id, amount=2)

        with mock.patch.object(Cart, "save", side_effect=OperationalError("lock timeout")):
            with self.assertRaises(StorageUnavailableError):
                convert_cart_to_order(user=self.user)

        self.assertFalse(Order.objects.exists())
        self.assertFalse(OrderItem.objects.exists())
        cart = get_cart_by_user(user=self.user)
        self.assertEqual(cart.items.get().amount, 2)
        self.assertEqual(self._stock(self.a), 8)

    def test_next_add_reactivates_cart(self):
        add_item(user=self.user, product_id=self.a.id, amount=1)
        order = convert_cart_to_order(user=self.user)

        cart = add_item(user=self.user, product_id=self.b.id, amount=1)

        self.assertTrue(cart.enabled)
        self.assertEqual(cart.items.count(), 1)
        self.assertEqual(order.items.count(), 1)


class OrderImmutabilityTests(TestCase):
    def setUp(self):
        user = User.objects.create_user(email="buyer@example.com", password="pass")
        product = Product.objects.create(sku="REC-I", title="Blue", price=Decimal("5.00"), stock=3)
        add_item(user=user, product_id=product.id, amount=1)
        self.order = convert_cart_to_order(user=user)

    def test_order_cannot_be_changed(self):
        self.order.total = Decimal("0.01")
        with self.assertRaises(ValueError):
            self.order.save()

    def test_order_cannot_be_deleted(self):
        with self.assertRaises(ValueError):
            self.order.delete()

    def test_order_item_cannot_be_changed(self):
        item = self.order.items.get()
        item.amount = 99
        with self.assertRaises(ValueError):
            item.save()


class OrderReadTests(TestCase):
    def setUp(self):
        self.alice = User.objects.create_user(email="alice@example.com", password="pass")
        self.bob = User.objects.create_user(email="bob@example.com", password="pass")
        product = Product.objects.create(sku="REC-R", title="Kind of Blue", price=Decimal("10.00"), stock=10)

        add_item(user=self.alice, product_id=product.id, amount=1)
        self.first = convert_cart_to_order(user=self.alice)
        add_item(user=self.alice, product_id=product.id, amount=2)
        self.second = convert_cart_to_order(user=self.alice)
        add_item(user=self.bob, product_id=product.id, amount=1)
        self.bobs = convert_cart_to_order(user=self.bob)

        # Pin order dates so "newest first" does not depend on clock resolution.
        base = timezone.now()
        for offset, order in enumerate((self.first, self.second, self.bobs)):
            Order.objects.filter(pk=order.pk).update(order_date=base + timedelta(minutes=offset))

    def test_orders_for_user_newest_first(self):
        self.assertEqual(list_orders_for_user(user=self.alice), [self.second, self.first])

    def test_orders_for_email(self):
        self.assertEqual(list_orders_for_email(email="BOB@example.com"), [self.bobs])
        with self.assertRaises(UserNotFoundError):
            list_orders_for_email(email="ghost@example.com")

    def test_all_orders(self):
        self.assertEqual(list_all_orders().count(), 3)

    def test_get_order(self):
        self.assertEqual(get_order(order_id=self.first.id), self.first)
        with self.assertRaises(OrderNotFoundError):
            get_order(order_id=uuid.uuid4())
        with self.assertRaises(InvalidArgumentError):
            get_order(order_id="garbage")
