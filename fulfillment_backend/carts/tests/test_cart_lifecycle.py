# carts/tests/test_cart_lifecycle.py

from types import SimpleNamespace

from django.test import SimpleTestCase

from carts.services.cart_lifecycle import (
    STATE_ACTIVE,
    STATE_DISABLED,
    STATE_NO_CART,
    can_transition,
    cart_state,
    reactivated_fields,
    validate_transition,
)
from core.exceptions import InvalidCartTransitionError


class CartLifecycleTests(SimpleTestCase):
    """
    GUARANTEES:
    - Only NO_CART->ACTIVE, DISABLED->ACTIVE and ACTIVE->DISABLED are legal
    - Pure rules: no DB access
    """

    def test_state_derivation(self):
        self.assertEqual(cart_state(None), STATE_NO_CART)
        self.assertEqual(cart_state(SimpleNamespace(enabled=True)), STATE_ACTIVE)
        self.assertEqual(cart_state(SimpleNamespace(enabled=False)), STATE_DISABLED)

    def test_allowed_transitions(self):
        self.assertTrue(can_transition(from_state=STATE_NO_CART, to_state=STATE_ACTIVE))
        self.assertTrue(can_transition(from_state=STATE_DISABLED, to_state=STATE_ACTIVE))
        self.assertTrue(can_transition(from_state=STATE_ACTIVE, to_state=STATE_DISABLED))

    def test_illegal_transitions(self):
        self.assertFalse(can_transition(from_state=STATE_ACTIVE, to_state=STATE_ACTIVE))
        self.assertFalse(can_transition(from_state=STATE_NO_CART, to_state=STATE_DISABLED))
        self.assertFalse(can_transition(from_state=STATE_DISABLED, to_state=STATE_DISABLED))

    def test_validate_transition_raises(self):
        with self.assertRaises(InvalidCartTransitionError):
            validate_transition(cart=SimpleNamespace(enabled=False, id="c1"), target_state=STATE_DISABLED)

    def test_reactivation_resets_total(self):
        fields = reactivated_fields()
        self.assertTrue(fields["enabled"])
        self.assertEqual(str(fields["total_price"]), "0.00")
