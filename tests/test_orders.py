import unittest
from datetime import datetime, timezone

from storefront.database.local_storage import MemoryStorage
from storefront.modules.cart.schemas import CartProduct
from storefront.modules.cart.service import CartService
from storefront.modules.orders.schemas import CardDetails, CheckoutRequest, ShippingAddress
from storefront.modules.orders.service import OrderService, shipping_cost_for
from storefront.modules.users.schemas import User
from tests.fakes import FakeClock


def _user(user_id="user_1"):
    return User(id=user_id, email="a@x.com", first_name="Ann", last_name="Lee",
                created_at=datetime(2024, 1, 1, tzinfo=timezone.utc))


def _request(**overrides):
    data = dict(
        shipping_address=ShippingAddress(
            first_name="Ann", last_name="Lee", email="a@x.com", phone="(555) 123-4567",
            address="1 Main St", city="Tbilisi", postal_code="0100",
        ),
        payment_method="card",
        card_details=CardDetails(card_number="4111 1111 1111 1111", card_name="Ann Lee",
                                 expiry_date="12/29", cvv="123"),
        agreed_to_terms=True,
    )
    data.update(overrides)
    return CheckoutRequest(**data)


class OrderServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.clock = FakeClock()
        self.shared = MemoryStorage()
        self.service = OrderService(self.shared, clock=self.clock)
        self.cart = CartService(MemoryStorage())
        self.user = _user()

    def fill_cart(self, price=30.0, quantity=2):
        self.cart.add_item(CartProduct(id="p1", name="Serum", price=price, image="serum.webp"))
        self.cart.set_quantity("p1", quantity)

    def test_place_order(self):
        self.fill_cart()
        result = self.service.place_order(self.user, self.cart, _request())
        self.assertTrue(result.success)
        order = result.order
        self.assertRegex(order.order_id, r"^ORD-1700000000000-[A-Z0-9]{6}$")
        self.assertEqual(order.status, "pending")
        self.assertEqual(order.subtotal, 60)
        self.assertEqual(order.shipping_cost, 10)
        self.assertEqual(order.total_amount, 70)
        self.assertEqual(order.customer_name, "Ann Lee")
        self.assertEqual(order.shipping_address.full_name, "Ann Lee")
        self.assertEqual(order.items[0].image_url, "serum.webp")
        self.assertEqual(self.cart.get_items(), [])
        self.assertEqual(self.service.get_order(order.order_id, self.user.id), order)

    def test_free_shipping_threshold(self):
        self.assertEqual(shipping_cost_for(99.99), 10)
        self.assertEqual(shipping_cost_for(100), 0)
        self.fill_cart(price=50, quantity=2)
        order = self.service.place_order(self.user, self.cart, _request()).order
        self.assertEqual(order.total_amount, 100)

    def test_empty_cart_is_rejected(self):
        result = self.service.place_order(self.user, self.cart, _request())
        self.assertFalse(result.success)
        self.assertEqual(result.message, "Your cart is empty")

    def test_shipping_errors_are_collected(self):
        self.fill_cart()
        result = self.service.place_order(
            self.user, self.cart, _request(shipping_address=ShippingAddress(email="bad", phone="12"))
        )
        self.assertFalse(result.success)
        self.assertEqual(
            set(result.errors),
            {"first_name", "last_name", "email", "phone", "address", "city", "postal_code"},
        )
        self.assertEqual(len(self.cart.get_items()), 1)
        self.assertEqual(self.service.list_orders(self.user.id), [])

    def test_card_errors_are_collected(self):
        self.fill_cart()
        result = self.service.place_order(
            self.user, self.cart, _request(card_details=CardDetails(card_number="4111", expiry_date="13/29", cvv="1"))
        )
        self.assertEqual(set(result.errors), {"card_number", "card_name", "expiry_date", "cvv"})

    def test_cash_orders_skip_card_checks(self):
        self.fill_cart()
        result = self.service.place_order(
            self.user, self.cart, _request(payment_method="cash", card_details=None)
        )
        self.assertTrue(result.success)

    def test_terms_must_be_accepted(self):
        self.fill_cart()
        result = self.service.place_order(self.user, self.cart, _request(agreed_to_terms=False))
        self.assertEqual(result.message, "Please agree to the terms and conditions")

    def test_orders_are_listed_newest_first_and_per_user(self):
        self.fill_cart()
        first = self.service.place_order(self.user, self.cart, _request()).order
        self.clock.advance(60)
        self.fill_cart()
        second = self.service.place_order(self.user, self.cart, _request()).order
        self.fill_cart()
        self.clock.advance(60)
        self.service.place_order(_user("user_2"), self.cart, _request())

        listed = self.service.list_orders(self.user.id)
        self.assertEqual([o.order_id for o in listed], [second.order_id, first.order_id])
        self.assertIsNone(self.service.get_order(first.order_id, "user_2"))

    def test_orders_in_the_same_millisecond_get_distinct_ids(self):
        self.fill_cart()
        first = self.service.place_order(self.user, self.cart, _request()).order
        self.fill_cart()
        second = self.service.place_order(self.user, self.cart, _request()).order
        self.assertEqual(first.order_date, second.order_date)
        self.assertNotEqual(first.order_id, second.order_id)
        self.assertEqual(self.service.get_order(second.order_id, self.user.id), second)

    def test_corrupt_orders_storage_is_treated_as_empty(self):
        self.shared.set_item("orders", "nope")
        self.assertEqual(self.service.list_orders(self.user.id), [])
