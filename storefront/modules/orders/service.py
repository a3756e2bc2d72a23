import logging
import random
import re
import string
import time
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from pydantic import ValidationError

from storefront.config.settings import settings
from storefront.database.local_storage import KeyValueStorage
from storefront.modules.auth.validators import EMAIL_RE
from storefront.modules.cart.service import CartService
from storefront.modules.orders.schemas import (
    CardDetails, CheckoutRequest, CheckoutResult, Order, OrderItem, OrderShippingAddress, ShippingAddress
)
from storefront.modules.users.schemas import User

logger = logging.getLogger(__name__)

ORDERS_KEY = "orders"

PHONE_RE = re.compile(r"[0-9]{9,15}")
PHONE_SEPARATORS_RE = re.compile(r"[\s\-()]")
CARD_NUMBER_RE = re.compile(r"[0-9]{16}")
EXPIRY_RE = re.compile(r"(0[1-9]|1[0-2])/([0-9]{2})")
CVV_RE = re.compile(r"[0-9]{3,4}")


def generate_order_id(now: float) -> str:
    suffix = "".join(random.choices(string.ascii_uppercase + string.digits, k=6))
    return f"ORD-{int(now * 1000)}-{suffix}"


def validate_shipping_address(address: ShippingAddress) -> Dict[str, str]:
    """Collect every shipping problem, keyed by field."""
    errors = {}
    if not address.first_name.strip():
        errors["first_name"] = "First name is required"
    if not address.last_name.strip():
        errors["last_name"] = "Last name is required"
    if not EMAIL_RE.fullmatch(address.email):
        errors["email"] = "Valid email is required"
    if not PHONE_RE.fullmatch(PHONE_SEPARATORS_RE.sub("", address.phone)):
        errors["phone"] = "Valid phone number is required"
    if not address.address.strip():
        errors["address"] = "Address is required"
    if not address.city.strip():
        errors["city"] = "City is required"
    if not address.postal_code.strip():
        errors["postal_code"] = "Postal code is required"
    return errors


def validate_card_details(card: Optional[CardDetails]) -> Dict[str, str]:
    card = card or CardDetails()
    errors = {}
    if not CARD_NUMBER_RE.fullmatch(re.sub(r"\s", "", card.card_number)):
        errors["card_number"] = "Valid 16-digit card number is required"
    if not card.card_name.strip():
        errors["card_name"] = "Cardholder name is required"
    if not EXPIRY_RE.fullmatch(card.expiry_date):
        errors["expiry_date"] = "Valid expiry date is required (MM/YY)"
    if not CVV_RE.fullmatch(card.cvv):
        errors["cvv"] = "Valid CVV is required"
    return errors


def shipping_cost_for(subtotal: float) -> float:
    return 0.0 if subtotal >= settings.free_shipping_threshold else settings.shipping_cost


class OrderService:
    def __init__(self, storage: KeyValueStorage, clock: Callable[[], float] = time.time):
        self.storage = storage
        self.clock = clock

    def _load_orders(self) -> List[Order]:
        stored = self.storage.read_json(ORDERS_KEY, [])
        if not isinstance(stored, list):
            logger.warning(f"'{ORDERS_KEY}' is not a list, treating as empty")
            return []
        orders = []
        for record in stored:
            try:
                orders.append(Order.model_validate(record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed order record: {e}")
        return orders

    def _save_orders(self, orders: List[Order]) -> None:
        self.storage.write_json(ORDERS_KEY, [o.model_dump(mode="json") for o in orders])

    def place_order(self, user: User, cart: CartService, request: CheckoutRequest) -> CheckoutResult:
        """Validate checkout data, record the order and empty the cart"""
        items = cart.get_items()
        if not items:
            return CheckoutResult(success=False, message="Your cart is empty")

        errors = validate_shipping_address(request.shipping_address)
        if errors:
            return CheckoutResult(
                success=False, message="Please fill in all required shipping information", errors=errors
            )
        if request.payment_method == "card":
            errors = validate_card_details(request.card_details)
            if errors:
                return CheckoutResult(
                    success=False, message="Please fill in all required payment information", errors=errors
                )
        if not request.agreed_to_terms:
            return CheckoutResult(success=False, message="Please agree to the terms and conditions")

        now = self.clock()
        address = request.shipping_address
        full_name = f"{address.first_name.strip()} {address.last_name.strip()}"
        subtotal = cart.get_total()
        shipping_cost = shipping_cost_for(subtotal)
        order = Order(
            order_id=generate_order_id(now),
            user_id=user.id,
            customer_name=full_name,
            customer_email=address.email,
            order_date=datetime.fromtimestamp(now, tz=timezone.utc),
            items=[
                OrderItem(
                    product_id=item.id,
                    product_name=item.name,
                    quantity=item.quantity,
                    price=item.price,
                    image_url=item.image_url or item.image or f"{item.id}.webp",
                )
                for item in items
            ],
            subtotal=subtotal,
            shipping_cost=shipping_cost,
            total_amount=subtotal + shipping_cost,
            shipping_address=OrderShippingAddress(full_name=full_name, **address.model_dump()),
            payment_method=request.payment_method,
        )

        orders = self._load_orders()
        orders.append(order)
        self._save_orders(orders)
        cart.clear()
        logger.info(f"Order {order.order_id} placed by {user.id} for {order.total_amount:.2f}")
        return CheckoutResult(success=True, message="Order placed successfully!", order=order)

    def list_orders(self, user_id: str) -> List[Order]:
        """Orders for one user, newest first"""
        orders = [o for o in self._load_orders() if o.user_id == user_id]
        return sorted(orders, key=lambda o: o.order_date, reverse=True)

    def get_order(self, order_id: str, user_id: str) -> Optional[Order]:
        return next(
            (o for o in self._load_orders() if o.order_id == order_id and o.user_id == user_id),
            None,
        )
