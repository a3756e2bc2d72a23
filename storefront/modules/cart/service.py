import logging
from typing import List

from pydantic import ValidationError

from storefront.core.observable import Observable
from storefront.database.local_storage import KeyValueStorage
from storefront.modules.cart.schemas import CartItem, CartProduct, MIN_QUANTITY, MAX_QUANTITY

logger = logging.getLogger(__name__)

CART_KEY = "cart"


def clamp_quantity(quantity: int) -> int:
    return max(MIN_QUANTITY, min(MAX_QUANTITY, int(quantity)))


class CartService:
    """In-progress purchase lines for one client, persisted on every mutation."""

    def __init__(self, storage: KeyValueStorage):
        self.storage = storage
        self.items: Observable[List[CartItem]] = Observable(self._load())
        self.is_open: Observable[bool] = Observable(False)

    def _load(self) -> List[CartItem]:
        stored = self.storage.read_json(CART_KEY, [])
        if not isinstance(stored, list):
            logger.warning(f"'{CART_KEY}' is not a list, starting with an empty cart")
            return []
        try:
            return [CartItem.model_validate(item) for item in stored]
        except ValidationError as e:
            logger.warning(f"Stored cart is malformed, starting with an empty cart: {e}")
            return []

    def _commit(self, items: List[CartItem]) -> None:
        self.storage.write_json(CART_KEY, [item.model_dump(mode="json") for item in items])
        self.items.next(items)

    def add_item(self, product: CartProduct) -> None:
        items = [item.model_copy() for item in self.items.value]
        existing = next((item for item in items if item.id == product.id), None)
        if existing:
            existing.quantity = clamp_quantity(existing.quantity + 1)
        else:
            items.append(CartItem(**product.model_dump(exclude={"quantity"}), quantity=1))
        self._commit(items)
        self.open_cart()

    def remove_item(self, product_id: str) -> None:
        self._commit([item for item in self.items.value if item.id != product_id])

    def set_quantity(self, product_id: str, quantity: int) -> None:
        if not any(item.id == product_id for item in self.items.value):
            return
        items = [
            item.model_copy(update={"quantity": clamp_quantity(quantity)}) if item.id == product_id else item
            for item in self.items.value
        ]
        self._commit(items)

    def get_items(self) -> List[CartItem]:
        return list(self.items.value)

    def get_item_count(self) -> int:
        return sum(item.quantity for item in self.items.value)

    def get_total(self) -> float:
        return sum(item.price * item.quantity for item in self.items.value)

    def clear(self) -> None:
        self._commit([])

    def open_cart(self) -> None:
        self.is_open.next(True)

    def close_cart(self) -> None:
        self.is_open.next(False)
