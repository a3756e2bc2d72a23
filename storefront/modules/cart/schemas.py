from pydantic import BaseModel, Field
from typing import List, Optional

MIN_QUANTITY = 1
MAX_QUANTITY = 999


class CartProduct(BaseModel):
    id: str
    name: str = ""
    price: float = 0
    image: str = ""
    image_url: Optional[str] = None
    volume: str = ""


class CartItem(CartProduct):
    quantity: int = Field(default=1, ge=MIN_QUANTITY, le=MAX_QUANTITY)


class QuantityUpdate(BaseModel):
    quantity: int


class CartResponse(BaseModel):
    items: List[CartItem]
    total: float
    item_count: int
    is_open: bool
