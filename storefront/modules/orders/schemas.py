from pydantic import BaseModel
from typing import Dict, List, Literal, Optional
from datetime import datetime

PaymentMethod = Literal["card", "cash"]


class ShippingAddress(BaseModel):
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    postal_code: str = ""
    country: str = "Georgia"


class CardDetails(BaseModel):
    card_number: str = ""
    card_name: str = ""
    expiry_date: str = ""
    cvv: str = ""


class CheckoutRequest(BaseModel):
    shipping_address: ShippingAddress
    payment_method: PaymentMethod = "card"
    card_details: Optional[CardDetails] = None
    agreed_to_terms: bool = False


class OrderItem(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    price: float
    image_url: Optional[str] = None


class OrderShippingAddress(ShippingAddress):
    full_name: str


class Order(BaseModel):
    order_id: str
    user_id: str
    customer_name: str
    customer_email: str
    order_date: datetime
    status: str = "pending"
    items: List[OrderItem]
    subtotal: float
    shipping_cost: float
    total_amount: float
    shipping_address: OrderShippingAddress
    payment_method: PaymentMethod

    class Config:
        from_attributes = True


class CheckoutResult(BaseModel):
    success: bool
    message: str
    errors: Dict[str, str] = {}
    order: Optional[Order] = None
