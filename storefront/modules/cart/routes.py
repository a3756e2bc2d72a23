from fastapi import APIRouter, Depends

from storefront.core.dependencies import get_cart
from storefront.modules.cart.schemas import CartProduct, CartResponse, QuantityUpdate
from storefront.modules.cart.service import CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def _snapshot(cart: CartService) -> CartResponse:
    return CartResponse(
        items=cart.get_items(),
        total=cart.get_total(),
        item_count=cart.get_item_count(),
        is_open=cart.is_open.value,
    )


@router.get("", response_model=CartResponse)
async def get_cart_contents(cart: CartService = Depends(get_cart)):
    return _snapshot(cart)


@router.post("/items", response_model=CartResponse)
async def add_item(product: CartProduct, cart: CartService = Depends(get_cart)):
    """Add one unit of a product; opens the cart"""
    cart.add_item(product)
    return _snapshot(cart)


@router.put("/items/{product_id}", response_model=CartResponse)
async def set_quantity(product_id: str, body: QuantityUpdate, cart: CartService = Depends(get_cart)):
    """Set a line's quantity, clamped to 1..999"""
    cart.set_quantity(product_id, body.quantity)
    return _snapshot(cart)


@router.delete("/items/{product_id}", response_model=CartResponse)
async def remove_item(product_id: str, cart: CartService = Depends(get_cart)):
    cart.remove_item(product_id)
    return _snapshot(cart)


@router.delete("", response_model=CartResponse)
async def clear_cart(cart: CartService = Depends(get_cart)):
    cart.clear()
    return _snapshot(cart)


@router.post("/open", response_model=CartResponse)
async def open_cart(cart: CartService = Depends(get_cart)):
    cart.open_cart()
    return _snapshot(cart)


@router.post("/close", response_model=CartResponse)
async def close_cart(cart: CartService = Depends(get_cart)):
    cart.close_cart()
    return _snapshot(cart)
