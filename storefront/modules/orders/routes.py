from fastapi import APIRouter, Depends, HTTPException, status
from typing import List

from storefront.core.context import ContextRegistry, get_context_registry
from storefront.core.dependencies import get_cart, require_authenticated
from storefront.modules.cart.service import CartService
from storefront.modules.orders.schemas import CheckoutRequest, Order
from storefront.modules.orders.service import OrderService
from storefront.modules.users.schemas import User

router = APIRouter(prefix="/orders", tags=["orders"])


def get_order_service(registry: ContextRegistry = Depends(get_context_registry)) -> OrderService:
    return OrderService(registry.shared_storage)


@router.post("/checkout", response_model=Order, status_code=201)
async def checkout(
    checkout_data: CheckoutRequest,
    current_user: User = Depends(require_authenticated),
    cart: CartService = Depends(get_cart),
    service: OrderService = Depends(get_order_service)
):
    """Place an order for the current cart"""
    result = service.place_order(current_user, cart, checkout_data)
    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"message": result.message, "errors": result.errors}
        )
    return result.order


@router.get("", response_model=List[Order])
async def list_orders(
    current_user: User = Depends(require_authenticated),
    service: OrderService = Depends(get_order_service)
):
    return service.list_orders(current_user.id)


@router.get("/{order_id}", response_model=Order)
async def get_order(
    order_id: str,
    current_user: User = Depends(require_authenticated),
    service: OrderService = Depends(get_order_service)
):
    order = service.get_order(order_id, current_user.id)
    if order is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Order not found")
    return order
