from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client
from typing import List, Optional

from storefront.core.dependencies import require_admin
from storefront.database.supabase_client import get_supabase, get_supabase_admin
from storefront.modules.products.schemas import ProductCreate, ProductResponse, ProductUpdate
from storefront.modules.products.service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_product_service(supabase: Optional[Client] = Depends(get_supabase)) -> ProductService:
    return ProductService(supabase)


def get_product_admin_service(supabase: Optional[Client] = Depends(get_supabase_admin)) -> ProductService:
    return ProductService(supabase)


@router.get("", response_model=List[ProductResponse])
async def list_products(
    category: Optional[str] = None,
    service: ProductService = Depends(get_product_service)
):
    """List products; an unreachable catalog yields an empty list"""
    return service.list_products(category=category)


@router.get("/{product_id}", response_model=ProductResponse)
async def get_product(product_id: str, service: ProductService = Depends(get_product_service)):
    product = service.get_product(product_id)
    if product is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product not found")
    return product


@router.post("", response_model=ProductResponse, status_code=201, dependencies=[Depends(require_admin)])
async def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_admin_service)
):
    product = service.create_product(product_data)
    if product is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to create product")
    return product


@router.put("/{product_id}", response_model=ProductResponse, dependencies=[Depends(require_admin)])
async def update_product(
    product_id: str,
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_admin_service)
):
    product = service.update_product(product_id, product_data)
    if product is None:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to update product")
    return product


@router.delete("/{product_id}", status_code=204, dependencies=[Depends(require_admin)])
async def delete_product(product_id: str, service: ProductService = Depends(get_product_admin_service)):
    if not service.delete_product(product_id):
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to delete product")
    return None
