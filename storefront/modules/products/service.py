import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from supabase import Client

from storefront.config.settings import settings
from storefront.modules.products.schemas import ProductCreate, ProductResponse, ProductUpdate

logger = logging.getLogger(__name__)


def normalize_product(record: Dict[str, Any]) -> Dict[str, Any]:
    """Strip one leading '/' from image_url and surrounding whitespace from category."""
    record = dict(record)
    if record.get("id") is not None:
        record["id"] = str(record["id"])
    image_url = record.get("image_url")
    if isinstance(image_url, str) and image_url.startswith("/"):
        record["image_url"] = image_url[1:]
    if isinstance(record.get("category"), str):
        record["category"] = record["category"].strip()
    return record


class ProductService:
    """
    Best-effort access to the remote product catalog. Failures are logged and
    reported as an empty result (reads) or None/False (writes), never raised.
    """

    def __init__(self, supabase: Optional[Client], table_name: Optional[str] = None):
        self.supabase = supabase
        self.table_name = table_name or settings.products_table

    def _table(self):
        if self.supabase is None:
            raise RuntimeError("Product catalog is not configured")
        return self.supabase.table(self.table_name)

    def _to_products(self, rows: Optional[List[Dict[str, Any]]]) -> List[ProductResponse]:
        products = []
        for row in rows or []:
            try:
                products.append(ProductResponse(**normalize_product(row)))
            except ValidationError as e:
                logger.warning(f"Skipping malformed product row {row.get('id')}: {e}")
        return products

    def list_products(self, category: Optional[str] = None) -> List[ProductResponse]:
        """List catalog products, optionally filtered by category"""
        try:
            result = self._table().select("*").execute()
            products = self._to_products(result.data)
            if not products:
                logger.warning("No products found")
            if category:
                wanted = category.strip().lower()
                products = [p for p in products if (p.category or "").lower() == wanted]
            logger.debug(f"Fetched {len(products)} product(s)")
            return products
        except Exception as e:
            logger.error(f"Error fetching products: {e}")
            return []

    def get_product(self, product_id: str) -> Optional[ProductResponse]:
        """Get product by ID"""
        try:
            result = self._table()\
                .select("*")\
                .eq("id", product_id)\
                .single()\
                .execute()
            if not result.data:
                return None
            products = self._to_products([result.data])
            return products[0] if products else None
        except Exception as e:
            logger.error(f"Error fetching product {product_id}: {e}")
            return None

    def create_product(self, product_data: ProductCreate) -> Optional[ProductResponse]:
        try:
            record = normalize_product(product_data.model_dump())
            result = self._table().insert([record]).execute()
            products = self._to_products(result.data)
            if not products:
                logger.error("Catalog returned no row for created product")
                return None
            logger.info(f"Created product {products[0].id}")
            return products[0]
        except Exception as e:
            logger.error(f"Error adding product: {e}")
            return None

    def update_product(self, product_id: str, product_data: ProductUpdate) -> Optional[ProductResponse]:
        try:
            update_data = normalize_product(product_data.model_dump(exclude_none=True))
            if not update_data:
                return self.get_product(product_id)
            result = self._table()\
                .update(update_data)\
                .eq("id", product_id)\
                .execute()
            products = self._to_products(result.data)
            return products[0] if products else None
        except Exception as e:
            logger.error(f"Error updating product {product_id}: {e}")
            return None

    def delete_product(self, product_id: str) -> bool:
        try:
            result = self._table()\
                .delete()\
                .eq("id", product_id)\
                .execute()
            deleted = bool(result.data)
            if deleted:
                logger.info(f"Deleted product {product_id}")
            return deleted
        except Exception as e:
            logger.error(f"Error deleting product {product_id}: {e}")
            return False
