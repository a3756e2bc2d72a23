import unittest
from unittest.mock import patch

from storefront.database.supabase_client import SupabaseClient, get_supabase, get_supabase_admin
from storefront.modules.products.schemas import ProductCreate, ProductUpdate
from storefront.modules.products.service import ProductService, normalize_product
from tests.fakes import FakeSupabase

TABLE = "skincare_products"

ROWS = [
    {"id": 1, "name": "Serum", "price": 25.0, "category": " Face ", "image_url": "/img/serum.webp"},
    {"id": 2, "name": "Balm", "price": 12.5, "category": "Lips", "image_url": "img/balm.webp"},
]


class ProductServiceTestCase(unittest.TestCase):
    def setUp(self):
        self.supabase = FakeSupabase({TABLE: ROWS})
        self.service = ProductService(self.supabase, TABLE)

    def test_normalize(self):
        record = normalize_product({"id": 7, "image_url": "//x.webp", "category": "  Body\n"})
        self.assertEqual(record, {"id": "7", "image_url": "/x.webp", "category": "Body"})

    def test_list_products_normalizes_rows(self):
        products = self.service.list_products()
        self.assertEqual([p.id for p in products], ["1", "2"])
        self.assertEqual(products[0].image_url, "img/serum.webp")
        self.assertEqual(products[0].category, "Face")

    def test_list_products_by_category(self):
        self.assertEqual([p.name for p in self.service.list_products(category="face")], ["Serum"])

    def test_get_product(self):
        self.assertEqual(self.service.get_product("2").name, "Balm")
        self.assertIsNone(self.service.get_product("99"))

    def test_create_update_delete(self):
        created = self.service.create_product(
            ProductCreate(name="Toner", price=9.99, category=" Face ", image_url="/toner.webp")
        )
        self.assertEqual(created.category, "Face")
        self.assertEqual(self.supabase.tables[TABLE].rows[-1]["category"], "Face")

        updated = self.service.update_product(created.id, ProductUpdate(price=11.0))
        self.assertEqual(updated.price, 11.0)
        self.assertEqual(updated.name, "Toner")

        self.assertTrue(self.service.delete_product(created.id))
        self.assertFalse(self.service.delete_product(created.id))

    def test_catalog_errors_degrade(self):
        self.supabase.tables[TABLE].error = RuntimeError("network down")
        self.assertEqual(self.service.list_products(), [])
        self.assertIsNone(self.service.get_product("1"))
        self.assertIsNone(self.service.create_product(ProductCreate(name="X", price=1)))
        self.assertIsNone(self.service.update_product("1", ProductUpdate(price=2)))
        self.assertFalse(self.service.delete_product("1"))

    def test_unconfigured_catalog_degrades(self):
        service = ProductService(None, TABLE)
        self.assertEqual(service.list_products(), [])
        self.assertIsNone(service.get_product("1"))
        self.assertFalse(service.delete_product("1"))

    def test_malformed_rows_are_skipped(self):
        self.supabase.tables[TABLE].rows.append({"id": 3, "name": "No price"})
        self.assertEqual(len(self.service.list_products()), 2)


class SupabaseClientTestCase(unittest.TestCase):
    def setUp(self):
        SupabaseClient.reset_client()
        self.addCleanup(SupabaseClient.reset_client)

    @patch("storefront.database.supabase_client.create_client")
    def test_client_is_cached_until_reset(self, create_client):
        create_client.side_effect = lambda url, key: object()
        first = get_supabase()
        self.assertIs(get_supabase(), first)
        self.assertEqual(create_client.call_count, 1)

        SupabaseClient.reset_client()
        self.assertIsNot(get_supabase(), first)
        self.assertEqual(create_client.call_count, 2)

    @patch("storefront.database.supabase_client.create_client")
    def test_unconfigured_client_is_none(self, create_client):
        create_client.side_effect = Exception("supabase_url is required")
        self.assertIsNone(get_supabase())
        self.assertIsNone(get_supabase_admin())
