import os
import tempfile
import unittest

from storefront.core.observable import Observable
from storefront.database.local_storage import FileStorage, MemoryStorage, ScopedStorage


class MemoryStorageTestCase(unittest.TestCase):
    def test_set_get_remove_clear(self):
        storage = MemoryStorage()
        self.assertIsNone(storage.get_item("k"))
        storage.set_item("k", "v")
        self.assertEqual(storage.get_item("k"), "v")
        storage.remove_item("k")
        self.assertIsNone(storage.get_item("k"))
        storage.remove_item("k")  # removing twice is harmless
        storage.set_item("a", "1")
        storage.clear()
        self.assertEqual(storage.keys(), [])

    def test_read_json_falls_back_on_malformed_value(self):
        storage = MemoryStorage({"cart": "{not json"})
        self.assertEqual(storage.read_json("cart", []), [])
        self.assertEqual(storage.read_json("missing", {"x": 1}), {"x": 1})

    def test_write_then_read_json(self):
        storage = MemoryStorage()
        storage.write_json("orders", [{"id": "o1", "total": 12.5}])
        self.assertEqual(storage.read_json("orders"), [{"id": "o1", "total": 12.5}])


class ScopedStorageTestCase(unittest.TestCase):
    def test_scopes_do_not_see_each_other(self):
        backing = MemoryStorage()
        first = ScopedStorage(backing, "c1:")
        second = ScopedStorage(backing, "c2:")
        first.set_item("cart", "[]")
        second.set_item("cart", "[1]")
        self.assertEqual(first.get_item("cart"), "[]")
        self.assertEqual(backing.get_item("c2:cart"), "[1]")

        first.clear()
        self.assertIsNone(first.get_item("cart"))
        self.assertEqual(second.get_item("cart"), "[1]")
        second.remove_item("cart")
        self.assertEqual(backing.keys(), [])


class FileStorageTestCase(unittest.TestCase):
    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.temp_dir.name, "nested", "store.json")

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_values_survive_reopening(self):
        storage = FileStorage(self.path)
        storage.set_item("auth_token", "abc")
        storage.write_json("cart", [{"id": "p1"}])

        reopened = FileStorage(self.path)
        self.assertEqual(reopened.get_item("auth_token"), "abc")
        self.assertEqual(reopened.read_json("cart"), [{"id": "p1"}])

        reopened.remove_item("auth_token")
        self.assertIsNone(FileStorage(self.path).get_item("auth_token"))

    def test_corrupt_file_starts_empty(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w") as f:
            f.write("[[[ definitely not json")
        storage = FileStorage(self.path)
        self.assertIsNone(storage.get_item("cart"))
        storage.set_item("cart", "[]")
        self.assertEqual(FileStorage(self.path).get_item("cart"), "[]")

    def test_non_object_document_starts_empty(self):
        os.makedirs(os.path.dirname(self.path))
        with open(self.path, "w") as f:
            f.write('["a", "b"]')
        self.assertIsNone(FileStorage(self.path).get_item("0"))


class ObservableTestCase(unittest.TestCase):
    def test_subscribers_receive_current_and_new_values(self):
        seen = []
        observable = Observable(0)
        unsubscribe = observable.subscribe(seen.append)
        observable.next(1)
        unsubscribe()
        observable.next(2)
        self.assertEqual(seen, [0, 1])
        self.assertEqual(observable.value, 2)

    def test_failing_subscriber_does_not_block_others(self):
        seen = []

        def broken(_value):
            raise RuntimeError("boom")

        observable = Observable("a")
        observable.subscribe(broken, emit_current=False)
        observable.subscribe(seen.append, emit_current=False)
        observable.next("b")
        self.assertEqual(seen, ["b"])
