import unittest
from unittest.mock import patch

from django.db import IntegrityError

from apps.api.exceptions import InputValidationError, NotFoundError, StoreFailure
from apps.carts.services import CartService
from apps.carts.mappers import CartItemMapper, CartMapper
from apps.catalog.mappers import ProductMapper


class DummyAtomic:
    def __init__(self):
        self.entered = 0

    def __call__(self, *args, **kwargs):
        return self

    def __enter__(self):
        self.entered += 1
        return self

    def __exit__(self, exc_type, exc, tb):
        return False


class StubProduct:
    def __init__(self, product_id: int, title: str, price: str = "10.00"):
        self.id = product_id
        self.title = title
        self.description = ""
        self.price = price
        self.code = f"P{product_id}"
        self.stock = 5
        self.category = "tools"
        self.status = True
        self.thumbnails = []


class StubCartProduct:
    def __init__(self, pk: int, cart, product_id: int, quantity: int):
        self.pk = self.id = pk
        self.cart = cart
        self.cart_id = cart.id
        self.product_id = product_id
        self.quantity = quantity


class StubCart:
    def __init__(self, cart_id: int):
        self.id = cart_id
        self.touched = 0


class FakeCartRepository:
    def __init__(self):
        self._storage = {}
        self._pk = 1
        self.locked = []

    def create(self, **data):
        cart = StubCart(self._pk)
        self._storage[self._pk] = cart
        self._pk += 1
        return cart

    def get(self, **filters):
        return self._storage.get(filters.get("id"))

    def get_for_update(self, cart_id: int):
        self.locked.append(cart_id)
        return self._storage.get(cart_id)

    def touch(self, cart: StubCart):
        cart.touched += 1


class FakeCartProductRepository:
    def __init__(self):
        self._items = []
        self._pk = 1

    def create(self, **data):
        item = StubCartProduct(
            self._pk, data["cart"], data["product_id"], data["quantity"]
        )
        self._pk += 1
        self._items.append(item)
        return item

    def list_for_cart(self, cart_id: int):
        return [i for i in self._items if i.cart_id == cart_id]

    def get_for_cart_product(self, cart_id: int, product_id: int):
        for item in self._items:
            if item.cart_id == cart_id and item.product_id == product_id:
                return item
        return None

    def increment(self, item, by: int = 1):
        item.quantity += by

    def set_quantity(self, item, quantity: int):
        item.quantity = quantity

    def delete_product(self, cart, product_id: int):
        self._items = [
            i
            for i in self._items
            if not (i.cart_id == cart.id and i.product_id == product_id)
        ]

    def delete_for_cart(self, cart):
        self._items = [i for i in self._items if i.cart_id != cart.id]


class FakeProductRepository:
    def __init__(self):
        self._products = {}

    def add(self, product: StubProduct):
        self._products[product.id] = product
        return product

    def remove(self, product_id: int):
        self._products.pop(product_id, None)

    def exists(self, **filters):
        return filters.get("id") in self._products

    def in_bulk(self, ids):
        return {pid: self._products[pid] for pid in ids if pid in self._products}

    def existing_ids(self, ids):
        return {pid for pid in ids if pid in self._products}


class BrokenCartProductRepository(FakeCartProductRepository):
    def create(self, **data):
        raise IntegrityError("UNIQUE constraint failed: cart_products.cart_id")


class CartServiceTestBase(unittest.TestCase):
    cart_products_class = FakeCartProductRepository

    def setUp(self):
        self.cart_repo = FakeCartRepository()
        self.cart_product_repo = self.cart_products_class()
        self.product_repo = FakeProductRepository()
        self.cart_mapper = CartMapper(CartItemMapper(ProductMapper()))
        self.service = CartService(
            carts=self.cart_repo,
            cart_products=self.cart_product_repo,
            products=self.product_repo,
            cart_mapper=self.cart_mapper,
        )
        self.atomic = DummyAtomic()
        self.atomic_patch = patch(
            "apps.carts.services.transaction.atomic", self.atomic
        )
        self.atomic_patch.start()
        self.addCleanup(self.atomic_patch.stop)
        self.widget = self.product_repo.add(StubProduct(1, "Widget"))
        self.gadget = self.product_repo.add(StubProduct(2, "Gadget"))
        self.cart_id = self.service.create_cart().id

    def quantities(self, dto):
        return [(i.product_id, i.quantity) for i in dto.items]


class CartServiceUnitTests(CartServiceTestBase):
    def test_create_cart_is_empty(self):
        dto = self.service.get_cart(self.cart_id)
        self.assertEqual(dto.id, self.cart_id)
        self.assertEqual(dto.items, [])

    def test_get_missing_cart_raises_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.get_cart(999)
        self.assertEqual(ctx.exception.message, "Cart not found")
        self.assertEqual(ctx.exception.details, {"cartId": 999})

    def test_add_same_product_twice_merges_line_item(self):
        self.service.add_product(self.cart_id, 1)
        dto = self.service.add_product(self.cart_id, 1)
        self.assertEqual(self.quantities(dto), [(1, 2)])
        self.assertEqual(dto.items[0].product.title, "Widget")
        self.assertTrue(dto.items[0].resolved)

    def test_add_locks_cart_inside_transaction(self):
        self.service.add_product(self.cart_id, 1)
        self.assertEqual(self.cart_repo.locked, [self.cart_id])
        self.assertEqual(self.atomic.entered, 1)

    def test_add_unknown_product_raises_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.add_product(self.cart_id, 42)
        self.assertEqual(ctx.exception.details, {"productId": 42})
        self.assertEqual(self.service.get_cart(self.cart_id).items, [])

    def test_add_to_missing_cart_raises_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.add_product(77, 1)
        self.assertEqual(ctx.exception.details, {"cartId": 77})

    def test_items_keep_insertion_order(self):
        self.service.add_product(self.cart_id, 2)
        dto = self.service.add_product(self.cart_id, 1)
        self.assertEqual(self.quantities(dto), [(2, 1), (1, 1)])

    def test_remove_absent_product_is_noop(self):
        self.service.add_product(self.cart_id, 1)
        dto = self.service.remove_product(self.cart_id, 2)
        self.assertEqual(self.quantities(dto), [(1, 1)])

    def test_remove_from_missing_cart_raises_not_found(self):
        with self.assertRaises(NotFoundError):
            self.service.remove_product(77, 1)

    def test_update_quantity_sets_exact_value(self):
        self.service.add_product(self.cart_id, 1)
        self.service.add_product(self.cart_id, 1)
        dto = self.service.update_quantity(self.cart_id, 1, 5)
        self.assertEqual(self.quantities(dto), [(1, 5)])

    def test_update_quantity_rejects_non_positive_values(self):
        self.service.add_product(self.cart_id, 1)
        for bad in (0, -3, "5", None, True):
            with self.assertRaises(InputValidationError):
                self.service.update_quantity(self.cart_id, 1, bad)
        self.assertEqual(self.cart_repo.locked, [self.cart_id])

    def test_update_quantity_validation_precedes_cart_lookup(self):
        with self.assertRaises(InputValidationError):
            self.service.update_quantity(999, 1, 0)

    def test_update_quantity_product_not_in_cart(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.update_quantity(self.cart_id, 2, 3)
        self.assertEqual(ctx.exception.message, "Product not found in cart")
        self.assertEqual(ctx.exception.details, {"productId": 2})

    def test_update_quantity_missing_cart(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.update_quantity(999, 1, 3)
        self.assertEqual(ctx.exception.message, "Cart not found")

    def test_clear_then_get_is_empty(self):
        self.service.add_product(self.cart_id, 1)
        self.service.add_product(self.cart_id, 2)
        self.service.clear_cart(self.cart_id)
        self.assertEqual(self.service.get_cart(self.cart_id).items, [])

    def test_clear_missing_cart_raises_not_found(self):
        with self.assertRaises(NotFoundError):
            self.service.clear_cart(999)

    def test_mutations_touch_cart(self):
        self.service.add_product(self.cart_id, 1)
        self.service.update_quantity(self.cart_id, 1, 2)
        self.assertEqual(self.cart_repo.get(id=self.cart_id).touched, 2)

    def test_scenario_add_add_update_remove(self):
        dto = self.service.add_product(self.cart_id, 1)
        self.assertEqual(self.quantities(dto), [(1, 1)])
        dto = self.service.add_product(self.cart_id, 1)
        self.assertEqual(self.quantities(dto), [(1, 2)])
        dto = self.service.update_quantity(self.cart_id, 1, 7)
        self.assertEqual(self.quantities(dto), [(1, 7)])
        dto = self.service.remove_product(self.cart_id, 1)
        self.assertEqual(dto.items, [])


class CartReplaceTests(CartServiceTestBase):
    def test_replace_products_in_supplied_order(self):
        self.service.add_product(self.cart_id, 1)
        dto = self.service.replace_products(
            self.cart_id,
            [{"product": 2, "quantity": 3}, {"product": 1}],
        )
        self.assertEqual(self.quantities(dto), [(2, 3), (1, 1)])

    def test_replace_with_empty_list_empties_cart(self):
        self.service.add_product(self.cart_id, 1)
        dto = self.service.replace_products(self.cart_id, [])
        self.assertEqual(dto.items, [])

    def test_replace_rejects_non_list(self):
        with self.assertRaises(InputValidationError) as ctx:
            self.service.replace_products(self.cart_id, {"product": 1})
        self.assertEqual(ctx.exception.details, {"field": "products"})

    def test_replace_rejects_duplicates(self):
        with self.assertRaises(InputValidationError) as ctx:
            self.service.replace_products(
                self.cart_id, [{"product": 1}, {"product": 1, "quantity": 2}]
            )
        self.assertEqual(ctx.exception.details, {"index": 1, "productId": 1})

    def test_replace_rejects_unknown_products_without_mutating(self):
        self.service.add_product(self.cart_id, 1)
        with self.assertRaises(InputValidationError) as ctx:
            self.service.replace_products(
                self.cart_id, [{"product": 2}, {"product": 40}, {"product": 41}]
            )
        self.assertEqual(ctx.exception.details, {"unknownProductIds": [40, 41]})
        self.assertEqual(
            self.quantities(self.service.get_cart(self.cart_id)), [(1, 1)]
        )

    def test_replace_missing_cart_raises_not_found(self):
        with self.assertRaises(NotFoundError):
            self.service.replace_products(999, [{"product": 1}])

    def test_malformed_items_rejected_before_cart_lookup(self):
        with self.assertRaises(InputValidationError):
            self.service.replace_products(999, [{"product": 1, "quantity": 0}])
        self.assertEqual(self.cart_repo.locked, [])


class CartDanglingReferenceTests(CartServiceTestBase):
    def test_deleted_product_is_reported_unresolved(self):
        self.service.add_product(self.cart_id, 1)
        self.service.add_product(self.cart_id, 2)
        self.product_repo.remove(2)
        with self.assertLogs("apps.carts.mappers", level="WARNING") as logs:
            dto = self.service.get_cart(self.cart_id)
        self.assertEqual(self.quantities(dto), [(1, 1), (2, 1)])
        dangling = dto.items[1]
        self.assertFalse(dangling.resolved)
        self.assertIsNone(dangling.product)
        self.assertIn("product_id=2", logs.output[0])


class CartStoreFailureTests(CartServiceTestBase):
    cart_products_class = BrokenCartProductRepository

    def test_integrity_error_becomes_store_failure(self):
        with self.assertRaises(StoreFailure) as ctx:
            self.service.add_product(self.cart_id, 1)
        self.assertEqual(ctx.exception.operation, "carts.add_product")
        self.assertIsInstance(ctx.exception.cause, IntegrityError)


class CartIntegerRangeTests(CartServiceTestBase):
    huge = 10**20

    def test_oversized_quantity_rejected_before_storage(self):
        self.service.add_product(self.cart_id, 1)
        with self.assertRaises(InputValidationError) as ctx:
            self.service.update_quantity(self.cart_id, 1, self.huge)
        self.assertEqual(ctx.exception.details, {"field": "quantity"})
        self.assertEqual(
            self.quantities(self.service.get_cart(self.cart_id)), [(1, 1)]
        )

    def test_oversized_replace_product_id_rejected(self):
        with self.assertRaises(InputValidationError) as ctx:
            self.service.replace_products(self.cart_id, [{"product": self.huge}])
        self.assertEqual(ctx.exception.details, {"index": 0, "field": "product"})
        self.assertEqual(self.cart_repo.locked, [])

    def test_oversized_ids_are_not_found(self):
        with self.assertRaises(NotFoundError) as ctx:
            self.service.get_cart(self.huge)
        self.assertEqual(ctx.exception.details, {"cartId": self.huge})
        with self.assertRaises(NotFoundError):
            self.service.clear_cart(self.huge)
        with self.assertRaises(NotFoundError) as ctx:
            self.service.add_product(self.cart_id, self.huge)
        self.assertEqual(ctx.exception.details, {"productId": self.huge})
        with self.assertRaises(NotFoundError) as ctx:
            self.service.update_quantity(self.cart_id, self.huge, 2)
        self.assertEqual(ctx.exception.message, "Product not found in cart")
        self.assertEqual(self.cart_repo.locked.count(self.huge), 0)

    def test_remove_oversized_product_id_is_noop(self):
        self.service.add_product(self.cart_id, 1)
        dto = self.service.remove_product(self.cart_id, self.huge)
        self.assertEqual(self.quantities(dto), [(1, 1)])

    def test_add_stops_at_column_maximum(self):
        self.service.replace_products(
            self.cart_id, [{"product": 1, "quantity": 2147483647}]
        )
        with self.assertRaises(InputValidationError) as ctx:
            self.service.add_product(self.cart_id, 1)
        self.assertEqual(ctx.exception.details["field"], "quantity")
        self.assertEqual(
            self.quantities(self.service.get_cart(self.cart_id)), [(1, 2147483647)]
        )
