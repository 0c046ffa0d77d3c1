import asyncio
import unittest

from fake_backend import BackendTestCase
from services.cart import CartTracker
from services.models import Cart, CartItem, CheckoutRequest, Guest, Result
from services.orders import UserOrdersService

GUEST = Guest("session_1700000000000_abc123xyz")


def cart_of(count: int) -> Cart:
    items = [CartItem("b1", "Veg Biryani", 180.0, count, 180.0 * count)] if count else []
    return Cart(items=items, subtotal=180.0 * count, total=180.0 * count, item_count=count)


class CartTrackerTestCase(BackendTestCase):
    def setUp(self):
        super().setUp()
        self.tracker = CartTracker(UserOrdersService(self.client), GUEST)

    async def test_mutations_refetch_the_cart(self):
        await self.tracker.add({"item_id": "b1"})
        self.assertEqual(self.tracker.cart.item_count, 1)
        self.assertEqual(
            self.backend.paths()[-2:],
            ["/api/user-orders/cart/add", f"/api/user-orders/cart/{GUEST.key}"],
        )

        await self.tracker.set_quantity("b1", 3)
        self.assertEqual(self.tracker.cart.items[0].quantity, 3)
        self.assertEqual(self.tracker.cart.total, 567.0)

    async def test_quantity_zero_removes(self):
        await self.tracker.add({"item_id": "b1"})
        await self.tracker.set_quantity("b1", 0)

        self.assertIn("/api/user-orders/cart/remove", self.backend.paths())
        self.assertNotIn("/api/user-orders/cart/update-quantity", self.backend.paths())
        self.assertTrue(self.tracker.cart.is_empty)

    async def test_clear_removes_every_line(self):
        await self.tracker.add({"item_id": "b1"})
        await self.tracker.add({"item_id": "s1", "quantity": 2})

        result = await self.tracker.clear()

        self.assertTrue(result.success)
        self.assertTrue(self.tracker.cart.is_empty)
        self.assertEqual(self.backend.paths().count("/api/user-orders/cart/remove"), 2)

    async def test_empty_cart_checkout_sends_nothing(self):
        await self.tracker.refresh()
        sent = len(self.backend.requests)

        result = await self.tracker.checkout(
            CheckoutRequest(order_type="dine_in", payment_method="cash")
        )

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Your cart is empty")
        self.assertEqual(len(self.backend.requests), sent)

    async def test_checkout_empties_the_snapshot(self):
        await self.tracker.add({"item_id": "s1"})

        result = await self.tracker.checkout(
            CheckoutRequest(order_type="takeaway", payment_method="card")
        )

        self.assertTrue(result.success)
        self.assertTrue(result.data["order_id"].startswith("ORD"))
        self.assertTrue(self.tracker.cart.is_empty)

    async def test_failed_refresh_zeroes_and_records_error(self):
        await self.tracker.add({"item_id": "b1"})
        self.backend.go_down()

        await self.tracker.refresh()

        self.assertTrue(self.tracker.cart.is_empty)
        self.assertIsNotNone(self.tracker.last_error)


class _ControlledService:
    """Hands out cart responses only when the test releases them."""

    def __init__(self):
        self.pending = []

    async def get_cart(self, identity):
        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future


class StaleResponseTestCase(unittest.IsolatedAsyncioTestCase):
    async def test_older_response_does_not_overwrite_newer(self):
        service = _ControlledService()
        tracker = CartTracker(service, GUEST)

        first = asyncio.create_task(tracker.refresh())
        await asyncio.sleep(0)
        second = asyncio.create_task(tracker.refresh())
        await asyncio.sleep(0)
        self.assertEqual(len(service.pending), 2)

        service.pending[1].set_result(Result.ok(cart_of(2)))
        await second
        service.pending[0].set_result(Result.ok(cart_of(1)))
        await first

        self.assertEqual(tracker.cart.item_count, 2)
