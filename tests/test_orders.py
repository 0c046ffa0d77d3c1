import httpx

from fake_backend import MENU as MENU_LIST, BackendTestCase
from services.models import Account, Cart, CheckoutRequest, Guest
from services.orders import UserOrdersService


class UserOrdersServiceTestCase(BackendTestCase):
    def setUp(self):
        super().setUp()
        self.orders = UserOrdersService(self.client)
        self.guest = Guest("session_1700000000000_abc123xyz")

    # ---------- menu ----------

    async def test_menu_is_grouped_by_category_and_diet(self):
        result = await self.orders.get_menu()

        self.assertTrue(result.success)
        names = [c.category_name for c in result.data]
        self.assertEqual(names, ["Biryanis", "Starters"])

        biryanis = result.data[0]
        self.assertEqual([i.item_id for i in biryanis.veg], ["b1"])
        self.assertEqual([i.diet_type for i in biryanis.non_veg], ["non_veg", "non_veg"])
        self.assertEqual(biryanis.non_veg[0].category, "Biryanis")
        self.assertFalse(biryanis.non_veg[1].available)
        self.assertEqual(len(biryanis.items), 3)

    async def test_menu_failure_returns_empty_list(self):
        self.backend.go_down()
        result = await self.orders.get_menu()
        self.assertFalse(result.success)
        self.assertEqual(result.data, [])

    # ---------- cart ----------

    async def test_add_then_fetch_cart(self):
        added = await self.orders.add_to_cart(
            self.guest, {"item_id": "b2", "category": "Biryanis", "diet_type": "non_veg"}
        )
        self.assertTrue(added.success)
        self.assertEqual(self.backend.last_json()["quantity"], 1)
        self.assertEqual(self.backend.last_json()["user_id"], self.guest.session_id)

        result = await self.orders.get_cart(self.guest)

        self.assertTrue(result.success)
        cart = result.data
        self.assertEqual(cart.item_count, 1)
        self.assertEqual(cart.items[0].name, "Chicken Biryani")
        self.assertEqual(cart.subtotal, 250.0)
        self.assertEqual(cart.tax, 12.5)
        self.assertEqual(cart.total, 262.5)

    async def test_quantity_zero_drops_the_line(self):
        await self.orders.add_to_cart(self.guest, {"item_id": "b1", "quantity": 2})
        await self.orders.add_to_cart(self.guest, {"item_id": "s1"})

        await self.orders.update_quantity(self.guest, "b1", 0)
        cart = (await self.orders.get_cart(self.guest)).data

        self.assertEqual([i.item_id for i in cart.items], ["s1"])
        self.assertEqual(cart.item_count, 1)

    async def test_remove_from_cart(self):
        await self.orders.add_to_cart(self.guest, {"item_id": "b1"})
        removed = await self.orders.remove_from_cart(self.guest, "b1")
        self.assertTrue(removed.success)
        self.assertTrue((await self.orders.get_cart(self.guest)).data.is_empty)

    async def test_cart_failure_still_carries_a_zeroed_cart(self):
        self.backend.go_down("/api/user-orders/cart")
        result = await self.orders.get_cart(self.guest)

        self.assertFalse(result.success)
        self.assertEqual(result.data, Cart.empty())
        self.assertTrue(result.data.is_empty)
        self.assertEqual(result.data.total, 0.0)

    async def test_cart_with_unexpected_body_is_a_failed_result(self):
        self.backend.overrides[
            ("GET", f"/api/user-orders/cart/{self.guest.key}")
        ] = httpx.Response(200, json="oops")

        result = await self.orders.get_cart(self.guest)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Malformed response")
        self.assertEqual(result.data, Cart.empty())

    async def test_menu_and_orders_with_list_body_fail_cleanly(self):
        self.backend.overrides[("GET", "/api/user-orders/menu")] = httpx.Response(
            200, json=MENU_LIST
        )
        self.backend.overrides[("GET", "/api/user-orders/orders/3")] = httpx.Response(
            200, json=[]
        )

        menu = await self.orders.get_menu()
        orders = await self.orders.get_user_orders(Account("3"))

        self.assertFalse(menu.success)
        self.assertEqual(menu.data, [])
        self.assertFalse(orders.success)
        self.assertEqual(orders.data, [])

    async def test_cart_items_must_be_objects(self):
        self.backend.overrides[
            ("GET", f"/api/user-orders/cart/{self.guest.key}")
        ] = httpx.Response(200, json={"items": "b1", "total": 10})

        result = await self.orders.get_cart(self.guest)

        self.assertFalse(result.success)
        self.assertEqual(result.data, Cart.empty())

    async def test_mutation_failure_surfaces_detail(self):
        self.backend.overrides[("POST", "/api/user-orders/cart/add")] = httpx.Response(
            400, json={"detail": "Item is not available"}
        )
        result = await self.orders.add_to_cart(self.guest, {"item_id": "b3"})
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Item is not available")

    # ---------- checkout & history ----------

    async def test_checkout_then_history(self):
        account = Account("3")
        await self.orders.add_to_cart(account, {"item_id": "b1", "quantity": 2})

        placed = await self.orders.checkout(
            account,
            CheckoutRequest(
                order_type="delivery",
                payment_method="upi",
                delivery_address="12 MG Road",
                special_instructions="",
            ),
        )

        self.assertTrue(placed.success)
        self.assertEqual(
            self.backend.last_json(),
            {
                "user_id": "3",
                "order_type": "delivery",
                "payment_method": "upi",
                "delivery_address": "12 MG Road",
                "special_instructions": None,
            },
        )

        history = await self.orders.get_user_orders(account)
        self.assertTrue(history.success)
        self.assertEqual(len(history.data), 1)
        order = history.data[0]
        self.assertEqual(order.order_id, placed.data["order_id"])
        self.assertEqual(order.status, "pending")
        self.assertEqual(order.total, 378.0)

        self.assertTrue((await self.orders.get_cart(account)).data.is_empty)

    async def test_checkout_rejected_by_backend(self):
        result = await self.orders.checkout(
            self.guest, CheckoutRequest(order_type="dine_in", payment_method="cash")
        )
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Cart is empty")

    async def test_order_history_failure_returns_empty_list(self):
        self.backend.go_down("/api/user-orders/orders")
        result = await self.orders.get_user_orders(Account("3"))
        self.assertFalse(result.success)
        self.assertEqual(result.data, [])
