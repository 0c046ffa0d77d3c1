# menu, cart, checkout and order history, all keyed by account id or guest session id
from __future__ import annotations

from typing import Any, Dict

from services.client import ApiClient, ApiError, records
from services.models import Cart, CheckoutRequest, Identity, MenuCategory, Order, Result
from utils.logger import get_logger

_logger = get_logger(__name__)

BASE_PATH = "/api/user-orders"


class UserOrdersService:
    """
    Stateless wrapper over the user-orders endpoints.

    Cart mutations do not return the cart; callers re-fetch with `get_cart`.
    """

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def get_menu(self) -> Result:
        try:
            payload = await self.client.get(f"{BASE_PATH}/menu")
            categories = [
                MenuCategory.from_dict(
                    {**c, "veg": records(c, "veg"), "non_veg": records(c, "non_veg")}
                )
                for c in records(payload, "categories")
            ]
        except ApiError as exc:
            _logger.error(f"Failed to fetch menu: {exc}")
            return Result.fail(exc.detail or "Failed to fetch menu", [])

        return Result.ok(categories)

    async def add_to_cart(self, identity: Identity, item: Dict[str, Any]) -> Result:
        try:
            payload = await self.client.post(
                f"{BASE_PATH}/cart/add",
                {
                    "user_id": identity.key,
                    "item_id": item["item_id"],
                    "quantity": item.get("quantity") or 1,
                    "category": item.get("category"),
                    "diet_type": item.get("diet_type"),
                },
            )
        except ApiError as exc:
            _logger.error(f"Failed to add {item.get('item_id')} to cart: {exc}")
            return Result.fail(exc.detail or "Failed to add item to cart")
        return Result.ok(payload)

    async def get_cart(self, identity: Identity) -> Result:
        """A failed fetch still carries a zeroed cart as data."""
        try:
            payload = await self.client.get(f"{BASE_PATH}/cart/{identity.key}")
            items = records(payload, "items")
            cart = Cart.from_dict({**(payload or {}), "items": items})
        except ApiError as exc:
            _logger.error(f"Failed to fetch cart: {exc}")
            return Result.fail(exc.detail or "Failed to fetch cart", Cart.empty())
        return Result.ok(cart)

    async def update_quantity(
        self, identity: Identity, item_id: str, new_quantity: int
    ) -> Result:
        try:
            payload = await self.client.post(
                f"{BASE_PATH}/cart/update-quantity",
                {
                    "user_id": identity.key,
                    "item_id": item_id,
                    "new_quantity": new_quantity,
                },
            )
        except ApiError as exc:
            _logger.error(f"Failed to update quantity of {item_id}: {exc}")
            return Result.fail(exc.detail or "Failed to update quantity")
        return Result.ok(payload)

    async def remove_from_cart(self, identity: Identity, item_id: str) -> Result:
        try:
            payload = await self.client.post(
                f"{BASE_PATH}/cart/remove",
                {"user_id": identity.key, "item_id": item_id},
            )
        except ApiError as exc:
            _logger.error(f"Failed to remove {item_id} from cart: {exc}")
            return Result.fail(exc.detail or "Failed to remove item from cart")
        return Result.ok(payload)

    async def checkout(self, identity: Identity, request: CheckoutRequest) -> Result:
        try:
            payload = await self.client.post(
                f"{BASE_PATH}/checkout",
                {
                    "user_id": identity.key,
                    "order_type": request.order_type,
                    "payment_method": request.payment_method,
                    "delivery_address": request.delivery_address or None,
                    "special_instructions": request.special_instructions or None,
                },
            )
        except ApiError as exc:
            _logger.error(f"Checkout failed: {exc}")
            return Result.fail(exc.detail or "Failed to place order")
        _logger.info(f"Placed order {(payload or {}).get('order_id')}")
        return Result.ok(payload or {})

    async def get_user_orders(self, identity: Identity) -> Result:
        try:
            payload = await self.client.get(f"{BASE_PATH}/orders/{identity.key}")
            orders = records(payload, "data")
        except ApiError as exc:
            _logger.error(f"Failed to fetch orders: {exc}")
            return Result.fail(exc.detail or "Failed to fetch orders", [])

        return Result.ok([Order.from_dict(o) for o in orders])
