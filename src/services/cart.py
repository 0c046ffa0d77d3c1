import asyncio
from typing import Any, Dict, Optional

from services.models import Cart, CheckoutRequest, Identity, Result
from services.orders import UserOrdersService
from utils.logger import get_logger

_logger = get_logger(__name__)


class CartTracker:
    """
    Keeps the latest cart snapshot for one identity.

    Every fetch is numbered; a response that lands after a newer one was
    already applied is dropped. Mutations run one at a time and each is
    followed by a fresh fetch, the snapshot is never patched locally.
    """

    def __init__(self, service: UserOrdersService, identity: Identity) -> None:
        self.service = service
        self.identity = identity
        self.cart: Cart = Cart.empty()
        self.last_error: Optional[str] = None

        self._issued = 0
        self._applied = 0
        self._mutation_lock = asyncio.Lock()

    async def refresh(self) -> Cart:
        self._issued += 1
        seq = self._issued
        result = await self.service.get_cart(self.identity)

        if seq < self._applied:
            _logger.debug(f"Dropping stale cart response #{seq}")
            return self.cart

        self._applied = seq
        self.cart = result.data if result.data is not None else Cart.empty()
        self.last_error = result.error
        return self.cart

    async def add(self, item: Dict[str, Any]) -> Result:
        async with self._mutation_lock:
            result = await self.service.add_to_cart(self.identity, item)
            await self.refresh()
        return result

    async def set_quantity(self, item_id: str, quantity: int) -> Result:
        """Zero or less means the line goes away."""
        if quantity <= 0:
            return await self.remove(item_id)
        async with self._mutation_lock:
            result = await self.service.update_quantity(
                self.identity, item_id, quantity
            )
            await self.refresh()
        return result

    async def remove(self, item_id: str) -> Result:
        async with self._mutation_lock:
            result = await self.service.remove_from_cart(self.identity, item_id)
            await self.refresh()
        return result

    async def clear(self) -> Result:
        async with self._mutation_lock:
            result = Result.ok()
            for item in list(self.cart.items):
                removed = await self.service.remove_from_cart(
                    self.identity, item.item_id
                )
                if not removed.success:
                    result = removed
            await self.refresh()
        return result

    async def checkout(self, request: CheckoutRequest) -> Result:
        if self.cart.is_empty:
            return Result.fail("Your cart is empty")
        async with self._mutation_lock:
            result = await self.service.checkout(self.identity, request)
            if result.success:
                await self.refresh()
        return result
