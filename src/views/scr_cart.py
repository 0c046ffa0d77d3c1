from typing import Optional

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.events import ScreenResume, ScreenSuspend
from textual.timer import Timer
from textual.widgets import Button, DataTable, Label, Rule

from services.models import Cart, CartItem
from utils.constants import CART_POLL_INTERVAL
from utils.pure import format_money
from views.base_screen import BaseScreen
from views.modal_checkout import CheckoutModal
from views.modal_dialog import DialogModal


class CartScreen(BaseScreen):
    """
    Cart contents and totals, as last reported by the backend.

    The cart is polled while this screen is showing; the timer is paused
    when another screen takes over and stopped on unmount.
    """

    def __init__(self) -> None:
        super().__init__()
        self._poll: Optional[Timer] = None

    def compose(self) -> ComposeResult:
        yield from super().compose()
        yield DataTable(id="table-cart")
        yield Label("Subtotal: -", id="label-cart-subtotal")
        yield Label("Tax: -", id="label-cart-tax")
        yield Label("Total: -", id="label-cart-total")
        yield Rule(line_style="dashed")
        with Horizontal(id="hort-buttons"):
            yield Button("-", id="btn-sub-qty")
            yield Button("+", id="btn-add-qty")
            yield Button("Remove", id="btn-remove")
            yield Button("Clear Cart", id="btn-clear-cart")
            yield Button("Refresh", id="btn-refresh")
            yield Button("Checkout", id="btn-checkout", variant="primary")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Item", "Price", "Qty", "Line Total")

        self._poll = self.set_interval(CART_POLL_INTERVAL, self.handle_cart_change)
        self.handle_cart_change()

    @on(ScreenResume)
    def handle_resume(self) -> None:
        if self._poll is not None:
            self._poll.resume()
        self.handle_cart_change()

    @on(ScreenSuspend)
    def handle_suspend(self) -> None:
        if self._poll is not None:
            self._poll.pause()

    def on_unmount(self) -> None:
        if self._poll is not None:
            self._poll.stop()
            self._poll = None

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="cart-refresh")
    async def handle_cart_change(self) -> None:
        tracker = await self.app.cart_tracker()
        cart = await tracker.refresh()
        if tracker.last_error:
            self.notify(tracker.last_error, severity="error")
        self.render_cart(cart)

    def render_cart(self, cart: Cart) -> None:
        table = self.query_one(DataTable)
        selected = self.selected_item()
        table.clear()
        for item in cart.items:
            table.add_row(
                item.name,
                format_money(item.price),
                item.quantity,
                format_money(item.item_total),
                key=item.item_id,
            )
        if selected is not None and selected.item_id in table.rows:
            table.move_cursor(row=table.get_row_index(selected.item_id))

        self.query_one("#label-cart-subtotal", Label).update(
            f"Subtotal: {format_money(cart.subtotal)}"
        )
        self.query_one("#label-cart-tax", Label).update(f"Tax: {format_money(cart.tax)}")
        self.query_one("#label-cart-total", Label).update(
            f"Total ({cart.item_count} items): {format_money(cart.total)}"
        )
        self.query_one("#btn-checkout", Button).disabled = cart.is_empty

    def selected_item(self) -> Optional[CartItem]:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return None
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        tracker = self.app.current_tracker()
        if tracker is None:
            return None
        for item in tracker.cart.items:
            if item.item_id == row_key.value:
                return item
        return None

    @on(Button.Pressed, "#btn-add-qty")
    @work(group="cart-mutation")
    async def handle_add_qty(self) -> None:
        item = self.selected_item()
        if item is not None:
            await self.change_quantity(item, item.quantity + 1)

    @on(Button.Pressed, "#btn-sub-qty")
    @work(group="cart-mutation")
    async def handle_sub_qty(self) -> None:
        item = self.selected_item()
        if item is not None:
            await self.change_quantity(item, item.quantity - 1)

    async def change_quantity(self, item: CartItem, quantity: int) -> None:
        tracker = await self.app.cart_tracker()
        result = await tracker.set_quantity(item.item_id, quantity)
        if not result.success:
            self.notify(result.error, severity="error")
        elif quantity <= 0:
            self.notify(f"{item.name} removed from cart")
        self.render_cart(tracker.cart)

    @on(Button.Pressed, "#btn-remove")
    @work(group="cart-mutation")
    async def handle_remove_item(self) -> None:
        item = self.selected_item()
        if item is None:
            return
        if not await self.app.push_screen_wait(
            DialogModal(
                f"Remove {item.name} from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            return
        await self.change_quantity(item, 0)

    @on(Button.Pressed, "#btn-clear-cart")
    @work(group="cart-mutation")
    async def handle_clear_cart(self) -> None:
        tracker = await self.app.cart_tracker()
        if tracker.cart.is_empty:
            self.app.notify("Cart is empty.", severity="warning")
            return

        if not await self.app.push_screen_wait(
            DialogModal(
                "Do you really want to remove all items from cart?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        ):
            return
        result = await tracker.clear()
        if result.success:
            self.notify("Cart cleared")
        else:
            self.notify(result.error, severity="error")
        self.render_cart(tracker.cart)

    @on(Button.Pressed, "#btn-checkout")
    @work(group="cart-mutation")
    async def handle_checkout(self) -> None:
        tracker = await self.app.cart_tracker()
        if tracker.cart.is_empty:
            self.app.notify("Your cart is empty", severity="warning")
            return

        await self.app.push_screen_wait(CheckoutModal(tracker))
        self.render_cart(tracker.cart)
