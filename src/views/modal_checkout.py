from textual import events, on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, MarkdownViewer, Select

from services.cart import CartTracker
from services.models import CheckoutRequest
from utils.constants import ORDER_TYPES, PAYMENT_METHODS
from utils.messages import NewOrderMessage
from utils.pure import cart_summary_markdown
from views.modal_dialog import DialogModal


class CheckoutModal(ModalScreen[bool]):
    """
    Order summary plus order type, payment and address.
    Dismisses with True once the order is placed.
    """

    def __init__(self, tracker: CartTracker):
        super().__init__()
        self.tracker = tracker

    def compose(self) -> ComposeResult:
        with Vertical():
            yield MarkdownViewer("", show_table_of_contents=False)
            yield Label("Order Type")
            yield Select(
                [(v, k) for k, v in ORDER_TYPES.items()],
                value="dine_in",
                allow_blank=False,
                id="select-order-type",
            )
            yield Label("Payment Method")
            yield Select(
                [(v, k) for k, v in PAYMENT_METHODS.items()],
                value="cash",
                allow_blank=False,
                id="select-payment",
            )
            yield Label("Delivery Address")
            yield Input(
                placeholder="12 MG Road, Bengaluru 560001",
                id="input-address-line",
                disabled=True,
            )
            yield Label("Special Instructions")
            yield Input(placeholder="Less spicy, please", id="input-instructions")
            with Horizontal():
                yield Button("Go Back", id="btn-quit")
                yield Button("Place Order", id="btn-submit", variant="primary")

    async def on_mount(self):
        await self.query_one(MarkdownViewer).document.update(
            cart_summary_markdown(self.tracker.cart)
        )
        self.query_one("#select-order-type").focus()

    def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            self.dismiss(False)

    @on(Select.Changed, "#select-order-type")
    def handle_order_type(self, event: Select.Changed) -> None:
        self.query_one("#input-address-line", Input).disabled = (
            event.value != "delivery"
        )

    @on(Button.Pressed, "#btn-submit")
    @work(exclusive=True)
    async def handle_submit(self):
        order_type = self.query_one("#select-order-type", Select).value
        address_input = self.query_one("#input-address-line", Input)
        address_line = address_input.value.strip()
        if order_type == "delivery" and not address_line:
            address_input.focus()
            address_input.add_class("-invalid")
            self.notify("Delivery address is required.", severity="error")
            return

        if not await self.app.push_screen_wait(
            DialogModal(
                "Place order? This cannot be undone.",
                primary_text="Yes",
                secondary_text="No",
                tone="positive",
            )
        ):
            return

        result = await self.tracker.checkout(
            CheckoutRequest(
                order_type=order_type,
                payment_method=self.query_one("#select-payment", Select).value,
                delivery_address=address_line if order_type == "delivery" else None,
                special_instructions=self.query_one(
                    "#input-instructions", Input
                ).value.strip()
                or None,
            )
        )
        if not result.success:
            self.notify(result.error, severity="error")
            return

        self.notify(f"Order placed. Your order number is {result.data.get('order_id')}.")
        self.app.post_message(NewOrderMessage())
        self.dismiss(True)

    @on(Button.Pressed, "#btn-quit")
    def handle_quit(self):
        self.dismiss(False)
