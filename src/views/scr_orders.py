from typing import Dict, Optional

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, MarkdownViewer

from services.models import Order
from utils.constants import ORDER_TYPES, PAYMENT_METHODS
from utils.pure import format_money, markdown_table, status_label
from views.base_screen import BaseScreen


class OrdersScreen(BaseScreen):
    """
    Customers browse their placed orders and view details.

    Layout:
    - Markdown detail view at the top, showing the highlighted order.
    - Orders table below, newest first.
    """

    # Show some hints in footer
    BINDINGS = [
        Binding("enter", "noop", "View Order Detail", show=True, key_display="⏎"),
    ]

    def __init__(self) -> None:
        super().__init__()
        self._orders: Dict[str, Order] = {}

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical():
            yield MarkdownViewer(id="md-order-detail", show_table_of_contents=False)
            yield DataTable(id="table-orders")
        with Horizontal(id="hort-table-control"):
            yield Button("Refresh", id="btn-refresh")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Order", "Placed", "Type", "Status", "Total")

    @on(Button.Pressed, "#btn-refresh")
    @on(ScreenResume)
    @work(exclusive=True, group="orders")
    async def load_orders(self) -> None:
        identity = await self.app.identity()
        result = await self.app.orders.get_user_orders(identity)
        if not result.success:
            self.notify(result.error, severity="error")

        orders = sorted(result.data, key=lambda o: o.created_at or "", reverse=True)
        self._orders = {o.order_id: o for o in orders}

        table = self.query_one(DataTable)
        table.clear()
        for o in orders:
            table.add_row(
                o.order_id,
                o.created_at or "-",
                ORDER_TYPES.get(o.order_type, o.order_type or "-"),
                status_label(o.status),
                format_money(o.total),
                key=o.order_id,
            )
        self.render_detail(orders[0] if orders else None)

    @on(DataTable.RowHighlighted, "#table-orders")
    def handle_row_highlight(self, event: DataTable.RowHighlighted) -> None:
        self.render_detail(self._orders.get(event.row_key.value))

    def render_detail(self, order: Optional[Order]) -> None:
        viewer = self.query_one("#md-order-detail", MarkdownViewer)
        if order is None:
            viewer.document.update("### Select an order to view its details.")
            return

        header = (
            f"### Order #{order.order_id}\n"
            f"Status: **{status_label(order.status)}**  \n"
            f"Placed: {order.created_at or '-'}  \n"
            f"Type: {ORDER_TYPES.get(order.order_type, order.order_type or '-')}  \n"
            f"Payment: {PAYMENT_METHODS.get(order.payment_method, order.payment_method or '-')}\n"
        )
        if order.delivery_address:
            header += f"\nDeliver to: {order.delivery_address}\n"
        if order.special_instructions:
            header += f"\nNotes: {order.special_instructions}\n"

        rows = [
            [
                line.get("name", line.get("item_id", "?")),
                line.get("quantity", 1),
                format_money(float(line.get("item_total") or 0)),
            ]
            for line in order.items
        ]
        table = markdown_table(["Item", "Qty", "Line Total"], rows, ["l", "c", "r"])
        footer = f"\n\n**Grand Total:** {format_money(order.total)}"
        viewer.document.update(header + "\n" + table + footer)
