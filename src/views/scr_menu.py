from typing import Dict, List

from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal
from textual.widgets import Button, DataTable, Input, Select

from services.models import MenuCategory, MenuItem
from utils.pure import format_money
from views.base_screen import BaseScreen

DIET_FILTERS = [("All", "all"), ("Veg", "veg"), ("Non-veg", "non_veg")]


class MenuScreen(BaseScreen):
    """
    Menu browsing. Enter on a row adds one of that item to the cart.
    """

    # only here to be displayed in footer
    BINDINGS = [
        Binding("enter", "noop", "Add to Cart", show=True, key_display="⏎"),
    ]

    def __init__(self):
        super().__init__()
        self._categories: List[MenuCategory] = []
        self._rows: Dict[str, MenuItem] = {}

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-menu-filters"):
            yield Input(id="input-search", placeholder="Search dishes...")
            yield Select(DIET_FILTERS, value="all", allow_blank=False, id="select-diet")
            yield Button("Refresh", id="btn-refresh")
        yield DataTable(id="table-menu")

    def on_mount(self):
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Category", "Dish", "Diet", "Price")

        self.load_menu()

    @on(Button.Pressed, "#btn-refresh")
    @work(exclusive=True, group="menu")
    async def load_menu(self) -> None:
        result = await self.app.orders.get_menu()
        if not result.success:
            self.notify(result.error, severity="error")
        self._categories = result.data or []
        self.render_menu()

    @on(Input.Changed, "#input-search")
    @on(Select.Changed, "#select-diet")
    def render_menu(self) -> None:
        query = self.query_one("#input-search", Input).value.strip().lower()
        diet = self.query_one("#select-diet", Select).value

        table = self.query_one(DataTable)
        table.clear()
        self._rows = {}
        for category in self._categories:
            for item in category.items:
                if diet != "all" and item.diet_type != diet:
                    continue
                if query and query not in item.name.lower():
                    continue
                label = "Veg" if item.diet_type == "veg" else "Non-veg"
                if not item.available:
                    label += " (sold out)"
                key = f"{category.category_name}:{item.item_id}"
                if key in self._rows:
                    continue
                table.add_row(
                    category.category_name,
                    item.name,
                    label,
                    format_money(item.price),
                    key=key,
                )
                self._rows[key] = item

    @on(DataTable.RowSelected, "#table-menu")
    @work(group="cart-mutation")
    async def handle_add_to_cart(self, event: DataTable.RowSelected) -> None:
        item = self._rows.get(event.row_key.value)
        if item is None:
            return
        if not item.available:
            self.notify(f"{item.name} is sold out.", severity="warning")
            return

        tracker = await self.app.cart_tracker()
        result = await tracker.add(
            {
                "item_id": item.item_id,
                "quantity": 1,
                "category": item.category,
                "diet_type": item.diet_type,
            }
        )
        if result.success:
            self.notify(f"{item.name} added to cart")
        else:
            self.notify(result.error, severity="error")
