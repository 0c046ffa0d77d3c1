from datetime import date, timedelta
from typing import Dict

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.events import ScreenResume
from textual.widgets import Button, DataTable, Input, Label, Select

from services.models import Event, EventBooking
from utils.constants import EVENT_PACKAGES, EVENT_TYPES
from utils.pure import format_money, validate_booking
from views.base_screen import BaseScreen
from views.modal_dialog import DialogModal


class EventsScreen(BaseScreen):
    """
    Book a private event and keep an eye on existing bookings.
    """

    def __init__(self) -> None:
        super().__init__()
        self._events: Dict[str, Event] = {}

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Horizontal(id="hort-events"):
            with Vertical(id="div-book-event"):
                yield Label("Event Type")
                yield Select(
                    [(v, k) for k, v in EVENT_TYPES.items()],
                    value="birthday",
                    allow_blank=False,
                    id="select-event-type",
                )
                yield Label("Date (YYYY-MM-DD)")
                yield Input(
                    (date.today() + timedelta(days=7)).isoformat(), id="input-date"
                )
                yield Label("Time (HH:MM)")
                yield Input("19:00", id="input-time")
                yield Label("Guests")
                yield Input("10", id="input-guests", type="integer")
                yield Label("Package")
                yield Select(
                    [(p, p) for p in EVENT_PACKAGES],
                    value=EVENT_PACKAGES[0],
                    allow_blank=False,
                    id="select-package",
                )
                yield Label("Special Requests")
                yield Input(placeholder="Vegetarian options, no nuts", id="input-requests")
                yield Button("Book Event", id="btn-book", variant="primary")
            with Vertical(id="div-my-events"):
                yield DataTable(id="table-events")
                with Horizontal():
                    yield Button("Refresh", id="btn-refresh")
                    yield Button("Cancel Booking", id="btn-cancel", variant="error")

    def on_mount(self) -> None:
        table = self.query_one(DataTable)
        table.cursor_type = "row"
        table.zebra_stripes = True
        table.add_columns("Event", "Type", "Date", "Time", "Guests", "Status", "Cost")

    @on(Button.Pressed, "#btn-refresh")
    @on(ScreenResume)
    @work(exclusive=True, group="events")
    async def load_events(self) -> None:
        identity = await self.app.identity()
        result = await self.app.events.get_events(identity)
        if not result.success:
            self.notify(result.error, severity="error")

        self._events = {e.event_id: e for e in result.data}
        table = self.query_one(DataTable)
        table.clear()
        for e in result.data:
            table.add_row(
                e.title or EVENT_TYPES.get(e.event_type, e.event_type),
                EVENT_TYPES.get(e.event_type, e.event_type),
                e.date,
                e.time,
                e.guests,
                e.status.title(),
                format_money(e.cost),
                key=e.event_id,
            )

    @on(Button.Pressed, "#btn-book")
    @work(exclusive=True, group="events-book")
    async def handle_book(self) -> None:
        guests = self.query_one("#input-guests", Input).value.strip()
        booking = EventBooking(
            event_type=self.query_one("#select-event-type", Select).value,
            date=self.query_one("#input-date", Input).value.strip(),
            time=self.query_one("#input-time", Input).value.strip(),
            guests=int(guests) if guests.lstrip("-").isdigit() else 0,
            package=self.query_one("#select-package", Select).value,
            special_requests=self.query_one("#input-requests", Input).value.strip()
            or None,
        )
        problems = validate_booking(booking)
        if problems:
            self.notify("\n".join(problems), severity="error")
            return

        identity = await self.app.identity()
        result = await self.app.events.book_event(identity, booking)
        if result.success:
            self.notify("Booking request sent. We will confirm shortly.")
            self.load_events()
        else:
            self.notify(result.error, severity="error")

    @on(Button.Pressed, "#btn-cancel")
    @work(exclusive=True, group="events-book")
    async def handle_cancel(self) -> None:
        table = self.query_one(DataTable)
        if table.row_count == 0:
            return
        row_key = table.coordinate_to_cell_key(table.cursor_coordinate).row_key
        event = self._events.get(row_key.value)
        if event is None:
            return

        if not await self.app.push_screen_wait(
            DialogModal(
                f"Cancel booking for {event.date} {event.time}?",
                primary_text="Yes",
                secondary_text="No",
                tone="error",
            )
        ):
            return

        identity = await self.app.identity()
        result = await self.app.events.cancel_event(identity, event.event_id)
        if result.success:
            self.notify("Booking cancelled.")
            self.load_events()
        else:
            self.notify(result.error, severity="error")
