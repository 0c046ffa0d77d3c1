from datetime import date
from typing import List, Literal, Optional, Sequence

from services.models import Cart, EventBooking
from utils.constants import EVENT_TYPES, ORDER_STATUSES

Align = Literal["l", "c", "r"]

_ALIGN_MARKERS = {"l": ":---", "c": ":---:", "r": "---:"}


def markdown_table(
    headers: Sequence[object],
    rows: Sequence[Sequence[object]],
    aligns: Optional[Sequence[Align]] = None,
) -> str:
    """
    Render rows as a Markdown table. Cells are stringified, pipes escaped.

    Returns an empty string when there is nothing to show.
    """
    if not rows and not headers:
        return ""

    width = len(headers)
    aligns = list(aligns) if aligns is not None else ["l"] * width
    if len(aligns) != width:
        raise ValueError("aligns must have one entry per header")

    def line(cells: Sequence[object]) -> str:
        text = [str(c).replace("|", "\\|") for c in cells]
        return "| " + " | ".join(text) + " |"

    lines = [line(headers), "| " + " | ".join(_ALIGN_MARKERS[a] for a in aligns) + " |"]
    lines.extend(line(row) for row in rows)
    return "\n".join(lines)


def format_money(amount: float) -> str:
    return f"₹{amount:,.2f}"


def status_label(status: Optional[str]) -> str:
    """Display name for a server status; unknown ones are shown as sent."""
    if not status:
        return "-"
    return ORDER_STATUSES.get(status, status.replace("_", " ").title())


def cart_summary_markdown(cart: Cart) -> str:
    if cart.is_empty:
        return "### Your cart is empty\n\nBrowse the menu to add something."

    rows = [
        [item.name, format_money(item.price), item.quantity, format_money(item.item_total)]
        for item in cart.items
    ]
    table = markdown_table(["Item", "Price", "Qty", "Total"], rows, ["l", "r", "c", "r"])
    totals = (
        f"**Subtotal:** {format_money(cart.subtotal)}  \n"
        f"**Tax:** {format_money(cart.tax)}  \n"
        f"**Total:** {format_money(cart.total)}"
    )
    return f"### Order Summary ({cart.item_count} items)\n\n{table}\n\n{totals}"


def validate_booking(booking: EventBooking, today: Optional[date] = None) -> List[str]:
    """Checks done before a booking is sent; returns the problems found."""
    today = today or date.today()
    problems = []
    if booking.event_type not in EVENT_TYPES:
        problems.append("Pick an event type.")
    if booking.guests < 1:
        problems.append("At least one guest is required.")
    try:
        when = date.fromisoformat(booking.date)
    except ValueError:
        problems.append("Date must look like YYYY-MM-DD.")
    else:
        if when < today:
            problems.append("Date cannot be in the past.")
    if not booking.time:
        problems.append("Pick a time.")
    return problems
