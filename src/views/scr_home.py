from textual import on
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.widgets import Button, Markdown

from utils.constants import ROUTES
from utils.messages import NavigateMessage
from views.base_screen import BaseScreen

WELCOME_MD = """\
# Welcome to Restro

Fresh biryanis, curries and starters, cooked to order.

- Browse the **menu** and fill your cart, no account needed.
- Plan a birthday, anniversary or corporate dinner from **events**.
- Sign in to keep track of your **orders** and profile.
"""


class HomeScreen(BaseScreen):
    """Landing page for guests and customers."""

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll(id="vertscroll-content"):
            yield Markdown(WELCOME_MD, id="md-welcome")
        with Horizontal(id="hort-buttons"):
            yield Button("Browse Menu", id="btn-menu", variant="primary")
            yield Button("Book an Event", id="btn-events")

    @on(Button.Pressed, "#btn-menu")
    def handle_menu(self) -> None:
        self.post_message(NavigateMessage(ROUTES.MENU))

    @on(Button.Pressed, "#btn-events")
    def handle_events(self) -> None:
        self.post_message(NavigateMessage(ROUTES.EVENTS))
