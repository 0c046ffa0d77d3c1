from textual import on
from textual.app import ComposeResult
from textual.containers import VerticalScroll
from textual.events import ScreenResume
from textual.widgets import Markdown

from utils.pure import markdown_table
from views.base_screen import BaseScreen


class DashboardScreen(BaseScreen):
    """
    Staff landing screen. Management tools live in the web console,
    this only confirms who is signed in and in which section.
    """

    SECTION = "Staff"

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with VerticalScroll(id="vertscroll-content"):
            yield Markdown("", id="md-dashboard")

    @on(ScreenResume)
    async def render_dashboard(self) -> None:
        user = self.app.store.state.user
        if user is None:
            return
        rows = [
            ["Name", user.name],
            ["Role", (user.role or "").title()],
            ["Email", user.email or "-"],
            ["Phone", user.phone or "-"],
        ]
        md = (
            f"# {self.SECTION} Dashboard\n\n"
            f"Welcome back, **{user.name}**.\n\n"
            + markdown_table(["", ""], rows, ["l", "l"])
        )
        await self.query_one("#md-dashboard", Markdown).update(md)


class AdminDashboardScreen(DashboardScreen):
    SECTION = "Admin"


class EmployeeDashboardScreen(DashboardScreen):
    SECTION = "Employee"
