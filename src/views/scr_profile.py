from textual import on, work
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import ScreenResume
from textual.widgets import Button, Input, Label, Rule

from views.base_screen import BaseScreen


class ProfileScreen(BaseScreen):
    """Edit name, email and phone; change password."""

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with Vertical(id="div-profile"):
            yield Label("Name")
            yield Input(id="input-name")
            yield Label("Email")
            yield Input(id="input-email")
            yield Label("Phone")
            yield Input(id="input-phone")
            yield Button("Save Profile", id="btn-save", variant="primary")
            yield Rule(line_style="dashed")
            yield Label("Current Password")
            yield Input(password=True, id="input-pwd-current")
            yield Label("New Password")
            yield Input(password=True, id="input-pwd-new")
            yield Button("Change Password", id="btn-change-pwd")

    @on(ScreenResume)
    def fill_form(self) -> None:
        user = self.app.store.state.user
        if user is None:
            return
        self.query_one("#input-name", Input).value = user.name or ""
        self.query_one("#input-email", Input).value = user.email or ""
        self.query_one("#input-phone", Input).value = user.phone or ""

    @on(Button.Pressed, "#btn-save")
    @work(exclusive=True)
    async def handle_save(self) -> None:
        user = self.app.store.state.user
        if user is None:
            return

        changes = {}
        for field in ("name", "email", "phone"):
            value = self.query_one(f"#input-{field}", Input).value.strip()
            if value != (getattr(user, field) or ""):
                changes[field] = value
        if not changes:
            self.notify("Nothing to save.", severity="warning")
            return

        result = await self.app.store.update_user(changes)
        if result.success:
            self.notify("Profile updated.")
            await self.refresh_sidebar()
        else:
            self.notify(result.error, severity="error")

    @on(Button.Pressed, "#btn-change-pwd")
    @work(exclusive=True)
    async def handle_change_password(self) -> None:
        current = self.query_one("#input-pwd-current", Input)
        new = self.query_one("#input-pwd-new", Input)
        if not current.value or not new.value:
            self.notify("Fill in both password fields.", severity="error")
            return

        result = await self.app.auth.change_password(current.value, new.value)
        current.value = ""
        new.value = ""
        if result.success:
            self.notify("Password changed.")
        else:
            self.notify(result.error, severity="error")
