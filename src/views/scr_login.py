from textual import on, work
from textual.app import ComposeResult
from textual.containers import Container, Horizontal, Vertical
from textual.events import Key
from textual.widgets import Button, Input, Label, TabbedContent, TabPane

from utils.constants import ROUTES
from utils.messages import NavigateMessage, UserLoginMessage
from views.base_screen import BaseScreen
from views.modal_dialog import SimpleDialogModal


class LoginScreen(BaseScreen):
    """
    Login and sign up tabs. Only reachable while signed out.
    """

    def __init__(self):
        super().__init__()
        self.configure(header_sub_title="Login", show_sidebar=False)

    def compose(self) -> ComposeResult:
        yield from super().compose()
        with TabbedContent(id="super-tab-loginscr"):
            with TabPane("Login", id="tab-login"):
                with Vertical(id="div-login"):
                    yield Label("Phone or Email")
                    yield Input(placeholder="9876543210", id="input-login-id")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-login-pwd"
                    )
                    with Horizontal(id="div-login-btns"):
                        yield Button("Continue as Guest", id="btn-guest")
                        yield Button("Login", id="btn-login", variant="primary")

            with TabPane("Sign up", id="tab-signup"):
                with Vertical(id="div-reg"):
                    yield Label("Name")
                    yield Input(placeholder="Jane Doe", id="input-reg-name")
                    yield Label("Phone")
                    yield Input(placeholder="9876543210", id="input-reg-phone")
                    yield Label("Email (optional)")
                    yield Input(placeholder="user@example.com", id="input-reg-email")
                    yield Label("Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-reg-pwd"
                    )
                    yield Label("Confirm Password")
                    yield Input(
                        placeholder="*********", password=True, id="input-reg-pwd2"
                    )
                    with Container(id="div-reg-btns"):
                        yield Button("Register", id="btn-reg", variant="primary")

            with TabPane("Forgot password", id="tab-forgot"):
                with Vertical(id="div-forgot"):
                    yield Label("Phone")
                    yield Input(placeholder="9876543210", id="input-forgot-phone")
                    yield Button("Send reset link", id="btn-forgot", variant="primary")

    def on_mount(self):
        self.query_one("#input-login-id").focus()

    def on_key(self, event: Key) -> None:
        if event.key == "enter" and self.focused == self.query_one("#input-login-pwd"):
            self.handle_login_submit()
        if event.key == "enter" and self.focused == self.query_one("#input-reg-pwd2"):
            self.handle_registration_submit()

    @on(Button.Pressed, "#btn-login")
    @work(exclusive=True)
    async def handle_login_submit(self) -> None:
        login_id = self.query_one("#input-login-id", Input).value.strip()
        pwd = self.query_one("#input-login-pwd", Input).value.strip()

        if not login_id or not pwd:
            self.notify("Phone/email and password cannot be empty!", severity="error")
            return

        key = "email" if "@" in login_id else "phone"
        result = await self.app.store.login({key: login_id, "password": pwd})

        input_login_pwd = self.query_one("#input-login-pwd", Input)
        input_login_pwd.value = ""
        if result.success:
            self.notify(f"Hello {result.data['user'].name}!")
            self.app.post_message(UserLoginMessage())
        else:
            self.notify(result.error, severity="error")
            input_login_pwd.focus()
            input_login_pwd.add_class("-invalid")

    @on(Button.Pressed, "#btn-reg")
    @work(exclusive=True)
    async def handle_registration_submit(self) -> None:
        name = self.query_one("#input-reg-name", Input).value.strip()
        phone = self.query_one("#input-reg-phone", Input).value.strip()
        email = self.query_one("#input-reg-email", Input).value.strip()
        pwd = self.query_one("#input-reg-pwd", Input).value.strip()
        pwd2 = self.query_one("#input-reg-pwd2", Input).value.strip()

        if not name or not phone or not pwd:
            self.notify("Name, phone and password are required.", severity="error")
            return
        if pwd != pwd2:
            self.query_one("#input-reg-pwd2", Input).add_class("-invalid")
            self.notify("Passwords do not match.", severity="error")
            return

        result = await self.app.auth.register(
            {
                "name": name,
                "phone": phone,
                "email": email,
                "password": pwd,
                "confirm_password": pwd2,
            }
        )
        if not result.success:
            self.notify(result.error, severity="error")
            return

        await self.app.push_screen_wait(SimpleDialogModal(result.data["message"]))

        self.get_child_by_type(TabbedContent).active = "tab-login"
        input_login_id = self.query_one("#input-login-id", Input)
        input_login_id.value = phone
        self.query_one("#input-login-pwd", Input).focus()

    @on(Button.Pressed, "#btn-forgot")
    @work(exclusive=True)
    async def handle_forgot_password(self) -> None:
        phone = self.query_one("#input-forgot-phone", Input).value.strip()
        if not phone:
            self.notify("Enter the phone number of your account.", severity="error")
            return
        result = await self.app.auth.forgot_password(phone)
        if result.success:
            self.notify("If the account exists, a reset link is on its way.")
        else:
            self.notify(result.error, severity="error")

    @on(Button.Pressed, "#btn-guest")
    def handle_continue_as_guest(self) -> None:
        self.post_message(NavigateMessage(ROUTES.HOME))
