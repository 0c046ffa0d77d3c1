from textual import on, work
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.events import Resize, ScreenResume
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Label, ListItem, ListView, Markdown

from utils.constants import APP_TITLE, ROUTES
from utils.messages import NavigateMessage, UserLogoutMessage
from utils.pure import markdown_table
from views.modal_dialog import DialogModal, QuitDialogModal
from views.modal_resize import ResizeScreenPromptModal


class NavItem(ListItem):
    def __init__(self, route: str, label: str) -> None:
        super().__init__(Label(label))
        self.route = route


class Sidebar(Container):
    def compose(self) -> ComposeResult:
        yield Label("Account", id="label-info-1")
        yield Markdown("", id="md-userinfo")
        yield Button("Log out", id="btn-session", variant="error")
        yield Label("Menu", id="label-info-2")
        yield ListView(id="list-menu")

    async def on_mount(self):
        await self.refresh_contents()

    async def refresh_contents(self) -> None:
        state = self.app.store.state
        btn_session = self.query_one("#btn-session", Button)

        if state.is_authenticated and state.user:
            rows = [
                ["Name", state.user.name or "-"],
                ["Role", (state.user.role or "customer").title()],
            ]
            if state.user.phone:
                rows.append(["Phone", state.user.phone])
            btn_session.label = "Log out"
            btn_session.variant = "error"
        else:
            rows = [["Visitor", "Guest"]]
            btn_session.label = "Log in"
            btn_session.variant = "primary"
        await self.query_one(Markdown).update(markdown_table(["", ""], rows))

        list_menu = self.query_one("#list-menu", ListView)
        await list_menu.clear()
        await list_menu.extend(
            [NavItem(route, label) for route, label in self.app.nav_items().items()]
        )
        self.highlight_item(self.app.current_mode)

    def on_list_view_selected(self, event: ListView.Selected):
        if isinstance(event.item, NavItem):
            self.post_message(NavigateMessage(event.item.route))

    @on(Button.Pressed, "#btn-session")
    @work()
    async def handle_session_button(self):
        if not self.app.store.state.is_authenticated:
            self.post_message(NavigateMessage(ROUTES.LOGIN))
            return

        if await self.app.push_screen_wait(
            DialogModal(
                "Are you sure you want to log out?",
                primary_text="Yes",
                secondary_text="No",
                tone="warning",
            )
        ):
            self.post_message(UserLogoutMessage())

    def highlight_item(self, route: str):
        for item in self.query_one("#list-menu", ListView).children:
            item.highlighted = isinstance(item, NavItem) and item.route == route


class BaseScreen(Screen):
    """
    Inherited by all screens, contains common elements like
    headers, footers, sidebar, and keybindings.
    """

    BINDINGS = [
        Binding("ctrl+z", "quit", "Quit App", show=True),
    ]

    def __init__(self):
        super().__init__()

        self.configure()

    def configure(
        self,
        header_sub_title: str = "",
        show_sidebar: bool = True,
    ) -> None:
        self.app.title = APP_TITLE
        self.sub_title = header_sub_title
        for route, screen_cls in self.app.MODES.items():
            if type(self) is screen_cls:
                self.sub_title = self.app.ROUTE_TITLES.get(route, header_sub_title)

        self._show_sidebar = show_sidebar

    def compose(self) -> ComposeResult:
        if self._show_sidebar:
            yield Sidebar()
        yield Header()
        yield Footer(show_command_palette=False)

    async def on_resize(self, event: Resize) -> None:
        min_width = 60
        min_height = 20
        if event.size.width < min_width or event.size.height < min_height:
            self.app.push_screen(ResizeScreenPromptModal(min_width, min_height))

    @on(ScreenResume)
    async def refresh_sidebar(self) -> None:
        for sidebar in self.query(Sidebar):
            await sidebar.refresh_contents()

    @work()
    async def action_quit(self):
        await self.app.push_screen_wait(QuitDialogModal())
