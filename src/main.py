from typing import Dict, Optional

import httpx
from textual import on, work
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import LoadingIndicator

from services.auth import AuthService
from services.cart import CartTracker
from services.client import ApiClient
from services.events import EventService
from services.identity import get_user_id
from services.models import Identity
from services.orders import UserOrdersService
from services.storage import Storage
from utils.constants import ROLES, ROUTES, STORAGE_KEYS
from utils.guards import Placeholder, landing_redirect, public_only, resolve, roles
from utils.logger import get_logger
from utils.messages import (
    NavigateMessage,
    NewOrderMessage,
    QuitRequestedMessage,
    SessionExpiredMessage,
    UserLoginMessage,
    UserLogoutMessage,
)
from utils.state import AuthStore
from views.scr_cart import CartScreen
from views.scr_dashboard import AdminDashboardScreen, EmployeeDashboardScreen
from views.scr_events import EventsScreen
from views.scr_home import HomeScreen
from views.scr_login import LoginScreen
from views.scr_menu import MenuScreen
from views.scr_orders import OrdersScreen
from views.scr_profile import ProfileScreen

_logger = get_logger(__name__)


class RestroApp(App):
    BINDINGS = [
        Binding("ctrl+t", "switch_light", "Toggle Theme", show=True),
    ]

    # each route is a mode, the guard decides whether it may be shown
    MODES = {
        ROUTES.HOME: HomeScreen,
        ROUTES.LOGIN: LoginScreen,
        ROUTES.MENU: MenuScreen,
        ROUTES.CART: CartScreen,
        ROUTES.ORDERS: OrdersScreen,
        ROUTES.EVENTS: EventsScreen,
        ROUTES.PROFILE: ProfileScreen,
        ROUTES.ADMIN_DASHBOARD: AdminDashboardScreen,
        ROUTES.EMPLOYEE_DASHBOARD: EmployeeDashboardScreen,
    }

    GUARDS = {
        ROUTES.HOME: landing_redirect,
        ROUTES.LOGIN: public_only,
        ROUTES.ORDERS: roles(ROLES.CUSTOMER),
        ROUTES.PROFILE: roles(ROLES.CUSTOMER),
        ROUTES.ADMIN_DASHBOARD: roles(ROLES.ADMIN),
        ROUTES.EMPLOYEE_DASHBOARD: roles(ROLES.EMPLOYEE),
    }

    ROUTE_TITLES = {
        ROUTES.HOME: "Home",
        ROUTES.LOGIN: "Login",
        ROUTES.MENU: "Menu",
        ROUTES.CART: "Cart",
        ROUTES.ORDERS: "My Orders",
        ROUTES.EVENTS: "Events",
        ROUTES.PROFILE: "Profile",
        ROUTES.ADMIN_DASHBOARD: "Admin Dashboard",
        ROUTES.EMPLOYEE_DASHBOARD: "Employee Dashboard",
    }

    GUEST_NAV = (ROUTES.HOME, ROUTES.MENU, ROUTES.CART, ROUTES.EVENTS)
    ROLE_NAV = {
        ROLES.CUSTOMER: (
            ROUTES.HOME,
            ROUTES.MENU,
            ROUTES.CART,
            ROUTES.ORDERS,
            ROUTES.EVENTS,
            ROUTES.PROFILE,
        ),
        ROLES.ADMIN: (ROUTES.ADMIN_DASHBOARD,),
        ROLES.EMPLOYEE: (ROUTES.EMPLOYEE_DASHBOARD,),
    }

    CSS_PATH = "styles/app.tcss"

    def __init__(
        self,
        storage: Optional[Storage] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__()
        self.storage = storage or Storage()
        self.client = ApiClient(
            self.storage, transport=transport, on_unauthorized=self._session_expired
        )
        self.auth = AuthService(self.client, self.storage)
        self.orders = UserOrdersService(self.client)
        self.events = EventService(self.client)
        self.store = AuthStore(self.auth)
        self._trackers: Dict[str, CartTracker] = {}
        self._current_tracker: Optional[CartTracker] = None

    def compose(self) -> ComposeResult:
        yield LoadingIndicator()

    async def on_mount(self) -> None:
        self.boot()

    @work(exclusive=True, group="boot")
    async def boot(self) -> None:
        await self.storage.load()
        theme = self.storage.get(STORAGE_KEYS.THEME)
        if theme in self.available_themes:
            self.theme = theme
        self.store.hydrate()
        self.navigate(ROUTES.HOME)

    @work(exclusive=True, group="navigate")
    async def navigate(self, route: str) -> None:
        if route not in self.MODES:
            route = ROUTES.HOME
        target, decision = resolve(self.GUARDS, route, self.store.state)
        if isinstance(decision, Placeholder):
            # still hydrating, the loading indicator stays up
            return
        if target != route:
            _logger.debug(f"Guard sent {route} to {target}")
        if self.current_mode != target:
            await self.switch_mode(target)

    def nav_items(self) -> Dict[str, str]:
        state = self.store.state
        if state.is_authenticated:
            routes = self.ROLE_NAV.get(state.role, self.ROLE_NAV[ROLES.CUSTOMER])
        else:
            routes = self.GUEST_NAV
        return {route: self.ROUTE_TITLES[route] for route in routes}

    # ---------------------------
    # Cart identity
    # ---------------------------

    async def identity(self) -> Identity:
        return await get_user_id(self.store.state, self.storage)

    async def cart_tracker(self) -> CartTracker:
        """One tracker per identity, shared by every screen touching the cart."""
        identity = await self.identity()
        tracker = self._trackers.get(identity.key)
        if tracker is None:
            tracker = CartTracker(self.orders, identity)
            self._trackers[identity.key] = tracker
        self._current_tracker = tracker
        return tracker

    def current_tracker(self) -> Optional[CartTracker]:
        return self._current_tracker

    def _forget_carts(self) -> None:
        self._trackers.clear()
        self._current_tracker = None

    # ---------------------------
    # Messages
    # ---------------------------

    async def _session_expired(self) -> None:
        self.post_message(SessionExpiredMessage())

    @on(NavigateMessage)
    def handle_navigate(self, message: NavigateMessage) -> None:
        self.navigate(message.route)

    @on(UserLoginMessage)
    def handle_user_login(self) -> None:
        self._forget_carts()
        self.navigate(self.store.redirect_path())

    @on(UserLogoutMessage)
    @work(exclusive=True, group="session")
    async def handle_user_logout(self) -> None:
        await self.store.logout()
        self._forget_carts()
        self.notify("Logout successful.")
        self.navigate(ROUTES.LOGIN)

    @on(SessionExpiredMessage)
    def handle_session_expired(self) -> None:
        if not self.store.state.is_authenticated:
            return
        self.store.expire_session()
        self._forget_carts()
        self.notify("Your session has expired, please log in again.", severity="warning")
        self.navigate(ROUTES.LOGIN)

    @on(NewOrderMessage)
    def handle_new_order(self) -> None:
        if self.store.is_customer():
            self.navigate(ROUTES.ORDERS)

    @on(QuitRequestedMessage)
    def handle_quit(self) -> None:
        self.exit()

    @work(group="theme")
    async def action_switch_light(self):
        if self.theme == "textual-dark":
            self.theme = "solarized-light"
        else:
            self.theme = "textual-dark"
        await self.storage.set(STORAGE_KEYS.THEME, self.theme)
        self.notify(f"Theme changed to {self.theme}")


def run() -> None:
    RestroApp().run()


if __name__ == "__main__":
    run()
