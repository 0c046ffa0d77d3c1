from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from services.auth import AuthService
from services.models import Result, User
from utils.constants import ROLES
from utils.guards import landing_route
from utils.logger import get_logger

_logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthState:
    """
    Snapshot of the session, replaced wholesale on every dispatch.

    Fields:
      - user: signed in user, None otherwise
      - token: opaque session token
      - is_authenticated: token and user are both present
      - is_loading: True until storage has been read, and during login
      - error: last login error, kept until cleared
    """

    user: Optional[User] = None
    token: Optional[str] = None
    is_authenticated: bool = False
    is_loading: bool = True
    error: Optional[str] = None

    @property
    def role(self) -> Optional[str]:
        return self.user.role if self.user else None


# ---------------------------
# Actions
# ---------------------------


@dataclass(frozen=True)
class LoginStart:
    pass


@dataclass(frozen=True)
class LoginSuccess:
    user: User
    token: str


@dataclass(frozen=True)
class LoginFailure:
    error: str


@dataclass(frozen=True)
class Logout:
    pass


@dataclass(frozen=True)
class UpdateUser:
    changes: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SetLoading:
    loading: bool


@dataclass(frozen=True)
class ClearError:
    pass


def reduce(state: AuthState, action) -> AuthState:
    if isinstance(action, LoginStart):
        return dataclasses.replace(state, is_loading=True, error=None)
    if isinstance(action, LoginSuccess):
        return AuthState(
            user=action.user,
            token=action.token,
            is_authenticated=True,
            is_loading=False,
            error=None,
        )
    if isinstance(action, LoginFailure):
        return AuthState(is_loading=False, error=action.error)
    if isinstance(action, Logout):
        return AuthState(is_loading=False)
    if isinstance(action, UpdateUser):
        if not state.is_authenticated or state.user is None:
            return state
        return dataclasses.replace(state, user=state.user.merged(action.changes))
    if isinstance(action, SetLoading):
        return dataclasses.replace(state, is_loading=action.loading)
    if isinstance(action, ClearError):
        return dataclasses.replace(state, error=None)
    raise TypeError(f"Unknown auth action: {action!r}")


Listener = Callable[[AuthState], None]


class AuthStore:
    """
    Application wide session container. Screens read `state` and go through
    the methods below to change it; nothing assigns to `state` directly.
    """

    def __init__(self, auth_service: AuthService) -> None:
        self.auth_service = auth_service
        self._state = AuthState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> AuthState:
        return self._state

    def dispatch(self, action) -> AuthState:
        self._state = reduce(self._state, action)
        _logger.debug(f"{type(action).__name__} -> {self._state}")
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ---------------------------
    # Session lifecycle
    # ---------------------------

    def hydrate(self) -> AuthState:
        """Read the stored session, leaving the loading state either way."""
        token = self.auth_service.get_token()
        user = self.auth_service.get_current_user()
        if token and user:
            return self.dispatch(LoginSuccess(user=user, token=token))
        return self.dispatch(SetLoading(False))

    async def login(self, credentials: Dict[str, str]) -> Result:
        self.dispatch(LoginStart())
        try:
            result = await self.auth_service.login(credentials)
        except Exception:
            # loading must end whatever the service does
            _logger.exception("Login raised")
            result = Result.fail("Login failed. Please try again.")
        if result.success:
            self.dispatch(LoginSuccess(**result.data))
        else:
            self.dispatch(LoginFailure(result.error))
        return result

    async def logout(self) -> None:
        try:
            await self.auth_service.logout()
        finally:
            self.dispatch(Logout())

    def expire_session(self) -> None:
        """Drop the session locally, the backend already considers it gone."""
        if self._state.is_authenticated:
            _logger.info("Session expired")
        self.dispatch(Logout())

    async def update_user(self, changes: Dict[str, Any]) -> Result:
        if not self._state.is_authenticated:
            return Result.fail("You need to be signed in to update your profile")
        result = await self.auth_service.update_profile(changes)
        if result.success:
            self.dispatch(UpdateUser(result.data["user"].to_dict()))
        return result

    def clear_error(self) -> None:
        self.dispatch(ClearError())

    # ---------------------------
    # Role helpers
    # ---------------------------

    @property
    def role(self) -> Optional[str]:
        return self._state.role

    def has_role(self, role: str) -> bool:
        return self.role == role

    def is_admin(self) -> bool:
        return self.has_role(ROLES.ADMIN)

    def is_employee(self) -> bool:
        return self.has_role(ROLES.EMPLOYEE)

    def is_customer(self) -> bool:
        return self.has_role(ROLES.CUSTOMER)

    def redirect_path(self) -> str:
        return landing_route(self._state.user)
