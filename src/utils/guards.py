"""
Route policies. Each guard maps the current auth state to what the router
should do: render the screen, show the loading placeholder, or go elsewhere.

Every place that needs a role's home route goes through `landing_route`.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, Optional, Tuple, Union

from utils.constants import ROLES, ROUTES


@dataclass(frozen=True)
class Render:
    pass


@dataclass(frozen=True)
class Placeholder:
    pass


@dataclass(frozen=True)
class Redirect:
    route: str


Decision = Union[Render, Placeholder, Redirect]
Guard = Callable[..., Decision]

_LANDING = {
    ROLES.ADMIN: ROUTES.ADMIN_DASHBOARD,
    ROLES.EMPLOYEE: ROUTES.EMPLOYEE_DASHBOARD,
    ROLES.CUSTOMER: ROUTES.HOME,
}

MAX_REDIRECTS = 5


def landing_route(user) -> str:
    """No user goes to login; unknown roles are treated as customers."""
    if user is None:
        return ROUTES.LOGIN
    return _LANDING.get(getattr(user, "role", None), ROUTES.HOME)


def require_role(state, allowed_roles: Iterable[str] = ()) -> Decision:
    allowed = tuple(allowed_roles)
    if state.is_loading:
        return Placeholder()
    if not state.is_authenticated:
        return Redirect(ROUTES.LOGIN)
    if allowed and state.role not in allowed:
        # wrong section, send them home instead of logging them out
        return Redirect(landing_route(state.user))
    return Render()


def public_only(state) -> Decision:
    if state.is_authenticated:
        return Redirect(landing_route(state.user))
    return Render()


def landing_redirect(state, current: str = ROUTES.HOME) -> Decision:
    if state.is_authenticated:
        target = landing_route(state.user)
        if target != current:
            return Redirect(target)
    return Render()


def roles(*allowed_roles: str) -> Guard:
    def guard(state) -> Decision:
        return require_role(state, allowed_roles)

    return guard


def resolve(
    guards: Dict[str, Optional[Guard]], route: str, state
) -> Tuple[str, Decision]:
    """
    Follow redirects from `route` until a screen renders or the placeholder is
    due. Routes without a guard always render.
    """
    decision: Decision = Render()
    for _ in range(MAX_REDIRECTS):
        guard = guards.get(route)
        decision = guard(state) if guard is not None else Render()
        if not isinstance(decision, Redirect):
            return route, decision
        if decision.route == route:
            return route, Render()
        route = decision.route
    return route, decision
