# turns login/register/logout into backend calls and keeps the stored session in sync
from __future__ import annotations

import time
from typing import Any, Dict, Optional

from services.client import ApiClient, ApiError
from services.models import Result, User
from services.storage import Storage
from utils.constants import ROLES, STORAGE_KEYS
from utils.logger import get_logger

_logger = get_logger(__name__)

LOGIN_PATH = "/users/login"
SIGNUP_PATH = "/users/signup"
LOGOUT_PATH = "/users/logout"
PROFILE_PATH = "/users/profile"
CHANGE_PASSWORD_PATH = "/auth/change-password"
FORGOT_PASSWORD_PATH = "/auth/forgot-password"


def make_session_token(user_id: str, now: Optional[float] = None) -> str:
    """Opaque placeholder token, carries no meaning beyond correlation."""
    now = time.time() if now is None else now
    return f"session-{user_id}-{int(now * 1000)}"


class AuthService:
    def __init__(self, client: ApiClient, storage: Storage) -> None:
        self.client = client
        self.storage = storage

    # ---------------------------
    # Session
    # ---------------------------

    async def login(self, credentials: Dict[str, str]) -> Result:
        """
        Accepts either `phone` or `email` plus `password`.

        On success the token and user are persisted before returning
        `Result.ok({"token": ..., "user": User})`.
        """
        login_id = (credentials.get("phone") or credentials.get("email") or "").strip()
        try:
            payload = await self.client.post(
                LOGIN_PATH,
                {
                    "phone_number_or_email": login_id,
                    "password": credentials.get("password", ""),
                },
            )
        except ApiError as exc:
            return Result.fail(exc.detail or "Login failed. Please try again.")

        payload = payload or {}
        if not payload.get("success"):
            return Result.fail(
                payload.get("message") or "Invalid phone number or password"
            )
        if payload.get("user_id") is None:
            _logger.warning("Login response carried no user id")
            return Result.fail("Login failed. Please try again.")

        user = User(
            id=str(payload.get("user_id")),
            name=payload.get("name") or "",
            role=payload.get("role"),
            phone=None if "@" in login_id else login_id,
            email=login_id if "@" in login_id else None,
        )
        token = make_session_token(user.id)

        await self.storage.set(STORAGE_KEYS.AUTH_TOKEN, token)
        await self.storage.set(STORAGE_KEYS.USER_DATA, user.to_dict())
        _logger.info(f"Signed in user {user.id} as {user.role}")
        return Result.ok({"token": token, "user": user})

    async def register(self, fields: Dict[str, Any]) -> Result:
        body = {
            "name": fields.get("name"),
            "phone_number": fields.get("phone") or fields.get("phone_number"),
            "email": fields.get("email") or None,
            "password": fields.get("password"),
            "confirm_password": fields.get("confirm_password")
            or fields.get("password"),
        }
        try:
            payload = await self.client.post(SIGNUP_PATH, body)
        except ApiError as exc:
            return Result.fail(exc.detail or "Registration failed. Please try again.")

        payload = payload or {}
        if payload.get("success") is False:
            return Result.fail(payload.get("message") or "Registration failed.")

        user = User(
            id=None,
            name=payload.get("name") or body["name"] or "",
            role=ROLES.CUSTOMER,
            phone=body["phone_number"],
            email=body["email"],
        )
        message = payload.get("message") or "Registration successful! Please login."
        return Result.ok({"message": message, "user": user})

    async def logout(self) -> None:
        """
        Tell the backend, if it is listening. Stored credentials are dropped
        whatever happens remotely.
        """
        try:
            await self.client.post(LOGOUT_PATH)
        except ApiError as exc:
            _logger.warning(f"Remote logout failed, continuing: {exc}")
        finally:
            await self.storage.remove_many(
                STORAGE_KEYS.AUTH_TOKEN, STORAGE_KEYS.USER_DATA
            )

    def get_token(self) -> Optional[str]:
        return self.storage.get(STORAGE_KEYS.AUTH_TOKEN)

    def get_current_user(self) -> Optional[User]:
        data = self.storage.get(STORAGE_KEYS.USER_DATA)
        if not isinstance(data, dict):
            return None
        try:
            return User.from_dict(data)
        except TypeError:
            return None

    def is_authenticated(self) -> bool:
        """Local check only, the token is never validated remotely here."""
        return bool(self.get_token() and self.get_current_user())

    # ---------------------------
    # Profile & password
    # ---------------------------

    async def update_profile(self, changes: Dict[str, Any]) -> Result:
        current = self.get_current_user()
        try:
            payload = await self.client.put(PROFILE_PATH, changes)
        except ApiError as exc:
            return Result.fail(exc.detail or "Profile update failed")

        returned = (payload or {}).get("user")
        if not isinstance(returned, dict):
            returned = {}
        if current is not None:
            user = current.merged({**changes, **returned})
        else:
            user = User.from_dict({**changes, **returned})
        await self.storage.set(STORAGE_KEYS.USER_DATA, user.to_dict())
        return Result.ok({"user": user})

    async def change_password(self, current_password: str, new_password: str) -> Result:
        try:
            payload = await self.client.post(
                CHANGE_PASSWORD_PATH,
                {"current_password": current_password, "new_password": new_password},
            )
        except ApiError as exc:
            return Result.fail(exc.detail or "Password change failed")
        return Result.ok(payload)

    async def forgot_password(self, phone: str) -> Result:
        try:
            payload = await self.client.post(FORGOT_PASSWORD_PATH, {"phone": phone})
        except ApiError as exc:
            return Result.fail(exc.detail or "Password reset failed")
        return Result.ok(payload)
