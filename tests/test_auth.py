import httpx

from fake_backend import BackendTestCase
from services.auth import AuthService, make_session_token
from services.models import User


class AuthServiceTestCase(BackendTestCase):
    def setUp(self):
        super().setUp()
        self.auth = AuthService(self.client, self.storage)

    # ---------- login ----------

    async def test_login_persists_token_and_user(self):
        result = await self.auth.login({"phone": "1234567890", "password": "admin123"})

        self.assertTrue(result.success)
        user = result.data["user"]
        self.assertEqual(user, User(id="1", name="Admin User", role="admin", phone="1234567890"))
        self.assertTrue(result.data["token"].startswith("session-1-"))
        self.assertEqual(
            self.backend.last_json(),
            {"phone_number_or_email": "1234567890", "password": "admin123"},
        )

        self.assertEqual(self.storage.get("auth_token"), result.data["token"])
        self.assertEqual(self.storage.get("user_data")["role"], "admin")
        self.assertTrue(self.auth.is_authenticated())
        self.assertEqual(self.auth.get_current_user(), user)

    async def test_login_with_email_keeps_email(self):
        result = await self.auth.login(
            {"email": "customer@restaurant.com", "password": "customer123"}
        )
        self.assertTrue(result.success)
        self.assertEqual(result.data["user"].email, "customer@restaurant.com")
        self.assertIsNone(result.data["user"].phone)

    async def test_login_rejected_by_backend(self):
        result = await self.auth.login({"phone": "1234567890", "password": "wrong"})

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Invalid credentials")
        self.assertFalse(self.auth.is_authenticated())
        self.assertIsNone(self.storage.get("auth_token"))

    async def test_login_transport_failure(self):
        self.backend.go_down()
        result = await self.auth.login({"phone": "1234567890", "password": "admin123"})
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Login failed. Please try again.")

    async def test_login_without_user_id_fails(self):
        self.backend.overrides[("POST", "/users/login")] = httpx.Response(
            200, json={"success": True, "name": "Ghost", "role": "customer"}
        )
        result = await self.auth.login({"phone": "1234567890", "password": "admin123"})

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Login failed. Please try again.")
        self.assertIsNone(self.storage.get("auth_token"))
        self.assertIsNone(self.storage.get("user_data"))

    async def test_login_with_list_body_fails(self):
        self.backend.overrides[("POST", "/users/login")] = httpx.Response(
            200, json=["unexpected"]
        )
        result = await self.auth.login({"phone": "1234567890", "password": "admin123"})

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Malformed response")
        self.assertFalse(self.auth.is_authenticated())

    def test_session_token_shape(self):
        self.assertEqual(make_session_token("7", now=1.5), "session-7-1500")

    # ---------- register ----------

    async def test_register_success(self):
        result = await self.auth.register(
            {
                "name": "Ravi",
                "phone": "9000000001",
                "email": "",
                "password": "pw12345",
                "confirm_password": "pw12345",
            }
        )
        self.assertTrue(result.success)
        self.assertEqual(result.data["message"], "User created")
        self.assertEqual(result.data["user"].name, "Ravi")
        self.assertEqual(result.data["user"].role, "customer")
        sent = self.backend.last_json()
        self.assertEqual(sent["phone_number"], "9000000001")
        self.assertIsNone(sent["email"])

    async def test_register_surfaces_first_validation_message(self):
        result = await self.auth.register(
            {
                "name": "Ravi",
                "phone": "9000000001",
                "password": "a",
                "confirm_password": "b",
            }
        )
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Passwords do not match")

    async def test_register_surfaces_plain_detail(self):
        result = await self.auth.register(
            {"name": "Dup", "phone": "1234567890", "password": "x"}
        )
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Phone number already registered")

    # ---------- logout ----------

    async def test_logout_clears_storage(self):
        await self.auth.login({"phone": "1234567892", "password": "customer123"})
        await self.auth.logout()

        self.assertIn("/users/logout", self.backend.paths())
        self.assertFalse(self.auth.is_authenticated())
        self.assertIsNone(self.storage.get("auth_token"))
        self.assertIsNone(self.storage.get("user_data"))

    async def test_logout_clears_storage_when_backend_fails(self):
        await self.auth.login({"phone": "1234567892", "password": "customer123"})
        self.backend.go_down("/users/logout")

        await self.auth.logout()

        self.assertFalse(self.auth.is_authenticated())
        self.assertIsNone(self.storage.get("auth_token"))
        self.assertIsNone(self.storage.get("user_data"))

    async def test_is_authenticated_needs_token_and_user(self):
        await self.storage.set("auth_token", "session-9-1")
        self.assertFalse(self.auth.is_authenticated())
        await self.storage.set("user_data", "garbage")
        self.assertFalse(self.auth.is_authenticated())
        await self.storage.set("user_data", {"id": "9", "name": "N", "role": "customer"})
        self.assertTrue(self.auth.is_authenticated())

    # ---------- profile & password ----------

    async def test_update_profile_merges_and_persists(self):
        await self.auth.login({"phone": "1234567892", "password": "customer123"})

        result = await self.auth.update_profile({"email": "new@example.com"})

        self.assertTrue(result.success)
        user = result.data["user"]
        self.assertEqual(user.email, "new@example.com")
        self.assertEqual(user.name, "Customer User")
        self.assertEqual(self.storage.get("user_data")["email"], "new@example.com")

    async def test_update_profile_failure(self):
        self.backend.overrides[("PUT", "/users/profile")] = httpx.Response(
            400, json={"message": "Email already in use"}
        )
        result = await self.auth.update_profile({"email": "dup@example.com"})
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Email already in use")

    async def test_change_and_forgot_password(self):
        self.backend.overrides[("POST", "/auth/change-password")] = httpx.Response(
            200, json={"success": True}
        )
        self.backend.overrides[("POST", "/auth/forgot-password")] = httpx.Response(
            404, json={"detail": "Unknown phone number"}
        )

        changed = await self.auth.change_password("old", "new")
        self.assertTrue(changed.success)
        self.assertEqual(
            self.backend.last_json(), {"current_password": "old", "new_password": "new"}
        )

        reset = await self.auth.forgot_password("5550000000")
        self.assertFalse(reset.success)
        self.assertEqual(reset.error, "Unknown phone number")
