import re

from fake_backend import BackendTestCase
from services.identity import get_user_id, new_guest_session_id
from services.models import Account, Guest, User
from services.storage import Storage
from utils.state import AuthState

GUEST_ID = re.compile(r"^session_\d+_[a-z0-9]{9}$")


class IdentityTestCase(BackendTestCase):
    def test_guest_id_shape(self):
        session_id = new_guest_session_id(now=1700000000.123)
        self.assertRegex(session_id, GUEST_ID)
        self.assertTrue(session_id.startswith("session_1700000000123_"))

    async def test_guest_id_is_stable(self):
        signed_out = AuthState(is_loading=False)

        first = await get_user_id(signed_out, self.storage)
        second = await get_user_id(signed_out, self.storage)

        self.assertIsInstance(first, Guest)
        self.assertRegex(first.key, GUEST_ID)
        self.assertEqual(first, second)

    async def test_guest_id_survives_restart(self):
        first = await get_user_id(AuthState(is_loading=False), self.storage)

        reopened = Storage(self.storage_path)
        await reopened.load()
        again = await get_user_id(AuthState(is_loading=False), reopened)

        self.assertEqual(first.key, again.key)

    async def test_signed_in_user_uses_account_id(self):
        state = AuthState(
            user=User(id="3", name="Customer User", role="customer"),
            token="session-3-1",
            is_authenticated=True,
            is_loading=False,
        )
        identity = await get_user_id(state, self.storage)

        self.assertEqual(identity, Account("3"))
        self.assertEqual(identity.key, "3")
        self.assertIsNone(self.storage.get("guest_session_id"))
