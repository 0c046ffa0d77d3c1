import unittest

import httpx

from fake_backend import BackendTestCase
from services.client import ApiError, extract_error, records


class ExtractErrorTestCase(unittest.TestCase):
    def test_unwraps_known_shapes(self):
        self.assertEqual(extract_error({"detail": "Item not found"}), "Item not found")
        self.assertEqual(
            extract_error({"detail": [{"msg": "field required"}, {"msg": "second"}]}),
            "field required",
        )
        self.assertEqual(extract_error({"message": "Nope"}), "Nope")
        self.assertEqual(extract_error({"errors": ["first", "second"]}), "first")
        self.assertEqual(extract_error("plain text"), "plain text")

    def test_returns_none_when_nothing_usable(self):
        self.assertIsNone(extract_error(None))
        self.assertIsNone(extract_error({}))
        self.assertIsNone(extract_error({"detail": []}))
        self.assertIsNone(extract_error(""))
        self.assertIsNone(extract_error([1, 2]))


class RecordsTestCase(unittest.TestCase):
    def test_missing_or_empty_key_reads_as_empty(self):
        self.assertEqual(records(None, "data"), [])
        self.assertEqual(records({"data": None}, "data"), [])
        self.assertEqual(records({"data": [{"id": 1}]}, "data"), [{"id": 1}])

    def test_wrong_shapes_are_malformed(self):
        for payload in ({"data": "abc"}, {"data": {"id": 1}}, {"data": [1, 2]}):
            with self.subTest(payload=payload):
                with self.assertRaises(ApiError) as ctx:
                    records(payload, "data")
                self.assertEqual(ctx.exception.detail, "Malformed response")


class ApiClientTestCase(BackendTestCase):
    async def test_bearer_token_sent_when_stored(self):
        await self.client.get("/api/user-orders/menu")
        self.assertNotIn("authorization", self.backend.requests[-1].headers)

        await self.storage.set("auth_token", "session-1-42")
        await self.client.get("/api/user-orders/menu")
        self.assertEqual(
            self.backend.requests[-1].headers["authorization"], "Bearer session-1-42"
        )

    async def test_transport_failure_has_no_status(self):
        self.backend.go_down()
        with self.assertRaises(ApiError) as ctx:
            await self.client.get("/api/user-orders/menu")
        self.assertIsNone(ctx.exception.status_code)
        self.assertIsNone(ctx.exception.detail)

    async def test_error_status_carries_backend_detail(self):
        with self.assertRaises(ApiError) as ctx:
            await self.client.get("/does/not/exist")
        self.assertEqual(ctx.exception.status_code, 404)
        self.assertEqual(ctx.exception.detail, "Not Found")

    async def test_unauthorized_clears_session_and_notifies(self):
        calls = []

        async def on_unauthorized():
            calls.append(True)

        self.client.on_unauthorized = on_unauthorized
        await self.storage.set("auth_token", "session-1-42")
        await self.storage.set("user_data", {"id": "1", "name": "A", "role": "admin"})
        await self.storage.set("guest_session_id", "session_1_abc")
        self.backend.overrides[("GET", "/api/user-orders/menu")] = httpx.Response(
            401, json={"detail": "Token expired"}
        )

        with self.assertRaises(ApiError) as ctx:
            await self.client.get("/api/user-orders/menu")

        self.assertEqual(ctx.exception.status_code, 401)
        self.assertEqual(calls, [True])
        self.assertIsNone(self.storage.get("auth_token"))
        self.assertIsNone(self.storage.get("user_data"))
        self.assertEqual(self.storage.get("guest_session_id"), "session_1_abc")

    async def test_malformed_success_body_is_an_error(self):
        self.backend.overrides[("GET", "/api/user-orders/menu")] = httpx.Response(
            200, content=b"<html>oops</html>"
        )
        with self.assertRaises(ApiError):
            await self.client.get("/api/user-orders/menu")

    async def test_empty_body_returns_none(self):
        self.backend.overrides[("POST", "/users/logout")] = httpx.Response(204)
        self.assertIsNone(await self.client.post("/users/logout"))

    async def test_success_body_must_be_an_object(self):
        for body in (["unexpected"], "oops", 42):
            with self.subTest(body=body):
                self.backend.overrides[("GET", "/api/user-orders/menu")] = (
                    httpx.Response(200, json=body)
                )
                with self.assertRaises(ApiError) as ctx:
                    await self.client.get("/api/user-orders/menu")
                self.assertEqual(ctx.exception.detail, "Malformed response")
                self.assertEqual(ctx.exception.status_code, 200)
