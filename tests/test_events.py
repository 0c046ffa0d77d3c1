from fake_backend import BackendTestCase
from services.events import EventService
from services.models import Account, EventBooking


class EventServiceTestCase(BackendTestCase):
    def setUp(self):
        super().setUp()
        self.events = EventService(self.client)
        self.account = Account("3")

    async def test_book_list_and_cancel(self):
        booked = await self.events.book_event(
            self.account,
            EventBooking(
                event_type="birthday",
                date="2026-12-01",
                time="19:30",
                guests=12,
                package="Premium",
            ),
        )
        self.assertTrue(booked.success)
        self.assertEqual(self.backend.last_json()["guests"], 12)
        self.assertEqual(self.backend.last_json()["user_id"], "3")

        listed = await self.events.get_events(self.account)
        self.assertTrue(listed.success)
        event = listed.data[0]
        self.assertEqual(event.event_id, booked.data["event_id"])
        self.assertEqual(event.status, "pending")
        self.assertEqual(event.cost, 6000.0)

        cancelled = await self.events.cancel_event(self.account, event.event_id)
        self.assertTrue(cancelled.success)
        listed = await self.events.get_events(self.account)
        self.assertEqual(listed.data[0].status, "cancelled")

    async def test_cancel_unknown_event(self):
        result = await self.events.cancel_event(self.account, "404")
        self.assertFalse(result.success)
        self.assertEqual(result.error, "Event not found")

    async def test_list_failure_returns_empty_list(self):
        self.backend.go_down("/api/events")
        result = await self.events.get_events(self.account)
        self.assertFalse(result.success)
        self.assertEqual(result.data, [])
