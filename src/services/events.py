import dataclasses

from services.client import ApiClient, ApiError, records
from services.models import Event, EventBooking, Identity, Result
from utils.logger import get_logger

_logger = get_logger(__name__)

BASE_PATH = "/api/events"


class EventService:
    """Private event bookings (birthdays, corporate dinners, ...)."""

    def __init__(self, client: ApiClient) -> None:
        self.client = client

    async def get_events(self, identity: Identity) -> Result:
        try:
            payload = await self.client.get(f"{BASE_PATH}/{identity.key}")
            events = records(payload, "data")
        except ApiError as exc:
            _logger.error(f"Failed to fetch events: {exc}")
            return Result.fail(exc.detail or "Failed to fetch events", [])

        return Result.ok([Event.from_dict(e) for e in events])

    async def book_event(self, identity: Identity, booking: EventBooking) -> Result:
        try:
            payload = await self.client.post(
                f"{BASE_PATH}/book",
                {"user_id": identity.key, **dataclasses.asdict(booking)},
            )
        except ApiError as exc:
            _logger.error(f"Failed to book event: {exc}")
            return Result.fail(exc.detail or "Failed to book event")
        return Result.ok(payload or {})

    async def cancel_event(self, identity: Identity, event_id: str) -> Result:
        try:
            payload = await self.client.post(
                f"{BASE_PATH}/cancel",
                {"user_id": identity.key, "event_id": event_id},
            )
        except ApiError as exc:
            _logger.error(f"Failed to cancel event {event_id}: {exc}")
            return Result.fail(exc.detail or "Failed to cancel event")
        return Result.ok(payload or {})
