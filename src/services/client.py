# the one request/response pipeline every remote call goes through
from contextlib import asynccontextmanager
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from services.storage import Storage
from utils.constants import API_BASE_URL, REQUEST_TIMEOUT, STORAGE_KEYS
from utils.logger import get_logger

_logger = get_logger(__name__)


class ApiError(Exception):
    """
    Raised by ApiClient for anything that is not a usable 2xx response.
    A usable body is empty or a JSON object.

    `status_code` is None for transport failures (no response at all).
    `detail` is the backend message when one could be extracted.
    """

    def __init__(self, detail: Optional[str], status_code: Optional[int] = None):
        super().__init__(detail or "request failed")
        self.detail = detail
        self.status_code = status_code


def extract_error(payload: Any) -> Optional[str]:
    """
    Pull one human readable message out of an error body.

    Understands `detail`, `message` and `errors`; list shaped values yield
    their first entry, and dict entries their `msg`.
    """
    if isinstance(payload, str):
        return payload or None
    if not isinstance(payload, dict):
        return None

    for key in ("detail", "message", "errors", "error"):
        value = payload.get(key)
        if isinstance(value, list):
            if not value:
                continue
            value = value[0]
        if isinstance(value, dict):
            value = value.get("msg") or value.get("message")
        if value:
            return str(value)
    return None


def records(payload: Optional[Dict[str, Any]], key: str) -> List[Dict[str, Any]]:
    """The list of objects under `key`; a missing key reads as empty."""
    value = (payload or {}).get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, dict) for v in value):
        raise ApiError("Malformed response")
    return value


class ApiClient:
    def __init__(
        self,
        storage: Storage,
        base_url: str = API_BASE_URL,
        timeout: float = REQUEST_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        on_unauthorized: Optional[Callable[[], Awaitable[None]]] = None,
    ) -> None:
        self.storage = storage
        self.base_url = base_url
        self.timeout = timeout
        self.transport = transport
        self.on_unauthorized = on_unauthorized

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        token = self.storage.get(STORAGE_KEYS.AUTH_TOKEN)
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    @asynccontextmanager
    async def connect(self) -> httpx.AsyncClient:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            headers=self._headers(),
            transport=self.transport,
        ) as client:
            yield client

    async def request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        try:
            async with self.connect() as client:
                response = await client.request(method, path, json=json, params=params)
        except httpx.HTTPError as exc:
            _logger.warning(f"{method} {path} failed: {exc!r}")
            raise ApiError(None) from exc

        body = None
        if response.content:
            try:
                body = response.json()
            except ValueError as exc:
                if response.is_success:
                    raise ApiError("Malformed response", response.status_code) from exc
                body = response.text

        if response.status_code == 401:
            await self._handle_unauthorized()

        if not response.is_success:
            detail = extract_error(body)
            _logger.warning(f"{method} {path} -> {response.status_code}: {detail}")
            raise ApiError(detail, response.status_code)

        if body is not None and not isinstance(body, dict):
            _logger.warning(f"{method} {path} -> unexpected {type(body).__name__} body")
            raise ApiError("Malformed response", response.status_code)

        _logger.debug(f"{method} {path} -> {response.status_code}")
        return body

    async def _handle_unauthorized(self) -> None:
        _logger.info("Backend rejected the session, clearing stored credentials")
        await self.storage.remove_many(
            STORAGE_KEYS.AUTH_TOKEN, STORAGE_KEYS.USER_DATA
        )
        if self.on_unauthorized is not None:
            await self.on_unauthorized()

    async def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None) -> Any:
        return await self.request("POST", path, json=json)

    async def put(self, path: str, json: Any = None) -> Any:
        return await self.request("PUT", path, json=json)

