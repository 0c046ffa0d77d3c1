import random
import string
import time
from typing import Optional

from services.models import Account, Guest, Identity
from services.storage import Storage
from utils.constants import STORAGE_KEYS
from utils.logger import get_logger

_logger = get_logger(__name__)

_ALPHABET = string.ascii_lowercase + string.digits


def new_guest_session_id(now: Optional[float] = None) -> str:
    """Return `session_<ms timestamp>_<9 random base36 chars>`."""
    now = time.time() if now is None else now
    suffix = "".join(random.choices(_ALPHABET, k=9))
    return f"session_{int(now * 1000)}_{suffix}"


async def get_user_id(state, storage: Storage) -> Identity:
    """
    Who the cart belongs to: the signed in account, or else this device's guest
    session, created and persisted on first use.
    """
    if state.is_authenticated and state.user is not None and state.user.id:
        return Account(state.user.id)

    session_id = storage.get(STORAGE_KEYS.GUEST_SESSION)
    if not isinstance(session_id, str) or not session_id:
        session_id = new_guest_session_id()
        await storage.set(STORAGE_KEYS.GUEST_SESSION, session_id)
        _logger.debug(f"Created guest session {session_id}")
    return Guest(session_id)
