"""Domain models for per-chat conversation state."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum


class WaitingFor(StrEnum):
    """Pending free-text input the conversation expects next."""

    NONE = "NONE"
    AWAITING_NEW_CATEGORY_NAME = "AWAITING_NEW_CATEGORY_NAME"
    AWAITING_UPLOAD_TARGET = "AWAITING_UPLOAD_TARGET"
    AWAITING_RANDOM_TARGET = "AWAITING_RANDOM_TARGET"
    AWAITING_PASSWORD = "AWAITING_PASSWORD"


class PendingAction(StrEnum):
    """Privileged action resumed after a successful password."""

    CREATE_CATEGORY = "CREATE_CATEGORY"
    UPLOAD = "UPLOAD"


@dataclass
class ChatSession:
    """Mutable state for a single conversation.

    ``pending_action`` is only set while ``waiting_for`` is
    ``AWAITING_PASSWORD``. ``target_category`` is independent of
    ``waiting_for``: photos are accepted whenever it is set.
    """

    waiting_for: WaitingFor = WaitingFor.NONE
    target_category: str | None = None
    pending_action: PendingAction | None = None
    authorized_until: datetime | None = None
