"""Conversation state machine for catalog browsing and admin uploads."""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Protocol

from plant_catalog.domain.catalog import CategoryAlreadyExistsError
from plant_catalog.domain.sessions import ChatSession, PendingAction, WaitingFor
from plant_catalog.presentation import (
    MENU_ADD,
    MENU_CANCEL,
    MENU_LIST,
    MENU_LOGOUT,
    MENU_RANDOM,
    MENU_UPLOAD,
    REFRESH_LIST_CALLBACK,
    category_keyboard,
    done_keyboard,
    main_menu_keyboard,
    refresh_keyboard,
    remove_keyboard,
    render_category_stats,
)
from plant_catalog.services.auth import AuthGate
from plant_catalog.services.media_store import MediaStore
from plant_catalog.telegram_commands import BotCommand

MARKDOWN_V2 = "MarkdownV2"

_logger = logging.getLogger(__name__)


class PhotoDownloader(Protocol):
    """Interface for fetching attached photo bytes."""

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Download a Telegram file and return its bytes."""


@dataclass(frozen=True)
class Reply:
    """A single outbound message.

    When ``photo`` is set the text is sent as the photo caption. When
    ``edit`` is set the message that triggered the update is edited
    instead of sending a new one.
    """

    text: str
    reply_markup: dict | None = None
    parse_mode: str | None = None
    photo: Path | None = None
    edit: bool = False


@dataclass
class Outcome:
    """Everything the transport should do in response to one update."""

    replies: list[Reply] = field(default_factory=list)
    delete_inbound: bool = False


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class ConversationController:
    """Interprets commands, text, photos and button taps for one chat session.

    Text is matched in a fixed order: a pending password first, then the
    menu shortcut labels, then the pending input mode. A species named like
    a menu label or like the password is therefore routed to those first.
    """

    media_store: MediaStore
    auth_gate: AuthGate
    downloader: PhotoDownloader
    clock: Callable[[], datetime] = _utcnow
    debug_errors: bool = False

    def is_command(self, name: str) -> bool:
        """Return true when ``name`` is a command this controller handles."""
        return name in self._command_handlers()

    def handle_command(self, session: ChatSession, name: str) -> Outcome:
        """Handle a slash command given without its leading slash."""
        handler = self._command_handlers().get(name)
        if handler is None:
            return Outcome()
        return Outcome(replies=handler(session))

    def handle_text(self, session: ChatSession, text: str) -> Outcome:
        """Handle free text according to the session's pending input."""
        now = self.clock()
        if session.waiting_for == WaitingFor.AWAITING_PASSWORD:
            return self._submit_password(session, text, now)

        shortcut = self._shortcut_handlers().get(text)
        if shortcut is not None:
            return Outcome(replies=shortcut(session))

        if session.waiting_for == WaitingFor.AWAITING_NEW_CATEGORY_NAME:
            return Outcome(replies=self._create_category(session, text))
        if session.waiting_for == WaitingFor.AWAITING_UPLOAD_TARGET:
            return Outcome(replies=self._select_upload_target(session, text))
        if session.waiting_for == WaitingFor.AWAITING_RANDOM_TARGET:
            return Outcome(replies=self._send_random(session, text))
        return Outcome()

    async def handle_photo(self, session: ChatSession, file_id: str) -> Outcome:
        """Store an attached photo when an upload target is active."""
        target = session.target_category
        if target is None:
            return Outcome()
        try:
            content = await self.downloader.download_file_bytes(file_id)
        except Exception as exc:
            _logger.exception(
                "Failed to download Telegram photo", extra={"file_id": file_id}
            )
            return Outcome(
                replies=[Reply(self._error_text(exc, "Couldn't download that photo."))]
            )
        self.media_store.store_media(target, content)
        return Outcome(replies=[Reply("📷 Saved! Send more or /done.")])

    def handle_callback(self, data: str | None) -> Outcome:
        """Handle an inline button tap."""
        if data != REFRESH_LIST_CALLBACK:
            return Outcome()
        return Outcome(
            replies=[
                Reply(
                    render_category_stats(self.media_store.stats()),
                    reply_markup=refresh_keyboard(),
                    parse_mode=MARKDOWN_V2,
                    edit=True,
                )
            ]
        )

    def _command_handlers(self) -> dict[str, Callable[[ChatSession], list[Reply]]]:
        return {
            "start": self._start,
            BotCommand.LIST.value.command: self._list_with_refresh,
            BotCommand.RANDOM.value.command: self._ask_random_target,
            BotCommand.ADD_SPECIES.value.command: self._request_create,
            BotCommand.UPLOAD.value.command: self._request_upload,
            BotCommand.LOGOUT.value.command: self._logout,
            BotCommand.CANCEL.value.command: self._cancel,
            "done": self._finish_upload,
        }

    def _shortcut_handlers(self) -> dict[str, Callable[[ChatSession], list[Reply]]]:
        return {
            MENU_LIST: self._list,
            MENU_UPLOAD: self._request_upload,
            MENU_ADD: self._request_create,
            MENU_RANDOM: self._ask_random_target,
            MENU_LOGOUT: self._logout_button,
            MENU_CANCEL: self._cancel,
        }

    def _start(self, session: ChatSession) -> list[Reply]:
        return [
            Reply(
                "Welcome! Use the menu below to manage the plant database.",
                reply_markup=main_menu_keyboard(full=True),
            )
        ]

    def _list(self, session: ChatSession) -> list[Reply]:
        return [
            Reply(
                render_category_stats(self.media_store.stats()),
                parse_mode=MARKDOWN_V2,
            )
        ]

    def _list_with_refresh(self, session: ChatSession) -> list[Reply]:
        return [
            Reply(
                render_category_stats(self.media_store.stats()),
                reply_markup=refresh_keyboard(),
                parse_mode=MARKDOWN_V2,
            )
        ]

    def _ask_random_target(self, session: ChatSession) -> list[Reply]:
        names = self.media_store.list_categories()
        if not names:
            return [Reply("DB is empty.")]
        _await_input(session, WaitingFor.AWAITING_RANDOM_TARGET)
        return [Reply("Pick a species:", reply_markup=category_keyboard(names))]

    def _request_create(self, session: ChatSession) -> list[Reply]:
        return self._request_privileged(session, PendingAction.CREATE_CATEGORY)

    def _request_upload(self, session: ChatSession) -> list[Reply]:
        return self._request_privileged(session, PendingAction.UPLOAD)

    def _request_privileged(
        self, session: ChatSession, action: PendingAction
    ) -> list[Reply]:
        if not self.auth_gate.is_authorized(session, self.clock()):
            self.auth_gate.challenge(session, action)
            return [
                Reply(
                    "🔐 Admin session required. Please enter the password:",
                    reply_markup=remove_keyboard(),
                )
            ]
        if action == PendingAction.CREATE_CATEGORY:
            _await_input(session, WaitingFor.AWAITING_NEW_CATEGORY_NAME)
            return [Reply("Enter the name of the new plant species:")]
        _await_input(session, WaitingFor.AWAITING_UPLOAD_TARGET)
        return [
            Reply(
                "Select a species to upload to:",
                reply_markup=category_keyboard(self.media_store.list_categories()),
            )
        ]

    def _submit_password(
        self, session: ChatSession, text: str, now: datetime
    ) -> Outcome:
        result = self.auth_gate.verify(session, text, now)
        if not result.authenticated:
            return Outcome(replies=[Reply("❌ Wrong password. Try again or /cancel.")])
        replies = [
            Reply(f"✅ Authenticated for {self.auth_gate.timeout_minutes} minutes.")
        ]
        if result.resume is not None:
            replies.extend(self._request_privileged(session, result.resume))
        return Outcome(replies=replies, delete_inbound=True)

    def _create_category(self, session: ChatSession, name: str) -> list[Reply]:
        if not _is_valid_category_name(name):
            return [Reply("Invalid species name. Try another or /cancel.")]
        try:
            self.media_store.create_category(name)
        except CategoryAlreadyExistsError:
            return [Reply("Already exists!")]
        session.waiting_for = WaitingFor.NONE
        return [Reply(f'✅ Added "{name}"', reply_markup=main_menu_keyboard())]

    def _select_upload_target(self, session: ChatSession, name: str) -> list[Reply]:
        if not self.media_store.category_exists(name):
            _logger.debug("Ignoring unknown upload target: %s", name)
            return []
        session.target_category = name
        session.waiting_for = WaitingFor.NONE
        return [
            Reply(
                f'Ready for "{name}". Send photos, then /done.',
                reply_markup=done_keyboard(),
            )
        ]

    def _send_random(self, session: ChatSession, name: str) -> list[Reply]:
        session.waiting_for = WaitingFor.NONE
        picked = (
            self.media_store.pick_random(name)
            if _is_valid_category_name(name)
            else None
        )
        if picked is None:
            return [Reply("No images found.")]
        photo = self.media_store.media_path(name, picked)
        return [Reply(f"Random {name}", photo=photo)]

    def _logout(self, session: ChatSession) -> list[Reply]:
        return self._end_admin_session(session, "Admin session ended.")

    def _logout_button(self, session: ChatSession) -> list[Reply]:
        return self._end_admin_session(session, "Logged out.")

    def _end_admin_session(self, session: ChatSession, text: str) -> list[Reply]:
        self.auth_gate.revoke(session)
        _logger.info("Admin session revoked")
        return [Reply(text, reply_markup=remove_keyboard())]

    def _cancel(self, session: ChatSession) -> list[Reply]:
        session.waiting_for = WaitingFor.NONE
        session.pending_action = None
        return [Reply("Action cancelled.", reply_markup=main_menu_keyboard())]

    def _finish_upload(self, session: ChatSession) -> list[Reply]:
        session.target_category = None
        return [Reply("Finished.", reply_markup=main_menu_keyboard())]

    def _error_text(self, exc: Exception, fallback: str) -> str:
        if self.debug_errors:
            detail = f"{type(exc).__name__}: {exc}".strip()
            if detail:
                return f"{fallback} (debug: {detail})"
        return fallback


def _is_valid_category_name(name: str) -> bool:
    """Species names become directory names and must stay inside the root."""
    stripped = name.strip()
    if not stripped or stripped in {".", ".."}:
        return False
    return "/" not in name and "\\" not in name


def _await_input(session: ChatSession, mode: WaitingFor) -> None:
    """Switch the pending input; a remembered action only survives a challenge."""
    session.waiting_for = mode
    session.pending_action = None
