"""Routing of Telegram updates to the conversation controller."""

import logging
from collections.abc import Awaitable
from dataclasses import dataclass

import httpx

from plant_catalog.adapters.telegram_client import TelegramClient
from plant_catalog.api.telegram_models import (
    TelegramCallbackQuery,
    TelegramMessage,
    TelegramUpdate,
    select_largest_photo,
)
from plant_catalog.domain.sessions import ChatSession
from plant_catalog.services.conversation import ConversationController, Outcome, Reply
from plant_catalog.services.sessions import SessionStore
from plant_catalog.telegram_commands import parse_command

_logger = logging.getLogger(__name__)

_GENERIC_ERROR = "Something went wrong. Please try again."


@dataclass
class UpdateDispatcher:
    """Apply one update to its chat session and send the resulting replies."""

    controller: ConversationController
    session_store: SessionStore
    telegram_client: TelegramClient

    async def dispatch(self, update: TelegramUpdate) -> None:
        """Handle a single Telegram update."""
        if update.callback_query:
            await self._handle_callback(update.callback_query)
        elif update.message:
            await self._handle_message(update.message)

    async def _handle_message(self, message: TelegramMessage) -> None:
        chat_id = message.chat.id
        session = self.session_store.get(chat_id)
        try:
            outcome = await self._route_message(session, message)
        except Exception:
            _logger.exception("Failed to handle message", extra={"chat_id": chat_id})
            outcome = Outcome(replies=[Reply(_GENERIC_ERROR)])
        self.session_store.save(chat_id, session)
        await self._deliver(chat_id, message.message_id, outcome)

    async def _route_message(
        self, session: ChatSession, message: TelegramMessage
    ) -> Outcome:
        if message.photo:
            photo = select_largest_photo(message.photo)
            return await self.controller.handle_photo(session, photo.file_id)
        if message.text is None:
            return Outcome()
        command = parse_command(message.text)
        if command is not None and self.controller.is_command(command):
            return self.controller.handle_command(session, command)
        return self.controller.handle_text(session, message.text)

    async def _handle_callback(self, callback: TelegramCallbackQuery) -> None:
        try:
            outcome = self.controller.handle_callback(callback.data)
        except Exception:
            _logger.exception(
                "Failed to handle callback", extra={"data": callback.data}
            )
            outcome = Outcome()
        if callback.message:
            await self._deliver(
                callback.message.chat.id, callback.message.message_id, outcome
            )
        await self._best_effort(
            self.telegram_client.answer_callback_query(callback.id),
            "answer callback query",
        )

    async def _deliver(self, chat_id: int, message_id: int, outcome: Outcome) -> None:
        if outcome.delete_inbound:
            await self._best_effort(
                self.telegram_client.delete_message(chat_id, message_id),
                "delete message",
            )
        for reply in outcome.replies:
            if reply.edit:
                await self._best_effort(
                    self.telegram_client.edit_message_text(
                        chat_id,
                        message_id,
                        reply.text,
                        reply_markup=reply.reply_markup,
                        parse_mode=reply.parse_mode,
                    ),
                    "edit message",
                )
                continue
            try:
                await self._send(chat_id, reply)
            except (httpx.HTTPError, OSError):
                _logger.exception("Failed to send reply", extra={"chat_id": chat_id})

    async def _send(self, chat_id: int, reply: Reply) -> None:
        if reply.photo is not None:
            await self.telegram_client.send_photo(
                chat_id,
                reply.photo.read_bytes(),
                reply.photo.name,
                caption=reply.text,
                reply_markup=reply.reply_markup,
            )
            return
        await self.telegram_client.send_message(
            chat_id,
            reply.text,
            reply_markup=reply.reply_markup,
            parse_mode=reply.parse_mode,
        )

    async def _best_effort(self, call: Awaitable[None], action: str) -> None:
        """Await a cosmetic transport call, logging instead of raising."""
        try:
            await call
        except httpx.HTTPError as exc:
            _logger.warning("Failed to %s: %s", action, exc)
