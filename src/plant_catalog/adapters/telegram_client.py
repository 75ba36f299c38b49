"""Telegram Bot API client adapter."""

import json
from dataclasses import dataclass
from typing import Protocol

import httpx

_API_BASE = "https://api.telegram.org"


class TelegramClient(Protocol):
    """Interface for Telegram API interactions."""

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: dict | None = None,
        parse_mode: str | None = None,
    ) -> None:
        """Send a text message to a Telegram chat."""

    async def send_photo(
        self,
        chat_id: int,
        photo: bytes,
        filename: str,
        caption: str | None = None,
        reply_markup: dict | None = None,
    ) -> None:
        """Upload a photo to a Telegram chat."""

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: dict | None = None,
        parse_mode: str | None = None,
    ) -> None:
        """Replace the text of a sent message."""

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        """Delete a message from a chat."""

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        """Answer a Telegram callback query."""

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        """Set the bot command list."""

    async def get_updates(
        self, offset: int | None = None, timeout: int = 30
    ) -> list[dict[str, object]]:
        """Long-poll for pending updates."""

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Download a Telegram file and return its bytes."""


@dataclass
class HttpxTelegramClient:
    """Telegram client implemented with httpx."""

    bot_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramClient":
        """Create a Telegram client with a managed httpx session."""
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    def _method_url(self, method: str) -> str:
        return f"{_API_BASE}/bot{self.bot_token}/{method}"

    async def _call(self, method: str, payload: dict[str, object]) -> object:
        response = await self.http_client.post(
            self._method_url(method), json=payload, timeout=10
        )
        response.raise_for_status()
        return response.json().get("result")

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: dict | None = None,
        parse_mode: str | None = None,
    ) -> None:
        """Send a message using Telegram's sendMessage API."""
        payload: dict[str, object] = {"chat_id": chat_id, "text": text}
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        await self._call("sendMessage", payload)

    async def send_photo(
        self,
        chat_id: int,
        photo: bytes,
        filename: str,
        caption: str | None = None,
        reply_markup: dict | None = None,
    ) -> None:
        """Upload photo bytes with sendPhoto as multipart form data."""
        data: dict[str, str] = {"chat_id": str(chat_id)}
        if caption is not None:
            data["caption"] = caption
        if reply_markup is not None:
            data["reply_markup"] = json.dumps(reply_markup)
        response = await self.http_client.post(
            self._method_url("sendPhoto"),
            data=data,
            files={"photo": (filename, photo, "image/jpeg")},
            timeout=30,
        )
        response.raise_for_status()

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: dict | None = None,
        parse_mode: str | None = None,
    ) -> None:
        """Edit a message using Telegram's editMessageText API."""
        payload: dict[str, object] = {
            "chat_id": chat_id,
            "message_id": message_id,
            "text": text,
        }
        if reply_markup is not None:
            payload["reply_markup"] = reply_markup
        if parse_mode is not None:
            payload["parse_mode"] = parse_mode
        await self._call("editMessageText", payload)

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        """Delete a message using Telegram's deleteMessage API."""
        await self._call(
            "deleteMessage", {"chat_id": chat_id, "message_id": message_id}
        )

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        """Answer a callback query using Telegram's API."""
        payload: dict[str, object] = {"callback_query_id": callback_query_id}
        if text is not None:
            payload["text"] = text
        await self._call("answerCallbackQuery", payload)

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        """Set the bot command list."""
        await self._call("setMyCommands", {"commands": commands})

    async def get_updates(
        self, offset: int | None = None, timeout: int = 30
    ) -> list[dict[str, object]]:
        """Long-poll getUpdates; the HTTP timeout outlasts the poll timeout."""
        params: dict[str, object] = {"timeout": timeout}
        if offset is not None:
            params["offset"] = offset
        response = await self.http_client.get(
            self._method_url("getUpdates"), params=params, timeout=timeout + 10
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise RuntimeError("Telegram getUpdates failed")
        return payload["result"]

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Resolve a file path with getFile and download its bytes."""
        response = await self.http_client.get(
            self._method_url("getFile"), params={"file_id": file_id}, timeout=10
        )
        response.raise_for_status()
        payload = response.json()
        if not payload.get("ok"):
            raise RuntimeError("Telegram getFile failed")
        file_path = payload["result"]["file_path"]
        download_url = f"{_API_BASE}/file/bot{self.bot_token}/{file_path}"
        file_response = await self.http_client.get(download_url, timeout=20)
        file_response.raise_for_status()
        return file_response.content

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
