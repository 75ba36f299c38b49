"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Commands shown in the Telegram command menu."""

    LIST = TelegramCommand("list", "🌿 View all plant species")
    RANDOM = TelegramCommand("random", "🎲 Get a random photo")
    ADD_SPECIES = TelegramCommand("add_species", "➕ Create new species")
    UPLOAD = TelegramCommand("upload", "📷 Upload photos")
    LOGOUT = TelegramCommand("logout", "🔓 End admin session")
    CANCEL = TelegramCommand("cancel", "❌ Cancel action")


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str) -> str | None:
    """Return the command name of ``/name`` or ``/name@bot`` text, if any."""
    if not text.startswith("/"):
        return None
    head = text[1:].split(" ", maxsplit=1)[0]
    name = head.split("@", maxsplit=1)[0]
    return name or None
