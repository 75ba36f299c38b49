"""Message formatting and Telegram keyboard payloads."""

import re

from plant_catalog.domain.catalog import CategoryStats

MENU_LIST = "🌿 List Species"
MENU_UPLOAD = "📷 Upload"
MENU_RANDOM = "🎲 Random Photo"
MENU_ADD = "➕ Add New"
MENU_CANCEL = "❌ Cancel"
MENU_LOGOUT = "🔓 Logout"

REFRESH_LIST_CALLBACK = "refresh_list"

_MARKDOWN_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!])")


def escape_markdown(text: str) -> str:
    """Escape every MarkdownV2 special character with a backslash."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


def format_category_stats(stats: list[CategoryStats]) -> str:
    """Build one line per species with its photo count."""
    if not stats:
        return "No species in database yet."
    return "\n".join(
        f"🌿 *{entry.name}*: {entry.media_count} images" for entry in stats
    )


def render_category_stats(stats: list[CategoryStats]) -> str:
    """Return the statistics text ready for MarkdownV2 parse mode."""
    return escape_markdown(format_category_stats(stats))


def main_menu_keyboard(full: bool = False) -> dict:
    """Build the persistent reply keyboard with the menu shortcuts."""
    rows = [[MENU_LIST, MENU_UPLOAD], [MENU_RANDOM, MENU_ADD]]
    if full:
        rows.append([MENU_CANCEL, MENU_LOGOUT])
    return _reply_keyboard(rows)


def category_keyboard(names: list[str], columns: int = 2) -> dict:
    """Build a reply keyboard with one button per species."""
    if not names:
        return remove_keyboard()
    rows = [names[start : start + columns] for start in range(0, len(names), columns)]
    return _reply_keyboard(rows)


def done_keyboard() -> dict:
    return _reply_keyboard([["/done"]])


def remove_keyboard() -> dict:
    return {"remove_keyboard": True}


def refresh_keyboard() -> dict:
    """Inline keyboard that re-renders the statistics message."""
    return {
        "inline_keyboard": [
            [{"text": "🔄 Refresh", "callback_data": REFRESH_LIST_CALLBACK}]
        ]
    }


def _reply_keyboard(rows: list[list[str]]) -> dict:
    return {
        "keyboard": [[{"text": label} for label in row] for row in rows],
        "resize_keyboard": True,
    }
