"""Long-polling entrypoint: ``python -m plant_catalog.main``."""

import asyncio
import logging

import httpx
from pydantic import ValidationError

from plant_catalog.api.telegram_models import TelegramUpdate
from plant_catalog.app_logging import configure_logging
from plant_catalog.containers import AppContainer, build_container
from plant_catalog.telegram_commands import telegram_commands

_logger = logging.getLogger(__name__)

_RETRY_DELAY_SECONDS = 5


async def poll_once(container: AppContainer, offset: int | None) -> int | None:
    """Fetch and dispatch one batch of updates; return the next offset."""
    updates = await container.telegram_client.get_updates(
        offset=offset, timeout=container.settings.polling_timeout
    )
    for raw in updates:
        offset = int(raw["update_id"]) + 1
        try:
            update = TelegramUpdate.model_validate(raw)
        except ValidationError:
            _logger.warning("Skipping malformed update %s", raw.get("update_id"))
            continue
        await container.update_dispatcher.dispatch(update)
    return offset


async def run_polling(container: AppContainer) -> None:
    """Poll Telegram for updates until cancelled."""
    try:
        await container.telegram_client.set_my_commands(telegram_commands())
    except httpx.HTTPError:
        _logger.exception("Failed to sync Telegram bot commands")
    _logger.info("Bot running with admin sessions.")
    offset: int | None = None
    try:
        while True:
            try:
                offset = await poll_once(container, offset)
            except (httpx.HTTPError, RuntimeError):
                _logger.exception("Polling failed, retrying")
                await asyncio.sleep(_RETRY_DELAY_SECONDS)
    finally:
        await container.close_resources()


def main() -> None:
    """Run the bot with long polling."""
    configure_logging()
    try:
        asyncio.run(run_polling(build_container()))
    except KeyboardInterrupt:
        _logger.info("Bot stopped.")


if __name__ == "__main__":
    main()
