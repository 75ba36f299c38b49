"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from plant_catalog.adapters.filesystem_media_repository import (
    FilesystemMediaRepository,
)
from plant_catalog.adapters.json_index_repository import JsonCatalogIndexRepository
from plant_catalog.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from plant_catalog.config import Settings
from plant_catalog.services.auth import AuthGate
from plant_catalog.services.conversation import ConversationController
from plant_catalog.services.media_store import MediaStore
from plant_catalog.services.sessions import InMemorySessionStore, SessionStore
from plant_catalog.services.updates import UpdateDispatcher


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    media_store: MediaStore
    auth_gate: AuthGate
    session_store: SessionStore
    conversation_controller: ConversationController
    update_dispatcher: UpdateDispatcher
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    index_repository = JsonCatalogIndexRepository(resolved_settings.db_file)
    media_repository = FilesystemMediaRepository(resolved_settings.storage_path)
    media_repository.initialize()
    index_repository.initialize()
    media_store = MediaStore(
        index_repository=index_repository,
        media_repository=media_repository,
    )
    auth_gate = AuthGate(
        password=resolved_settings.bot_password,
        timeout_minutes=resolved_settings.admin_timeout,
    )
    telegram_client = HttpxTelegramClient.create(resolved_settings.bot_token)
    controller = ConversationController(
        media_store=media_store,
        auth_gate=auth_gate,
        downloader=telegram_client,
        debug_errors=resolved_settings.environment == "local",
    )
    session_store = InMemorySessionStore()
    dispatcher = UpdateDispatcher(
        controller=controller,
        session_store=session_store,
        telegram_client=telegram_client,
    )

    async def close_resources() -> None:
        await telegram_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        media_store=media_store,
        auth_gate=auth_gate,
        session_store=session_store,
        conversation_controller=controller,
        update_dispatcher=dispatcher,
        close_resources=close_resources,
    )
