"""Shared test fixtures."""

import random
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from pathlib import Path

import httpx
import pytest

from plant_catalog.adapters.filesystem_media_repository import (
    FilesystemMediaRepository,
)
from plant_catalog.adapters.json_index_repository import JsonCatalogIndexRepository
from plant_catalog.adapters.telegram_client import TelegramClient
from plant_catalog.config import Settings
from plant_catalog.containers import AppContainer
from plant_catalog.services.auth import AuthGate
from plant_catalog.services.conversation import ConversationController
from plant_catalog.services.media_store import MediaStore
from plant_catalog.services.sessions import InMemorySessionStore
from plant_catalog.services.updates import UpdateDispatcher

PASSWORD = "s3cret"
TIMEOUT_MINUTES = 30


@dataclass
class FakeClock:
    """Controllable clock for expiry and file-name tests."""

    now: datetime = field(default_factory=lambda: datetime(2024, 5, 1, 12, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now += timedelta(**kwargs)


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records outbound calls."""

    messages: list[dict[str, object]] = field(default_factory=list)
    photos: list[dict[str, object]] = field(default_factory=list)
    edits: list[dict[str, object]] = field(default_factory=list)
    deleted: list[tuple[int, int]] = field(default_factory=list)
    callbacks: list[tuple[str, str | None]] = field(default_factory=list)
    commands: list[dict[str, str]] | None = None
    fail_cosmetic: bool = False
    content: bytes = b"fake-image-bytes"

    async def send_message(
        self,
        chat_id: int,
        text: str,
        reply_markup: dict | None = None,
        parse_mode: str | None = None,
    ) -> None:
        self.messages.append(
            {
                "chat_id": chat_id,
                "text": text,
                "reply_markup": reply_markup,
                "parse_mode": parse_mode,
            }
        )

    async def send_photo(
        self,
        chat_id: int,
        photo: bytes,
        filename: str,
        caption: str | None = None,
        reply_markup: dict | None = None,
    ) -> None:
        self.photos.append(
            {
                "chat_id": chat_id,
                "photo": photo,
                "filename": filename,
                "caption": caption,
            }
        )

    async def edit_message_text(
        self,
        chat_id: int,
        message_id: int,
        text: str,
        reply_markup: dict | None = None,
        parse_mode: str | None = None,
    ) -> None:
        if self.fail_cosmetic:
            raise httpx.HTTPError("message is not modified")
        self.edits.append({"chat_id": chat_id, "message_id": message_id, "text": text})

    async def delete_message(self, chat_id: int, message_id: int) -> None:
        if self.fail_cosmetic:
            raise httpx.HTTPError("message can't be deleted")
        self.deleted.append((chat_id, message_id))

    async def answer_callback_query(
        self, callback_query_id: str, text: str | None = None
    ) -> None:
        self.callbacks.append((callback_query_id, text))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def get_updates(
        self, offset: int | None = None, timeout: int = 30
    ) -> list[dict[str, object]]:
        return []

    async def download_file_bytes(self, file_id: str) -> bytes:
        return self.content

    @property
    def texts(self) -> list[str]:
        return [str(message["text"]) for message in self.messages]


@dataclass
class FakeDownloader:
    """Photo downloader returning static bytes or failing on demand."""

    content: bytes = b"fake-image-bytes"
    error: Exception | None = None
    requested: list[str] = field(default_factory=list)

    async def download_file_bytes(self, file_id: str) -> bytes:
        self.requested.append(file_id)
        if self.error is not None:
            raise self.error
        return self.content


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    return tmp_path / "storage"


@pytest.fixture
def index_file(tmp_path: Path) -> Path:
    return tmp_path / "plants.json"


@pytest.fixture
def media_store(storage_root: Path, index_file: Path, clock: FakeClock) -> MediaStore:
    index_repository = JsonCatalogIndexRepository(index_file)
    media_repository = FilesystemMediaRepository(storage_root)
    index_repository.initialize()
    media_repository.initialize()
    return MediaStore(
        index_repository=index_repository,
        media_repository=media_repository,
        clock=clock,
        rng=random.Random(1234),
    )


@pytest.fixture
def auth_gate() -> AuthGate:
    return AuthGate(password=PASSWORD, timeout_minutes=TIMEOUT_MINUTES)


@pytest.fixture
def downloader() -> FakeDownloader:
    return FakeDownloader()


@pytest.fixture
def controller(
    media_store: MediaStore,
    auth_gate: AuthGate,
    downloader: FakeDownloader,
    clock: FakeClock,
) -> ConversationController:
    return ConversationController(
        media_store=media_store,
        auth_gate=auth_gate,
        downloader=downloader,
        clock=clock,
    )


@pytest.fixture
def settings(storage_root: Path, index_file: Path) -> Settings:
    return Settings(
        bot_token="test-token",
        bot_password=PASSWORD,
        admin_timeout=TIMEOUT_MINUTES,
        storage_path=storage_root,
        db_file=index_file,
        environment="test",
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def container(
    settings: Settings,
    media_store: MediaStore,
    auth_gate: AuthGate,
    clock: FakeClock,
    telegram_client: FakeTelegramClient,
) -> AppContainer:
    controller = ConversationController(
        media_store=media_store,
        auth_gate=auth_gate,
        downloader=telegram_client,
        clock=clock,
    )
    session_store = InMemorySessionStore()
    dispatcher = UpdateDispatcher(
        controller=controller,
        session_store=session_store,
        telegram_client=telegram_client,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        telegram_client=telegram_client,
        media_store=media_store,
        auth_gate=auth_gate,
        session_store=session_store,
        conversation_controller=controller,
        update_dispatcher=dispatcher,
        close_resources=close_resources,
    )
