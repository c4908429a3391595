import base64
import io
import os
import sys
from collections.abc import AsyncGenerator, Awaitable, Callable
from pathlib import Path

import pytest
import pytest_asyncio
from PIL import Image

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

# Configure before the application modules read the environment
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["EXPIRED_PURGE_INTERVAL_SECONDS"] = "0"
os.environ["BASE_URL"] = "http://testserver"

from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app import app
from database import create_database_engine, create_session_factory, get_async_db, init_database
from services.image_store.store import ImageStore, ImageStoreSettings
from services.presentations.access import PresentationAccessController
from services.presentations.repository import PresentationRepository
from services.presentations.service import PresentationService
from shared.presentation_models import SlideInput


def make_image_bytes(width: int = 640, height: int = 360, image_format: str = "PNG") -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height), color=(200, 40, 40)).save(buffer, format=image_format)
    return buffer.getvalue()


def to_data_url(data: bytes, image_format: str = "png") -> str:
    return f"data:image/{image_format};base64,{base64.b64encode(data).decode('ascii')}"


@pytest.fixture
def png_data_url() -> str:
    return to_data_url(make_image_bytes())


@pytest.fixture
def make_slide(png_data_url: str) -> Callable[..., SlideInput]:
    def _make_slide(order: int, title: str | None = None, image_data: str | None = None) -> SlideInput:
        return SlideInput(order=order, title=title or f"Slide {order}", image_data=image_data or png_data_url)

    return _make_slide


@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """Per-test SQLite database with all tables created."""
    test_engine = create_database_engine(f"sqlite+aiosqlite:///{tmp_path / 'deckshare-test.db'}")
    await init_database(test_engine)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return create_session_factory(engine)


@pytest_asyncio.fixture
async def session(session_factory: async_sessionmaker[AsyncSession]) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as db_session:
        yield db_session


@pytest.fixture
def image_store(tmp_path: Path) -> ImageStore:
    return ImageStore(ImageStoreSettings(root=tmp_path / "uploads", base_url="http://testserver"))


@pytest.fixture
def repository(session: AsyncSession) -> PresentationRepository:
    return PresentationRepository(session)


@pytest.fixture
def presentation_service(repository: PresentationRepository, image_store: ImageStore) -> PresentationService:
    return PresentationService(repository, image_store)


@pytest.fixture
def access_controller(repository: PresentationRepository) -> PresentationAccessController:
    return PresentationAccessController(repository)


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
    image_store: ImageStore,
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to the app with the test database and image store."""

    async def _get_test_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as db_session:
            yield db_session

    original_store = app.state.image_store
    app.state.image_store = image_store
    app.dependency_overrides[get_async_db] = _get_test_db
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as http_client:
            yield http_client
    finally:
        app.dependency_overrides.pop(get_async_db, None)
        app.state.image_store = original_store


@pytest.fixture
def register_user(client: AsyncClient) -> Callable[..., Awaitable[dict[str, str]]]:
    """Register an account and return its bearer headers."""

    async def _register(email: str = "owner@example.com", name: str = "Owner", password: str = "password123") -> dict[str, str]:
        response = await client.post(
            "/api/auth/register", json={"name": name, "email": email, "password": password}
        )
        assert response.status_code == 201, response.text
        token = response.json()["data"]["access_token"]
        return {"Authorization": f"Bearer {token}"}

    return _register


@pytest_asyncio.fixture
async def auth_headers(register_user: Callable[..., Awaitable[dict[str, str]]]) -> dict[str, str]:
    return await register_user()
