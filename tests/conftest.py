"""Test fixtures: a throwaway SQLite database per test and fake push/media services."""

import os

import pytest
from fastapi.testclient import TestClient

os.environ.setdefault("ENABLE_FILE_LOGGING", "false")
os.environ.setdefault("ENABLE_REQUEST_LOGGING", "false")

from core.config import Settings  # noqa: E402
from core.context import ServiceContext  # noqa: E402
from core.database import build_engine, build_session_factory, create_tables  # noqa: E402
from services.media_service import MediaService  # noqa: E402
from services.push_service import MulticastResult, PushFailure, PushService  # noqa: E402

from tests.helpers import API_KEY  # noqa: E402


class FakePushService(PushService):
    """Records sends instead of calling FCM."""

    def __init__(self, invalid_tokens=(), fail_with=None):
        super().__init__("fake-service-account.json", timeout=1.0)
        self.invalid_tokens = set(invalid_tokens)
        self.fail_with = fail_with
        self.multicasts = []
        self.singles = []

    async def send_multicast(self, tokens, title, body):
        if self.fail_with:
            raise self.fail_with
        self.multicasts.append((list(tokens), title, body))
        failures = [
            PushFailure(token=t, code="NOT_FOUND", error="Requested entity was not found.", invalid=True)
            for t in tokens if t in self.invalid_tokens
        ]
        return MulticastResult(
            attempted=len(tokens),
            sent=len(tokens) - len(failures),
            failed=len(failures),
            failures=failures,
        )

    async def send_one(self, token, title, body):
        if self.fail_with:
            raise self.fail_with
        self.singles.append((token, title, body))
        return f"projects/ultracare/messages/{len(self.singles)}"


class FakeMediaService(MediaService):
    """Real size checks, no Cloudinary round trip."""

    def __init__(self, max_bytes=1024, fail=False):
        super().__init__("demo", "key", "secret", folder="tests/falls", max_bytes=max_bytes, timeout=1.0)
        self.fail = fail
        self.uploads = []

    def _upload(self, data, filename):
        if self.fail:
            raise RuntimeError("cloudinary unavailable")
        self.uploads.append((data, filename))
        return {
            "secure_url": f"https://res.cloudinary.com/demo/video/upload/{self.folder}/{filename}",
            "public_id": f"{self.folder}/{filename}",
        }


@pytest.fixture
def settings(tmp_path):
    return Settings(
        ENV="development",
        DATABASE_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        API_KEY=API_KEY,
        ADMIN_USERNAME="staff",
        ADMIN_PASSWORD="staff-password",
        ENABLE_OFFLINE_SWEEP=False,
        PUSH_ON_ALERT=False,
        CREATE_TABLES_ON_STARTUP=True,
        ENABLE_FILE_LOGGING=False,
        ENABLE_REQUEST_LOGGING=False,
    )


@pytest.fixture
def push_service():
    return FakePushService()


@pytest.fixture
def media_service():
    return FakeMediaService()


@pytest.fixture
def context(settings, push_service, media_service):
    engine = build_engine(settings.database_url)
    return ServiceContext(
        settings=settings,
        engine=engine,
        session_factory=build_session_factory(engine),
        push_service=push_service,
        media_service=media_service,
    )


@pytest.fixture
def client(context):
    from main import create_app

    with TestClient(create_app(context)) as test_client:
        yield test_client


@pytest.fixture
async def db(context):
    """Session for calling services directly, outside the HTTP stack."""
    await create_tables(context.engine)
    async with context.session_factory() as session:
        yield session
    await context.engine.dispose()


@pytest.fixture
def api_headers():
    return {"x-api-key": API_KEY}
