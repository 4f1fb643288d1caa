import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.config import Settings, get_settings
from app.db.base import Base, get_db
from app.main import app
from app.services.transcription import TranscriptionError, TranscriptionJob, get_transcription_client

# 1. In-Memory Database Setup
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

WAV_BYTES = b"RIFF\x24\x00\x00\x00WAVEfmt data"


class FakeTranscriber:
    """Stands in for the provider client; records calls and replays results."""

    def __init__(self):
        self.submitted = []
        self.fetched = []
        self.results = []
        self.error = None

    def submit(self, audio_url):
        if self.error:
            raise self.error
        self.submitted.append(audio_url)
        n = len(self.submitted)
        return TranscriptionJob(id=f"job-{n}", result_url=f"https://provider.test/v2/pre-recorded/job-{n}")

    def fetch_result(self, result_url):
        if self.error:
            raise self.error
        self.fetched.append(result_url)
        return self.results.pop(0) if self.results else {"status": "done"}

    def fail_with(self, message, status_code=None):
        self.error = TranscriptionError(message, status_code=status_code)


@pytest.fixture(scope="function")
def test_settings(tmp_path):
    return Settings(
        DATABASE_URL=SQLALCHEMY_DATABASE_URL,
        JWT_SECRET="test-secret",
        BCRYPT_ROUNDS=4,
        GLADIA_API_KEY="test-key",
        UPLOAD_ROOT=tmp_path / "uploads",
    )


@pytest.fixture(scope="function")
def test_db():
    # Create tables
    Base.metadata.create_all(bind=engine)

    # Create session
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        # Drop tables after test
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def transcriber():
    return FakeTranscriber()


@pytest.fixture(scope="function")
def client(test_db, test_settings, transcriber):
    # Override the dependencies
    def override_get_db():
        try:
            yield test_db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_transcription_client] = lambda: transcriber

    with TestClient(app) as c:
        yield c

    # Reset overrides
    app.dependency_overrides.clear()


def register_and_login(client, email="jane@x.com", password="secret1", full_name="Jane Doe", pseudo="janed"):
    """Create an account and return auth headers for it."""
    resp = client.post(
        "/api/user/register",
        json={
            "fullName": full_name,
            "email": email,
            "pseudo": pseudo,
            "password": password,
            "confirmPassword": password,
        },
    )
    assert resp.status_code == 201, resp.text
    resp = client.post("/api/user/login", json={"email": email, "password": password})
    assert resp.status_code == 201, resp.text
    return {"Authorization": f"Bearer {resp.json()['token']}"}


def upload(client, headers, name="call1", filename="call 1.wav", content=WAV_BYTES, media_type="audio/wav"):
    files = {"file": (filename, content, media_type)}
    data = {"name": name} if name is not None else {}
    return client.post("/api/recording/createRecording", headers=headers, files=files, data=data)


@pytest.fixture(scope="function")
def auth_headers(client):
    return register_and_login(client)


@pytest.fixture(scope="function")
def other_headers(client):
    return register_and_login(client, email="bob@x.com", full_name="Bob Roe", pseudo="bob")


@pytest.fixture(scope="function")
def make_user(client):
    def _make_user(**kwargs):
        return register_and_login(client, **kwargs)

    return _make_user


@pytest.fixture(scope="function")
def upload_file(client):
    def _upload_file(headers, **kwargs):
        return upload(client, headers, **kwargs)

    return _upload_file
