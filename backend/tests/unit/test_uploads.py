import io

import pytest
from fastapi import HTTPException, UploadFile
from starlette.datastructures import Headers

from app.core.config import Settings
from app.services.uploads import (
    build_stored_filename,
    discard_file,
    public_file_url,
    store_upload,
)


@pytest.fixture
def settings(tmp_path):
    return Settings(UPLOAD_ROOT=tmp_path / "uploads", MAX_UPLOAD_BYTES=64)


def make_upload(data: bytes, filename: str = "my call.wav", content_type: str = "audio/wav"):
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


def test_stored_filename_replaces_whitespace():
    assert build_stored_filename("my  long call.wav", now_ms=1700) == "1700-my_long_call.wav"


def test_stored_filename_drops_directories():
    assert build_stored_filename("../../etc/evil name.mp3", now_ms=1) == "1-evil_name.mp3"
    assert build_stored_filename("C:\\Users\\me\\take 2.webm", now_ms=1) == "1-take_2.webm"


def test_stored_filename_without_extension():
    assert build_stored_filename("voice memo", now_ms=5) == "5-voice_memo"


def test_public_file_url_strips_upload_root():
    settings = Settings(UPLOAD_ROOT="/tmp/uploads", PUBLIC_UPLOAD_PREFIX="/uploads")
    url = public_file_url(
        "http://api.example.com/", "/tmp/uploads/recordings/1-a.wav", settings
    )
    assert url == "http://api.example.com/uploads/recordings/1-a.wav"


def test_public_file_url_outside_root_is_kept():
    settings = Settings(UPLOAD_ROOT="/tmp/uploads")
    url = public_file_url("http://h/", "/srv/other/a.wav", settings)
    assert url == "http://h/srv/other/a.wav"


def test_discard_missing_file_is_silent(tmp_path):
    discard_file(tmp_path / "nope.wav")


@pytest.mark.asyncio
async def test_store_upload_writes_file(settings):
    path = await store_upload(make_upload(b"RIFF1234WAVE"), settings)
    assert path.parent == settings.recordings_dir
    assert path.name.endswith("-my_call.wav")
    assert path.read_bytes() == b"RIFF1234WAVE"


@pytest.mark.asyncio
@pytest.mark.parametrize("content_type", ["audio/x-wav", "audio/vnd.wave", "audio/mpeg", "video/mp4", "video/webm"])
async def test_store_upload_accepts_allowed_types(settings, content_type):
    path = await store_upload(make_upload(b"data", content_type=content_type), settings)
    assert path.exists()


@pytest.mark.asyncio
async def test_store_upload_rejects_other_types(settings):
    with pytest.raises(HTTPException) as exc:
        await store_upload(make_upload(b"data", "notes.txt", "text/plain"), settings)
    assert exc.value.status_code == 400
    assert exc.value.detail == "Only audio and video files are allowed"
    assert not settings.recordings_dir.exists() or not any(settings.recordings_dir.iterdir())


@pytest.mark.asyncio
async def test_store_upload_rejects_missing_file(settings):
    with pytest.raises(HTTPException) as exc:
        await store_upload(None, settings)
    assert exc.value.status_code == 400


@pytest.mark.asyncio
async def test_store_upload_rejects_oversized_file(settings):
    with pytest.raises(HTTPException) as exc:
        await store_upload(make_upload(b"x" * 65), settings)
    assert exc.value.status_code == 400
    assert exc.value.detail == "File too large"
    # Partial file is removed
    assert list(settings.recordings_dir.iterdir()) == []


@pytest.mark.asyncio
async def test_store_upload_accepts_file_at_limit(settings):
    path = await store_upload(make_upload(b"x" * 64), settings)
    assert path.stat().st_size == 64
