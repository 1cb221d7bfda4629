import io

import pytest
from fastapi import UploadFile

from app.exceptions import StorageError
from app.utils import storage


def test_sanitize_filename():
    assert storage.sanitize_filename("my clip (1).wav") == "my_clip__1_.wav"
    assert storage.sanitize_filename("ok-name.v2.mp3") == "ok-name.v2.mp3"
    assert storage.sanitize_filename("صدا.wav") == "___.wav"


def test_build_storage_path_is_timestamp_prefixed():
    assert storage.build_storage_path("a b.wav", timestamp_ms=1700000000123) == "uploads/1700000000123_a_b.wav"


def test_public_url_points_at_media_route():
    assert storage.public_url("uploads/1_a.wav") == "/api/media/uploads/1_a.wav"


def test_resolve_object_refuses_paths_outside_bucket(bucket):
    assert storage.resolve_object("uploads/1_a.wav") == (bucket / "uploads" / "1_a.wav").resolve()
    for bad in ("../secret.txt", "uploads/../../secret.txt", ""):
        with pytest.raises(StorageError) as excinfo:
            storage.resolve_object(bad)
        assert excinfo.value.status_code == 400


def test_remove_missing_object_is_not_an_error(bucket):
    storage.remove_object("uploads/never-there.wav")


def _upload(data: bytes, name: str = "clip.wav") -> UploadFile:
    return UploadFile(file=io.BytesIO(data), filename=name)


@pytest.mark.asyncio
async def test_save_object_streams_into_bucket(bucket):
    written = await storage.save_object("uploads/1_clip.wav", _upload(b"RIFF" * 5000))

    assert written == 20000
    assert (bucket / "uploads" / "1_clip.wav").read_bytes() == b"RIFF" * 5000


@pytest.mark.asyncio
async def test_save_object_refuses_to_overwrite(bucket):
    await storage.save_object("uploads/1_clip.wav", _upload(b"first"))

    with pytest.raises(StorageError) as excinfo:
        await storage.save_object("uploads/1_clip.wav", _upload(b"second"))

    assert "already exists" in excinfo.value.detail
    assert (bucket / "uploads" / "1_clip.wav").read_bytes() == b"first"


@pytest.mark.asyncio
async def test_save_object_enforces_size_limit(bucket):
    with pytest.raises(storage.ObjectTooLarge) as excinfo:
        await storage.save_object("uploads/2_big.wav", _upload(b"x" * 20000), max_bytes=10000)

    assert excinfo.value.status_code == 413
    assert not (bucket / "uploads" / "2_big.wav").exists()
