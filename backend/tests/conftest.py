"""Shared fixtures: a fresh schema per test and a temporary storage bucket."""

import pytest

from app.db.base import Base
from app.db.database import SessionLocal, engine
from app.models import Audio, Model, Transcription
from app.utils import storage


@pytest.fixture(autouse=True)
def fresh_schema():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def bucket(tmp_path, monkeypatch):
    """Point the storage bucket at a temporary directory."""
    bucket_dir = tmp_path / "bucket"
    bucket_dir.mkdir()
    monkeypatch.setattr(storage, "BUCKET_DIR", bucket_dir)
    return bucket_dir


def add_rows(*rows):
    """Persist ``rows`` in their own session and return their ids."""
    with SessionLocal() as db:
        db.add_all(rows)
        db.commit()
        return [row.id for row in rows]


@pytest.fixture
def make_audio():
    def _make(name="clip.wav", **kwargs):
        fields = {
            "audio_name": name,
            "storage_path": f"uploads/1_{name}",
            "storage_url": f"/api/media/uploads/1_{name}",
            "mime_type": "audio/wav",
            "language_tag": "pashto",
        }
        fields.update(kwargs)
        return add_rows(Audio(**fields))[0]

    return _make


@pytest.fixture
def make_model():
    def _make(name="Whisper", description=None):
        return add_rows(Model(model_name=name, description=description))[0]

    return _make


@pytest.fixture
def make_transcription():
    def _make(audio_id, model_id, text="some words here"):
        return add_rows(Transcription(audio_id=audio_id, model_id=model_id, text=text, word_count=len(text.split())))[0]

    return _make
