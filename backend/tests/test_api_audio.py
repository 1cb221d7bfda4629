from fastapi.testclient import TestClient

from app.db.database import SessionLocal
from app.main import app
from app.models import Audio, Feedback

client = TestClient(app)


def add_feedback(audio_id, preferred=None, comments=None, times=1):
    with SessionLocal() as db:
        for _ in range(times):
            db.add(Feedback(audio_id=audio_id, preferred_transcription_id=preferred, user_comments=comments))
        db.commit()


def test_get_audio_with_transcriptions_and_votes(make_audio, make_model, make_transcription):
    audio_id = make_audio("clip.wav")
    whisper = make_model("Whisper")
    peshawar = make_model("Peshawar")
    t_whisper = make_transcription(audio_id, whisper, "whisper text")
    t_peshawar = make_transcription(audio_id, peshawar, "peshawar text")

    add_feedback(audio_id, t_peshawar, times=2)
    add_feedback(audio_id, t_whisper)
    add_feedback(audio_id, None, comments="audio is noisy")

    response = client.get(f"/api/audio/{audio_id}")

    assert response.status_code == 200
    assert response.headers["cache-control"] == "no-store, max-age=0"
    data = response.json()
    assert data["audio"]["id"] == audio_id
    assert data["audio"]["audio_name"] == "clip.wav"
    assert [t["model"]["model_name"] for t in data["transcriptions"]] == ["Peshawar", "Whisper"]
    assert data["transcriptions"][0]["text"] == "peshawar text"
    assert data["voteCounts"] == {t_peshawar: 2, t_whisper: 1}
    # comment-only feedback still counts towards the total
    assert data["totalVotes"] == 4
    assert data["votePercentages"] == {t_peshawar: 50, t_whisper: 25}


def test_votes_for_other_audios_are_ignored(make_audio, make_model, make_transcription):
    audio_id = make_audio("a.wav")
    other_id = make_audio("b.wav")
    model_id = make_model()
    transcription_id = make_transcription(audio_id, model_id)
    add_feedback(other_id, None, times=3)
    add_feedback(audio_id, transcription_id)

    data = client.get(f"/api/audio/{audio_id}").json()

    assert data["totalVotes"] == 1
    assert data["voteCounts"] == {transcription_id: 1}
    assert data["votePercentages"] == {transcription_id: 100}


def test_audio_without_votes(make_audio, make_model, make_transcription):
    audio_id = make_audio()
    transcription_id = make_transcription(audio_id, make_model())

    data = client.get(f"/api/audio/{audio_id}").json()

    assert data["totalVotes"] == 0
    assert data["voteCounts"] == {}
    assert data["votePercentages"] == {transcription_id: 0}


def test_unknown_audio_is_404():
    response = client.get("/api/audio/does-not-exist")
    assert response.status_code == 404
    assert response.json() == {"error": "Audio not found"}


def test_flip_validated_flag(make_audio):
    audio_id = make_audio()

    response = client.patch(f"/api/audio/{audio_id}", json={"is_validated": True})

    assert response.status_code == 200
    assert response.json()["is_validated"] is True
    with SessionLocal() as db:
        assert db.get(Audio, audio_id).is_validated is True

    response = client.patch(f"/api/audio/{audio_id}", json={"is_validated": False})
    assert response.json()["is_validated"] is False


def test_flip_validated_requires_flag(make_audio):
    audio_id = make_audio()
    response = client.patch(f"/api/audio/{audio_id}", json={})
    assert response.status_code == 400


def test_flip_validated_unknown_audio():
    response = client.patch("/api/audio/missing", json={"is_validated": True})
    assert response.status_code == 404
