from fastapi.testclient import TestClient

from app.db.database import SessionLocal
from app.main import app
from app.models import Feedback, Model, Transcription

client = TestClient(app)


def test_list_models_ordered_by_name(make_model):
    make_model("Whisper", "OpenAI Whisper large-v3")
    make_model("Peshawar")

    response = client.get("/api/models")

    assert response.status_code == 200
    data = response.json()
    assert [m["model_name"] for m in data] == ["Peshawar", "Whisper"]
    assert set(data[0]) == {"id", "model_name", "description"}
    assert data[1]["description"] == "OpenAI Whisper large-v3"


def test_create_model():
    response = client.post("/api/models", json={"model_name": "  Peshawar ", "description": "fine-tuned"})

    assert response.status_code == 200
    data = response.json()
    assert data["model_name"] == "Peshawar"
    assert data["description"] == "fine-tuned"
    with SessionLocal() as db:
        assert db.query(Model).count() == 1


def test_create_model_requires_name():
    for body in ({}, {"model_name": ""}, {"model_name": "   ", "description": "x"}):
        response = client.post("/api/models", json=body)
        assert response.status_code == 400
        assert response.json() == {"error": "Model name is required"}
    with SessionLocal() as db:
        assert db.query(Model).count() == 0


def test_update_model(make_model):
    model_id = make_model("Whisper")

    response = client.patch(f"/api/models/{model_id}", json={"description": "v3"})
    assert response.status_code == 200
    assert response.json()["model_name"] == "Whisper"
    assert response.json()["description"] == "v3"

    response = client.patch(f"/api/models/{model_id}", json={"model_name": "Whisper v3"})
    assert response.json()["model_name"] == "Whisper v3"
    assert response.json()["description"] == "v3"


def test_update_model_rejects_blank_name(make_model):
    model_id = make_model("Whisper")
    response = client.patch(f"/api/models/{model_id}", json={"model_name": ""})
    assert response.status_code == 400


def test_update_unknown_model_is_404():
    response = client.patch("/api/models/missing", json={"model_name": "x"})
    assert response.status_code == 404
    assert response.json() == {"error": "Model not found"}


def test_delete_model_cascades_to_transcriptions(make_audio, make_model, make_transcription):
    audio_id = make_audio()
    doomed = make_model("Doomed")
    kept = make_model("Kept")
    doomed_transcription = make_transcription(audio_id, doomed)
    make_transcription(audio_id, kept)
    with SessionLocal() as db:
        db.add(Feedback(audio_id=audio_id, preferred_transcription_id=doomed_transcription))
        db.commit()

    response = client.delete(f"/api/models/{doomed}")

    assert response.status_code == 200
    assert response.json() == {"success": True}
    with SessionLocal() as db:
        assert [m.id for m in db.query(Model).all()] == [kept]
        assert [t.model_id for t in db.query(Transcription).all()] == [kept]
        # the vote survives, it just no longer points anywhere
        feedback = db.query(Feedback).one()
        assert feedback.preferred_transcription_id is None


def test_delete_unknown_model_is_404():
    response = client.delete("/api/models/missing")
    assert response.status_code == 404
