import json
import random
import threading
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from main import create_app
from services.trainer_service import TrainerService

WORDS_CSV = "cat,,кіт\ndog,,пес\n".encode("utf-8")
SENTENCES_JSON = json.dumps({"кіт": "Кіт спить.", "пес": "Пес гавкає."}).encode("utf-8")


@pytest.fixture
def trainer(sql_store):
    return TrainerService(
        sql_store,
        clock=lambda: datetime(2026, 10, 18, 9, 0),
        rng=random.Random(3),
    )


@pytest.fixture
def client(trainer):
    return TestClient(create_app(trainer))


def _import(client, name="animals", words=WORDS_CSV, filename="words.csv", sentences=None):
    files = {"words_file": (filename, words, "application/octet-stream")}
    if sentences is not None:
        files["sentences_file"] = ("phrases.json", sentences, "application/json")
    return client.post("/dictionary/import", data={"name": name}, files=files)


def test_status(client):
    assert client.get("/status").json() == {"status": "ok"}


def test_operations_need_a_dictionary(client):
    assert client.get("/dictionary").status_code == 409
    assert client.post("/session/select/0").status_code == 409

    view = client.get("/session").json()
    assert view["dictionary_name"] is None
    assert view["current_word"] is None


def test_import_selects_first_set(client):
    res = _import(client, sentences=SENTENCES_JSON)

    assert res.status_code == 201
    assert res.json() == {
        "name": "animals",
        "sets": [{"index": 0, "name": "Set 1", "size": 2, "original_set_index": 0}],
    }
    view = client.get("/session").json()
    assert view["selected_set_index"] == 0
    assert view["position"] == 1
    assert view["session_total"] == 2
    assert view["example_sentence"] in {"Кіт спить.", "Пес гавкає."}
    assert client.get("/sentences/stats").json() == {"count": 2}


def test_review_round_trip(client):
    _import(client)

    view = client.post("/session/flip").json()
    assert view["is_flipped"] is True

    view = client.post("/session/know").json()
    assert view["position"] == 2
    assert view["is_flipped"] is False
    assert view["can_undo"] is True
    missed = view["current_word"]

    view = client.post("/session/dont-know").json()
    assert view["finish_variant"] == "finished"
    assert view["unknown_count"] == 1
    assert view["current_word"] is None

    view = client.post("/session/training").json()
    assert view["is_training"] is True
    assert view["current_word"] == missed
    assert view["can_shuffle"] is False

    view = client.post("/session/know").json()
    assert view["finish_variant"] == "training_complete"

    learned = client.get("/dictionary/learned").json()
    assert [item["native"] for item in learned] == ["cat", "dog"]
    assert {item["srs_stage"] for item in learned} == {1}


def test_previous_and_shuffle(client):
    _import(client)
    first = client.get("/session").json()["current_word"]

    client.post("/session/know")
    view = client.post("/session/previous").json()
    assert view["current_word"] == first
    assert view["can_undo"] is False

    view = client.post("/session/shuffle").json()
    assert view["position"] == 1
    assert view["session_total"] == 2


def test_failed_import_keeps_previous_dictionary(client):
    _import(client)
    client.post("/session/know")

    res = _import(client, name="broken", words=b",,\n,,\n")
    assert res.status_code == 400
    assert "No valid words found" in res.json()["detail"]

    res = _import(client, name="broken", words=b"cat,,dog", filename="words.txt")
    assert res.status_code == 400

    assert client.get("/dictionary").json()["name"] == "animals"
    assert client.get("/session").json()["position"] == 2


def test_reset_progress_requires_confirmation(client):
    _import(client)
    client.post("/session/know")

    assert client.post("/dictionary/reset-progress", json={}).status_code == 400
    assert client.get("/dictionary/learned").json() != []

    view = client.post("/dictionary/reset-progress", json={"confirm": True}).json()
    assert view["position"] == 1
    assert view["session_total"] == 2
    assert client.get("/dictionary/learned").json() == []


def test_set_words_and_missing_set(client):
    _import(client)

    words = client.get("/dictionary/sets/0/words").json()
    assert words == [{"native": "cat", "translation": "кіт"}, {"native": "dog", "translation": "пес"}]
    assert client.get("/dictionary/sets/3/words").status_code == 404
    assert client.post("/session/select/3").status_code == 404


def test_return_to_selection(client):
    _import(client)

    view = client.post("/session/return").json()

    assert view["dictionary_name"] == "animals"
    assert view["selected_set_index"] is None
    assert view["current_word"] is None


def test_sentence_upload_and_clear(client):
    res = client.post(
        "/sentences/upload",
        files={"file": ("phrases.csv", "Cat,The cat sleeps.\n".encode("utf-8"), "text/csv")},
    )
    assert res.json() == {"count": 1}

    assert client.delete("/sentences").status_code == 204
    assert client.get("/sentences/stats").json() == {"count": 0}

    res = client.post("/sentences/upload", files={"file": ("phrases.txt", b"x", "text/plain")})
    assert res.status_code == 400


def test_view_waits_for_the_session_lock(trainer):
    trainer.load_grids("animals", [[["cat", "", "кіт"], ["dog", "", "пес"]]])
    views = []
    reader = threading.Thread(target=lambda: views.append(trainer.view()))

    with trainer.session.lock:
        reader.start()
        reader.join(timeout=0.1)
        assert reader.is_alive()
        trainer.session.know()

    reader.join(timeout=5)
    assert not reader.is_alive()
    assert views[0].position == 2
    assert views[0].can_undo
